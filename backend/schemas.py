"""
Pydantic request/response schemas for the Rebound Edge API.

Responses are built from the core's frozen dataclasses with
``from_attributes`` so the API shape tracks the DTOs without hand-copying
fields.
"""

from __future__ import annotations

from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, StrictInt, field_validator


# ---------------------------------------------------------------------------
# Evaluation request
# ---------------------------------------------------------------------------

class ReboundEvaluationRequest(BaseModel):
    """
    Payload for POST /api/rebounds/evaluate.

    threshold must be a whole number: a 9.5 line is requested as 10.
    sportsbook_odds is optional; without it no stake is sized.
    """

    athlete: str = Field(..., min_length=1, max_length=120, description="Athlete display name")
    threshold: StrictInt = Field(..., ge=1, description="Price P(TRB >= threshold)")
    sportsbook_odds: Optional[float] = Field(
        None,
        allow_inf_nan=False,
        description="Sportsbook American odds for the over (e.g. -120)",
    )

    @field_validator("athlete")
    @classmethod
    def strip_athlete(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("athlete cannot be blank")
        return v

    @field_validator("sportsbook_odds")
    @classmethod
    def validate_american_odds(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and v == 0:
            raise ValueError("sportsbook_odds cannot be 0")
        return v

    model_config = {
        "json_schema_extra": {
            "example": {
                "athlete": "Johni Broome",
                "threshold": 10,
                "sportsbook_odds": -120,
            }
        }
    }


# ---------------------------------------------------------------------------
# Evaluation response
# ---------------------------------------------------------------------------

class RatesResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    lambda_orb: float
    lambda_drb: float


class GamePointResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    game_date: date
    rebounds: Optional[int]
    met_threshold: bool


class ProbabilityResponse(BaseModel):
    """Threshold probability plus the chart series."""
    model_config = ConfigDict(from_attributes=True)

    threshold: int
    probability: float
    max_trb_considered: int
    rates: RatesResponse
    untruncated_probability: Optional[float]
    historical_hit_rate: Optional[float]
    games: list[GamePointResponse]


class OddsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    decimal_odds: float
    american_odds: float


class StakeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    sportsbook_american_odds: float
    net_payout: float
    implied_probability: float
    kelly_fraction: float
    quarter_kelly_percent: float


class ReboundEvaluationResponse(BaseModel):
    """Full result of POST /api/rebounds/evaluate."""
    model_config = ConfigDict(from_attributes=True)

    athlete: str
    probability: ProbabilityResponse
    odds: OddsResponse
    stake: Optional[StakeResponse]


# ---------------------------------------------------------------------------
# Athlete lookup
# ---------------------------------------------------------------------------

class AthleteSearchResponse(BaseModel):
    """Response for GET /api/athletes."""
    query: str
    total: int
    athletes: list[str]


class GameLogEntryResponse(BaseModel):
    """One box-score row in GET /api/athletes/{athlete}/games."""
    model_config = ConfigDict(from_attributes=True)

    game_date: date
    orb: Optional[int]
    drb: Optional[int]
    rebs: Optional[int]
    opponent: Optional[str]
    minutes: Optional[float]
    starter: Optional[bool]


class GameLogResponse(BaseModel):
    athlete: str
    games: list[GameLogEntryResponse]


class ErrorResponse(BaseModel):
    """Body of every 404 / 422 raised by the pipeline."""
    error: str
    message: str
