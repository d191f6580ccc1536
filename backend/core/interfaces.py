"""Data-transfer objects and the injected game-log repository contract.

Everything that flows through the rebound pricing pipeline is defined here:

* :class:`GameLogEntry` — one historical box-score row for one athlete.
  Owned by the data-loading layer; the core only reads it.
* :class:`RateParameters`, :class:`ProbabilityResult`, :class:`OddsResult`,
  :class:`StakeResult` — per-stage outputs, created fresh per evaluation.
* :class:`ReboundEvaluation` — the composite returned to the presentation
  layer in a single synchronous call.
* :class:`GameLogRepository` — the read-only lookup the evaluator is built
  on.  The loader decides where the rows come from (hoopR release file,
  local CSV, test fixture); the core never builds or caches one itself.

Design choices
--------------
* Result DTOs are frozen and slotted so they can be passed across request
  threads and serialised without defensive copies.
* :class:`GameLogRepository` is an ABC rather than a ``typing.Protocol``
  so concrete repositories inherit the contract explicitly and
  ``isinstance`` checks work at the service boundary.

Run tests with::

    pytest tests/test_rebound_evaluator.py -v
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from typing import Sequence


# ---------------------------------------------------------------------------
# Input rows
# ---------------------------------------------------------------------------


@dataclass(slots=True, frozen=True)
class GameLogEntry:
    """One historical game for one athlete.

    Only ``game_date``, ``orb``, ``drb`` and ``rebs`` are read by the core.
    ``None`` marks a missing value; the rate estimator drops missing values
    per field, never row-wise.

    Attributes:
        game_date: Date the game was played.
        orb: Offensive rebounds (box-score column ``or``).
        drb: Defensive rebounds (box-score column ``dr``).
        rebs: Total rebounds.  Usually ``orb + drb`` but taken as reported.

        --- Context (display only) ---
        game_id: Source game identifier.
        athlete_id: Source athlete identifier.
        athlete_name: Display name, the repository key.
        team: Athlete's team location.
        opponent: Opponent team location.
        minutes: Minutes played.
        position: Position abbreviation.
        starter: Whether the athlete started.
    """

    game_date: date
    orb: int | None
    drb: int | None
    rebs: int | None

    game_id: int | None = None
    athlete_id: int | None = None
    athlete_name: str = ""
    team: str | None = None
    opponent: str | None = None
    minutes: float | None = None
    position: str | None = None
    starter: bool | None = None


# ---------------------------------------------------------------------------
# Stage outputs
# ---------------------------------------------------------------------------


@dataclass(slots=True, frozen=True)
class RateParameters:
    """Per-game Poisson rates estimated as historical sample means."""

    lambda_orb: float
    lambda_drb: float

    @property
    def lambda_trb(self) -> float:
        """Combined rate; TRB ~ Poisson(λ_orb + λ_drb) when ORB ⟂ DRB."""
        return self.lambda_orb + self.lambda_drb


@dataclass(slots=True, frozen=True)
class GamePoint:
    """One bar of the rebounds-over-time chart."""

    game_date: date
    rebounds: int | None
    met_threshold: bool


@dataclass(slots=True, frozen=True)
class ProbabilityResult:
    """Output of the threshold probability calculator.

    Attributes:
        threshold: The queried TRB line (``TRB >= threshold``).
        probability: P(TRB ≥ threshold) summed over the truncated support
            ``[threshold, max_trb_considered]``.  This is the priced value.
        max_trb_considered: ``round(1.75 × max historical rebs)`` — upper
            bound of the tail sum.
        rates: The rates the probability was computed from.
        games: Chart series, one point per historical game in date order.
        untruncated_probability: Closed-form ``P(Poisson(λ_trb) ≥ threshold)``
            over the infinite tail.  Diagnostic only; never priced.
        historical_hit_rate: Share of games with known ``rebs`` that met the
            threshold, or ``None`` if no game has a known ``rebs``.
    """

    threshold: int
    probability: float
    max_trb_considered: int
    rates: RateParameters
    games: tuple[GamePoint, ...] = ()
    untruncated_probability: float | None = None
    historical_hit_rate: float | None = None

    @property
    def truncation_gap(self) -> float | None:
        """Tail mass lost to the ``max_trb_considered`` cut-off."""
        if self.untruncated_probability is None:
            return None
        return self.untruncated_probability - self.probability


@dataclass(slots=True, frozen=True)
class OddsResult:
    """Fair (no-vig) odds implied by the model probability."""

    decimal_odds: float
    american_odds: float


@dataclass(slots=True, frozen=True)
class StakeResult:
    """Kelly sizing against an external sportsbook quote.

    Attributes:
        sportsbook_american_odds: The quote the stake was sized against.
        net_payout: ``B`` — profit per unit staked if the bet wins.
        implied_probability: Win probability the quote itself implies,
            vig included; the model has an edge when its own probability
            is higher.
        kelly_fraction: Full Kelly ``(B·P − Q) / B``.  Negative means the
            quote offers no edge; it is reported, not clipped.
        quarter_kelly_percent: ``kelly_fraction × 100 / 4`` — recommended
            bankroll percentage.
    """

    sportsbook_american_odds: float
    net_payout: float
    implied_probability: float
    kelly_fraction: float
    quarter_kelly_percent: float

    @property
    def has_edge(self) -> bool:
        return self.kelly_fraction > 0.0


@dataclass(slots=True, frozen=True)
class ReboundEvaluation:
    """Composite result of one evaluation request.

    ``stake`` is ``None`` only when the caller supplied no sportsbook quote.
    """

    athlete: str
    probability: ProbabilityResult
    odds: OddsResult
    stake: StakeResult | None = None


# ---------------------------------------------------------------------------
# Repository contract
# ---------------------------------------------------------------------------


class GameLogRepository(ABC):
    """Read-only lookup from athlete name to their ordered game log.

    Implementations must be safe to read from several request threads at
    once.  That holds automatically when the underlying data is built once
    and never mutated afterwards.
    """

    @abstractmethod
    def get_log(self, athlete: str) -> Sequence[GameLogEntry]:
        """Return ``athlete``'s games ordered by ``game_date`` ascending.

        Raises:
            AthleteNotFound: If the athlete has no rows.
        """

    @abstractmethod
    def athletes(self) -> list[str]:
        """All athlete names, sorted."""

    def search(self, query: str) -> list[str]:
        """Athlete names containing ``query``, case-insensitive, sorted.

        An empty query matches everyone.
        """
        q = (query or "").strip().lower()
        return [name for name in self.athletes() if q in name.lower()]

    def __contains__(self, athlete: object) -> bool:
        return athlete in set(self.athletes())

    def __len__(self) -> int:
        return len(self.athletes())
