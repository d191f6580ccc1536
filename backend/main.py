"""
FastAPI application for Rebound Edge
Prices player total-rebound lines from historical box scores
"""

from fastapi import FastAPI, Depends, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from datetime import datetime, timezone
import logging
import os

from dotenv import load_dotenv

from backend.auth import verify_api_key
from backend.core.errors import AthleteNotFound, ReboundModelError
from backend.core.interfaces import GameLogRepository
from backend.core.sport_config import SportConfig
from backend.schemas import (
    AthleteSearchResponse,
    ErrorResponse,
    GameLogEntryResponse,
    GameLogResponse,
    ReboundEvaluationRequest,
    ReboundEvaluationResponse,
)
from backend.services.box_scores import load_repository
from backend.services.rebound_evaluator import ReboundEvaluator

load_dotenv()

# Logging setup
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

APP_VERSION = "1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load the league's box scores once; the repository is read-only after."""
    config = SportConfig.for_league(os.getenv("REBOUND_LEAGUE", "mbb"))
    logger.info("Starting Rebound Edge (%s)", config.sport_name)

    app.state.config = config
    app.state.repository = load_repository(config)
    logger.info("Loaded game logs for %d athletes", len(app.state.repository))

    yield

    logger.info("Shutting down Rebound Edge")


app = FastAPI(
    title="Rebound Edge",
    description="Player total-rebound probability, fair odds and Kelly sizing",
    version=APP_VERSION,
    lifespan=lifespan,
)

# CORS (adjust origins for production)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://localhost:8501"],  # Streamlit
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================================
# DEPENDENCIES & ERROR MAPPING
# ============================================================================

def get_repository(request: Request) -> GameLogRepository:
    repo = getattr(request.app.state, "repository", None)
    if repo is None:
        raise HTTPException(status_code=503, detail="Game logs not loaded")
    return repo


def get_config(request: Request) -> SportConfig:
    return getattr(request.app.state, "config", None) or SportConfig.ncaa_basketball()


def get_evaluator(
    repo: GameLogRepository = Depends(get_repository),
    config: SportConfig = Depends(get_config),
) -> ReboundEvaluator:
    return ReboundEvaluator(repo, config)


@app.exception_handler(ReboundModelError)
async def rebound_model_error_handler(request: Request, exc: ReboundModelError):
    """Athlete lookups are 404; every other pipeline failure is 422."""
    status_code = 404 if isinstance(exc, AthleteNotFound) else 422
    body = ErrorResponse(error=exc.kind, message=str(exc))
    return JSONResponse(status_code=status_code, content=body.model_dump())


@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError):
    """Bad inputs that reach the core past request validation."""
    logger.warning("Rejected input on %s: %s", request.url.path, exc)
    body = ErrorResponse(error="invalid_input", message=str(exc))
    return JSONResponse(status_code=422, content=body.model_dump())


# ============================================================================
# PUBLIC ENDPOINTS
# ============================================================================

@app.get("/")
async def root():
    """Health check"""
    return {
        "app": "Rebound Edge",
        "version": APP_VERSION,
        "status": "operational",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@app.get("/health")
async def health_check(request: Request):
    """Health check endpoint"""
    repo = getattr(request.app.state, "repository", None)
    if repo is None:
        return {"status": "degraded", "athletes_loaded": 0}
    return {"status": "healthy", "athletes_loaded": len(repo)}


# ============================================================================
# AUTHENTICATED ENDPOINTS
# ============================================================================

@app.get("/api/athletes", response_model=AthleteSearchResponse)
def search_athletes(
    q: str = Query(default="", max_length=120),
    limit: int = Query(default=25, ge=1, le=200),
    user: str = Depends(verify_api_key),
    repo: GameLogRepository = Depends(get_repository),
):
    """Case-insensitive substring search over athlete names."""
    matches = repo.search(q)
    return AthleteSearchResponse(query=q, total=len(matches), athletes=matches[:limit])


@app.get("/api/athletes/{athlete}/games", response_model=GameLogResponse)
def get_athlete_games(
    athlete: str,
    user: str = Depends(verify_api_key),
    repo: GameLogRepository = Depends(get_repository),
):
    """Full date-ordered game log for one athlete."""
    log = repo.get_log(athlete)
    return GameLogResponse(
        athlete=athlete,
        games=[GameLogEntryResponse.model_validate(entry) for entry in log],
    )


@app.post(
    "/api/rebounds/evaluate",
    response_model=ReboundEvaluationResponse,
    responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
def evaluate_rebounds(
    payload: ReboundEvaluationRequest,
    user: str = Depends(verify_api_key),
    evaluator: ReboundEvaluator = Depends(get_evaluator),
):
    """Price P(TRB >= threshold), its fair odds and, given a quote, the stake."""
    result = evaluator.evaluate(
        payload.athlete,
        payload.threshold,
        sportsbook_odds=payload.sportsbook_odds,
    )
    return ReboundEvaluationResponse.model_validate(result)
