"""
Player box-score loading and the in-memory game-log repository.

Sources (in priority order):
    1. A local CSV / parquet file (``BOX_SCORE_PATH`` or an explicit path),
       either a raw hoopR export or the trimmed file written by
       ``scripts/fetch_box_scores.py``.
    2. The sportsdataverse hoopR data release for the configured league and
       season (one parquet file per season).

The raw ESPN column names are trimmed and renamed to the short box-score
vocabulary used everywhere else (``rebs``, ``or``, ``dr``, ``opp`` …), then
grouped by athlete into an :class:`InMemoryGameLogRepository`.  The
repository is built once at startup and never mutated, so request threads
can share it without locking.
"""

import io
import logging
import os
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

import pandas as pd
import requests
from dotenv import load_dotenv

from backend.core.errors import AthleteNotFound
from backend.core.interfaces import GameLogEntry, GameLogRepository
from backend.core.sport_config import SportConfig

load_dotenv()

logger = logging.getLogger(__name__)

_DOWNLOAD_TIMEOUT = int(os.getenv("BOX_SCORE_TIMEOUT_SEC", "60"))

# Raw hoopR column → short name.  Order is the column order of the cleaned
# frame.
BOX_SCORE_COLUMNS: Dict[str, str] = {
    "game_id": "game_id",
    "game_date": "game_date",
    "season": "season",
    "athlete_id": "athlete_id",
    "athlete_display_name": "name",
    "team_location": "team",
    "opponent_team_location": "opp",
    "minutes": "minutes",
    "field_goals_made": "fgm",
    "field_goals_attempted": "fga",
    "rebounds": "rebs",
    "assists": "assists",
    "points": "points",
    "fouls": "fouls",
    "steals": "steals",
    "blocks": "blocks",
    "turnovers": "to",
    "offensive_rebounds": "or",
    "defensive_rebounds": "dr",
    "free_throws_made": "ftm",
    "free_throws_attempted": "fta",
    "athlete_position_abbreviation": "position",
    "team_score": "team_score",
    "opponent_team_score": "opponent_team_score",
    "starter": "starter",
    "ejected": "ejected",
}

# Columns without which a row cannot be placed in a log at all.
_REQUIRED = ("name", "game_date")


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

def fetch_player_box(season: Optional[int] = None, config: Optional[SportConfig] = None) -> pd.DataFrame:
    """
    Download one season of player box scores from the hoopR data release.

    Raises RuntimeError when the download fails; a service with no data
    must not start silently.
    """
    config = config or SportConfig.ncaa_basketball()
    url = config.box_score_url(season)

    try:
        resp = requests.get(url, timeout=_DOWNLOAD_TIMEOUT)
        resp.raise_for_status()
    except requests.RequestException as exc:
        logger.error("Box score download failed (%s): %s", url, exc)
        raise RuntimeError(f"Could not download box scores from {url}") from exc

    df = pd.read_parquet(io.BytesIO(resp.content))
    logger.info("%s box scores: downloaded %d rows (season %s)",
                config.sport_name, len(df), season or config.default_season)
    return df


def read_player_box(path) -> pd.DataFrame:
    """Read a local ``.csv`` or ``.parquet`` box-score file."""
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix == ".csv":
        df = pd.read_csv(path)
    elif suffix in (".parquet", ".pq"):
        df = pd.read_parquet(path)
    else:
        raise ValueError(f"Unsupported box-score file type: {path.name}")
    logger.info("Box scores: read %d rows from %s", len(df), path)
    return df


def clean_player_box(df: pd.DataFrame) -> pd.DataFrame:
    """
    Trim a raw hoopR frame to the box-score columns and rename them.

    Frames already using the short names pass through unchanged.  Missing
    optional columns are filled with NA so downstream code can rely on
    every short name being present.
    """
    if "athlete_display_name" in df.columns:
        present = {raw: short for raw, short in BOX_SCORE_COLUMNS.items() if raw in df.columns}
        df = df[list(present)].rename(columns=present)

    missing = [col for col in _REQUIRED if col not in df.columns]
    if missing:
        raise ValueError(f"Box-score frame is missing required columns: {missing}")

    df = df.copy()
    for short in BOX_SCORE_COLUMNS.values():
        if short not in df.columns:
            df[short] = pd.NA

    df["game_date"] = pd.to_datetime(df["game_date"]).dt.date
    return df[list(BOX_SCORE_COLUMNS.values())]


# ---------------------------------------------------------------------------
# Row conversion
# ---------------------------------------------------------------------------

def _opt_int(value) -> Optional[int]:
    if value is None or pd.isna(value):
        return None
    return int(value)


def _opt_float(value) -> Optional[float]:
    if value is None or pd.isna(value):
        return None
    return float(value)


def _opt_str(value) -> Optional[str]:
    if value is None or pd.isna(value):
        return None
    return str(value)


def _opt_bool(value) -> Optional[bool]:
    if value is None or pd.isna(value):
        return None
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes")
    return bool(value)


def _row_to_entry(row: dict) -> GameLogEntry:
    return GameLogEntry(
        game_date=row["game_date"],
        orb=_opt_int(row.get("or")),
        drb=_opt_int(row.get("dr")),
        rebs=_opt_int(row.get("rebs")),
        game_id=_opt_int(row.get("game_id")),
        athlete_id=_opt_int(row.get("athlete_id")),
        athlete_name=str(row["name"]),
        team=_opt_str(row.get("team")),
        opponent=_opt_str(row.get("opp")),
        minutes=_opt_float(row.get("minutes")),
        position=_opt_str(row.get("position")),
        starter=_opt_bool(row.get("starter")),
    )


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------

class InMemoryGameLogRepository(GameLogRepository):
    """Athlete name → date-ordered game log, built once and read-only."""

    def __init__(self, logs: Dict[str, Sequence[GameLogEntry]]):
        self._logs: Dict[str, Tuple[GameLogEntry, ...]] = {
            name: tuple(sorted(entries, key=lambda e: e.game_date))
            for name, entries in logs.items()
        }
        self._names: List[str] = sorted(self._logs)

    @classmethod
    def from_frame(cls, df: pd.DataFrame) -> "InMemoryGameLogRepository":
        """Group a box-score frame (raw or cleaned) by athlete name."""
        clean = clean_player_box(df)
        clean = clean[clean["name"].notna() & clean["game_date"].notna()]

        logs: Dict[str, List[GameLogEntry]] = {}
        for row in clean.to_dict("records"):
            entry = _row_to_entry(row)
            logs.setdefault(entry.athlete_name, []).append(entry)

        repo = cls(logs)
        logger.info("Game logs: %d rows grouped into %d athletes", len(clean), len(repo))
        return repo

    def get_log(self, athlete: str) -> Sequence[GameLogEntry]:
        try:
            return self._logs[athlete]
        except KeyError:
            raise AthleteNotFound(athlete) from None

    def athletes(self) -> List[str]:
        return list(self._names)

    def __contains__(self, athlete: object) -> bool:
        return athlete in self._logs

    def __len__(self) -> int:
        return len(self._logs)


def load_repository(
    config: Optional[SportConfig] = None,
    season: Optional[int] = None,
    path: Optional[str] = None,
) -> InMemoryGameLogRepository:
    """
    Build the repository from a local file if one is configured, otherwise
    from the hoopR release for ``season`` (``SEASON_YEAR`` by default).
    """
    config = config or SportConfig.for_league(os.getenv("REBOUND_LEAGUE", "mbb"))
    path = path or os.getenv("BOX_SCORE_PATH")

    if path:
        df = read_player_box(path)
    else:
        season = season or int(os.getenv("SEASON_YEAR", str(config.default_season)))
        df = fetch_player_box(season, config)

    return InMemoryGameLogRepository.from_frame(df)
