#!/usr/bin/env python3
"""
fetch_box_scores.py — Download one season of player box scores and cache it.

The API loads from BOX_SCORE_PATH when set, which avoids a multi-megabyte
download on every restart.  This script writes that file: the hoopR release
trimmed to the box-score columns the model and dashboard use.

Usage
-----
  python scripts/fetch_box_scores.py                          # MBB, SEASON_YEAR
  python scripts/fetch_box_scores.py --season 2024 --league nba
  python scripts/fetch_box_scores.py --out data/mbb_2025.csv

Then point the API at it:

  BOX_SCORE_PATH=data/player_box_mbb_2025.parquet uvicorn backend.main:app
"""

import argparse
import logging
import os
import sys
from pathlib import Path

# Ensure the project root (one level up from scripts/) is on sys.path so that
# `from backend.xxx import ...` resolves when the script is run directly.
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def main() -> int:
    from backend.core.sport_config import SportConfig
    from backend.services.box_scores import clean_player_box, fetch_player_box

    parser = argparse.ArgumentParser(
        description="Download and cache player box scores for Rebound Edge."
    )
    parser.add_argument(
        "--league",
        default=os.getenv("REBOUND_LEAGUE", "mbb"),
        help="League id: mbb or nba (default: REBOUND_LEAGUE or mbb).",
    )
    parser.add_argument(
        "--season",
        type=int,
        default=None,
        help="Season end year, e.g. 2025 for 2024-25 (default: SEASON_YEAR).",
    )
    parser.add_argument(
        "--out",
        default=None,
        help="Output .csv or .parquet path (default: data/player_box_<league>_<season>.parquet).",
    )
    args = parser.parse_args()

    try:
        config = SportConfig.for_league(args.league)
    except ValueError as exc:
        parser.error(str(exc))

    season = args.season or int(os.getenv("SEASON_YEAR", str(config.default_season)))
    out = Path(args.out or f"data/player_box_{config.sport_id}_{season}.parquet")
    if out.suffix.lower() not in (".csv", ".parquet"):
        parser.error("--out must end in .csv or .parquet")

    try:
        raw = fetch_player_box(season, config)
    except RuntimeError as exc:
        logger.error("%s", exc)
        return 1

    clean = clean_player_box(raw)
    out.parent.mkdir(parents=True, exist_ok=True)
    if out.suffix.lower() == ".csv":
        clean.to_csv(out, index=False)
    else:
        clean.to_parquet(out, index=False)

    logger.info(
        "Wrote %d rows (%d athletes) to %s",
        len(clean), clean["name"].nunique(), out,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
