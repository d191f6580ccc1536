"""League-level configuration — all league-specific constants in one place.

:class:`SportConfig` is a frozen dataclass carrying everything that differs
between the leagues we can price rebound props for: where the box scores
come from, the default season, and the two pricing knobs (tail truncation
and Kelly damping).  Named constructors return pre-populated instances.

Typical usage::

    from backend.core.sport_config import SportConfig

    cfg = SportConfig.ncaa_basketball()

    # Override a single constant for an experiment:
    from dataclasses import replace
    half_kelly = replace(cfg, kelly_divisor=2.0)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

#: League identifiers, as used in ``REBOUND_LEAGUE`` and the fetch script.
SPORT_ID_MBB: Final[str] = "mbb"
SPORT_ID_NBA: Final[str] = "nba"

#: Multiplier on the largest observed TRB that bounds the tail sum.
DEFAULT_TAIL_MULTIPLIER: Final[float] = 1.75

#: Full Kelly is divided by this before being reported (quarter Kelly).
DEFAULT_KELLY_DIVISOR: Final[float] = 4.0


@dataclass(frozen=True)
class SportConfig:
    """Immutable configuration bundle for a single league.

    Attributes:
        sport_id: Short identifier (``"mbb"`` or ``"nba"``).
        sport_name: Human-readable name for logging and display.
        box_score_url_template: hoopR data-release URL for one season of
            player box scores; ``{season}`` is substituted.
        default_season: Season loaded when ``SEASON_YEAR`` is unset.  hoopR
            labels a season by the year it ends in (2025 = 2024-25).
        tail_multiplier: ``max_trb = round(tail_multiplier × max(rebs))``.
            1.75 is a heuristic cut-off, not a principled tail bound;
            changing it changes every priced probability.
        kelly_divisor: Fraction of full Kelly reported as the stake
            (4.0 → quarter Kelly).
    """

    sport_id: str
    sport_name: str
    box_score_url_template: str
    default_season: int
    tail_multiplier: float = DEFAULT_TAIL_MULTIPLIER
    kelly_divisor: float = DEFAULT_KELLY_DIVISOR

    # ------------------------------------------------------------------ #
    #  Named constructors                                                  #
    # ------------------------------------------------------------------ #

    @classmethod
    def ncaa_basketball(cls) -> SportConfig:
        """Men's college basketball, ESPN box scores via hoopR."""
        return cls(
            sport_id=SPORT_ID_MBB,
            sport_name="NCAA Men's Basketball",
            box_score_url_template=(
                "https://github.com/sportsdataverse/hoopR-mbb-data/releases/"
                "download/espn_mens_college_basketball_player_boxscores/"
                "player_box_{season}.parquet"
            ),
            default_season=2025,
        )

    @classmethod
    def nba(cls) -> SportConfig:
        """NBA, ESPN box scores via hoopR.  Same pricing knobs as MBB."""
        return cls(
            sport_id=SPORT_ID_NBA,
            sport_name="NBA",
            box_score_url_template=(
                "https://github.com/sportsdataverse/hoopR-nba-data/releases/"
                "download/espn_nba_player_boxscores/"
                "player_box_{season}.parquet"
            ),
            default_season=2025,
        )

    @classmethod
    def for_league(cls, sport_id: str) -> SportConfig:
        """Look up a config by identifier (case-insensitive).

        Raises:
            ValueError: For an unknown league.
        """
        constructors = {
            SPORT_ID_MBB: cls.ncaa_basketball,
            SPORT_ID_NBA: cls.nba,
        }
        key = (sport_id or "").strip().lower()
        if key not in constructors:
            raise ValueError(
                f"Unknown league {sport_id!r}; expected one of "
                f"{sorted(constructors)}."
            )
        return constructors[key]()

    # ------------------------------------------------------------------ #
    #  Convenience accessors                                               #
    # ------------------------------------------------------------------ #

    def box_score_url(self, season: int | None = None) -> str:
        """Release URL for ``season`` (defaults to :attr:`default_season`)."""
        return self.box_score_url_template.format(
            season=season if season is not None else self.default_season
        )

    def __repr__(self) -> str:
        return (
            f"SportConfig(sport_id={self.sport_id!r}, "
            f"tail={self.tail_multiplier}, "
            f"kelly_divisor={self.kelly_divisor})"
        )
