"""Error taxonomy for the rebound pricing pipeline.

Every error derives from :class:`ReboundModelError`, itself a ``ValueError``,
so callers that only care about "bad input" can catch the builtin.  Each
subclass carries enough context for the presentation layer to show a
specific message ("no data for this player" vs. "probability too low to
quote").

None of these are retried: the pipeline is deterministic and the same
inputs will always fail the same way.
"""

from __future__ import annotations


class ReboundModelError(ValueError):
    """Base class for all pipeline errors."""

    #: Short machine-readable kind, used as the ``error`` key in API payloads.
    kind: str = "rebound_model_error"


class InsufficientData(ReboundModelError):
    """No usable historical value exists for a field the model needs."""

    kind = "insufficient_data"

    def __init__(self, field: str, athlete: str | None = None) -> None:
        self.field = field
        self.athlete = athlete
        who = f" for {athlete!r}" if athlete else ""
        super().__init__(
            f"No usable historical '{field}' values{who}; "
            "cannot estimate a per-game rate."
        )


class UndefinedOdds(ReboundModelError):
    """Fair odds cannot be quoted for this probability (0 or certainty)."""

    kind = "undefined_odds"

    def __init__(self, probability: float) -> None:
        self.probability = probability
        super().__init__(
            f"Probability {probability!r} has no finite American odds; "
            "probability too low (or too certain) to quote."
        )


class InvalidOdds(ReboundModelError):
    """Sportsbook quote cannot be converted to a payout."""

    kind = "invalid_odds"

    def __init__(self, odds: float) -> None:
        self.odds = odds
        super().__init__(
            f"Invalid American odds {odds!r}: quotes must be finite and non-zero."
        )


class AthleteNotFound(ReboundModelError):
    """Requested athlete has no game log in the repository."""

    kind = "athlete_not_found"

    def __init__(self, athlete: str) -> None:
        self.athlete = athlete
        super().__init__(f"Player {athlete!r} not found in database.")
