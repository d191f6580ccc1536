"""Odds mathematics — the single source of truth for price conversions.

Every function here is **pure**: no I/O, no logging, no side effects.
Import from this module; never reimplement locally in services.

Two directions are covered:

1. **Model → market**: :func:`to_odds` turns the model probability into
   fair decimal and American odds.
2. **Market → model**: :func:`american_to_decimal`, :func:`net_payout` and
   :func:`implied_prob` read an external sportsbook quote.

Design decisions
----------------
* The fair-odds branch uses a strict ``decimal > 2`` test.  At exactly even
  money (``p == 0.5``) the negative-odds formula is taken and the result is
  ``-100``, not ``+100``.  Both denote the same price; the negative form is
  what the reference output has always shown, so it is kept.
* Sportsbook quotes are rejected when they are zero or not finite.  Quotes
  with ``|odds| < 100`` are not real American prices, but they still have a
  well-defined payout and historical inputs have been accepted as such.
"""

from __future__ import annotations

import math

from backend.core.errors import InvalidOdds, UndefinedOdds
from backend.core.interfaces import OddsResult


# ---------------------------------------------------------------------------
# Sportsbook quote conversion
# ---------------------------------------------------------------------------


def _check_quote(american: int | float) -> None:
    # NaN and ±inf have no payout
    if not math.isfinite(american) or american == 0:
        raise InvalidOdds(american)


def american_to_decimal(american: int | float) -> float:
    """Convert an American quote to decimal (European) odds.

    Decimal odds are the total return per unit staked, stake included::

        american_to_decimal(-110) → 1.9091   (risk 110 to win 100)
        american_to_decimal(+150) → 2.5000   (risk 100 to win 150)

    Raises:
        InvalidOdds: If ``american`` is 0 or not finite.
    """
    _check_quote(american)
    if american > 0:
        return (american + 100.0) / 100.0
    return (abs(american) + 100.0) / abs(american)


def net_payout(american: int | float) -> float:
    """Profit per unit staked if the bet wins (Kelly's ``B``).

    ``B = decimal − 1``; ``+150 → 1.5``, ``-200 → 0.5``.

    Raises:
        InvalidOdds: If ``american`` is 0 or not finite.
    """
    return american_to_decimal(american) - 1.0


def implied_prob(american: int | float) -> float:
    """Raw (vig-inclusive) probability implied by a sportsbook quote.

    Raises:
        InvalidOdds: If ``american`` is 0 or not finite.
    """
    return 1.0 / american_to_decimal(american)


# ---------------------------------------------------------------------------
# Model probability → fair odds
# ---------------------------------------------------------------------------


def decimal_to_american(decimal_odds: float) -> float:
    """Convert decimal odds to (unrounded) American odds.

    ``decimal > 2`` → ``(decimal − 1) × 100`` (positive, underdog);
    otherwise ``−100 / (decimal − 1)`` (negative, favourite).  The boundary
    ``decimal == 2`` takes the negative branch and returns ``-100.0``.

    Raises:
        UndefinedOdds: If ``decimal_odds == 1`` (a certainty has no finite
            American price).
        ValueError: If ``decimal_odds < 1``.
    """
    if decimal_odds < 1.0:
        raise ValueError(
            f"Decimal odds {decimal_odds!r} must be ≥ 1.0 (probability ≤ 1)."
        )
    if decimal_odds > 2.0:
        return (decimal_odds - 1.0) * 100.0
    if decimal_odds == 1.0:
        raise UndefinedOdds(1.0)
    return -100.0 / (decimal_odds - 1.0)


def to_odds(probability: float) -> OddsResult:
    """Fair (no-vig) odds for a model probability.

    Args:
        probability: Model P(TRB ≥ threshold), in ``(0, 1)``.

    Returns:
        :class:`OddsResult` with ``decimal_odds == 1 / probability`` exactly.

    Raises:
        UndefinedOdds: If ``probability`` is 0 (infinite odds) or 1 (no
            finite American price).
        ValueError: If ``probability`` is outside ``[0, 1]``.

    Examples::

        to_odds(0.25) → OddsResult(decimal_odds=4.0,  american_odds=300.0)
        to_odds(0.50) → OddsResult(decimal_odds=2.0,  american_odds=-100.0)
        to_odds(0.80) → OddsResult(decimal_odds=1.25, american_odds=-400.0)
    """
    if not (0.0 <= probability <= 1.0):
        raise ValueError(f"probability must be in [0, 1], got {probability!r}.")
    if probability == 0.0:
        raise UndefinedOdds(probability)

    decimal = 1.0 / probability
    try:
        american = decimal_to_american(decimal)
    except UndefinedOdds:
        raise UndefinedOdds(probability) from None
    return OddsResult(decimal_odds=decimal, american_odds=american)
