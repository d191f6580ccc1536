"""Kelly criterion sizing — the single source of truth for stake math.

All functions here are **pure**: no I/O, no logging.

Design decisions
----------------
* The full Kelly fraction is reported **unclipped**.  A negative value means
  the quoted price offers no edge against the model probability; callers
  display it as-is so the user sees how far off the price is, rather than
  a flat zero.
* The recommendation is damped to one quarter of full Kelly
  (:data:`~backend.core.sport_config.DEFAULT_KELLY_DIVISOR`).  Rates are
  raw sample means with real estimation error and over-betting is punished
  far harder than under-betting.

Run tests with::

    pytest tests/test_kelly.py -v
"""

from __future__ import annotations

from backend.core.interfaces import StakeResult
from backend.core.odds_math import implied_prob, net_payout
from backend.core.sport_config import DEFAULT_KELLY_DIVISOR


def kelly_fraction(win_prob: float, payout: float) -> float:
    """Full Kelly bankroll fraction for a win/loss bet.

    Solves ``max_f E[log(1 + f·X)]`` where ``X`` is ``payout`` with
    probability ``p`` and ``−1`` otherwise::

        f*  =  (B · P − Q) / B

    Args:
        win_prob: Model probability of winning, in ``[0, 1]``.
        payout: Net profit per unit staked, ``B > 0``.

    Returns:
        ``f*``.  Zero when ``B·P == Q``; exactly 1.0 when ``P == 1``;
        negative for a negative-EV price.

    Raises:
        ValueError: If ``win_prob`` is outside ``[0, 1]`` or ``payout <= 0``.

    Examples::

        kelly_fraction(0.55, 1.0)   →  0.10
        kelly_fraction(0.50, 1.0)   →  0.00
        kelly_fraction(0.40, 1.0)   → -0.20
    """
    if not (0.0 <= win_prob <= 1.0):
        raise ValueError(f"win_prob must be in [0, 1], got {win_prob!r}.")
    if payout <= 0.0:
        raise ValueError(f"payout must be > 0, got {payout!r}.")

    loss_prob = 1.0 - win_prob
    return (payout * win_prob - loss_prob) / payout


def stake(
    probability: float,
    sportsbook_american_odds: float,
    *,
    kelly_divisor: float = DEFAULT_KELLY_DIVISOR,
) -> StakeResult:
    """Size a bet on ``TRB ≥ threshold`` at an external sportsbook price.

    Args:
        probability: The model's own P(TRB ≥ threshold).
        sportsbook_american_odds: The market quote, positive or negative.
        kelly_divisor: Full Kelly is divided by this.  Default 4 (quarter).

    Returns:
        :class:`StakeResult`; ``quarter_kelly_percent = f* × 100 / divisor``.

    Raises:
        InvalidOdds: If the quote is 0 or not finite.
        ValueError: If ``probability`` is outside ``[0, 1]`` or
            ``kelly_divisor <= 0``.

    Examples::

        stake(0.55, +100).quarter_kelly_percent   →  2.5
        stake(0.60, -150).kelly_fraction          →  0.0
    """
    if kelly_divisor <= 0.0:
        raise ValueError(f"kelly_divisor must be > 0, got {kelly_divisor!r}.")

    payout = net_payout(sportsbook_american_odds)
    full = kelly_fraction(probability, payout)
    return StakeResult(
        sportsbook_american_odds=sportsbook_american_odds,
        net_payout=payout,
        implied_probability=implied_prob(sportsbook_american_odds),
        kelly_fraction=full,
        quarter_kelly_percent=full * 100.0 / kelly_divisor,
    )
