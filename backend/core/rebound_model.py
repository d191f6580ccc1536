"""Threshold probability for total rebounds.

Every function here is **pure**: no I/O, no logging, no side effects.

Model
-----
Total rebounds are the sum of two independent Poisson counts::

    ORB ~ Poisson(λ_orb),  DRB ~ Poisson(λ_drb),  TRB = ORB + DRB

and the probability of clearing a line is an explicit double sum::

    P(TRB ≥ t)  ≈  Σ_{trb=t}^{max_trb}  Σ_{orb=0}^{trb}  p(orb; λ_orb) · p(trb − orb; λ_drb)

Design decisions
----------------
* The convolution is evaluated explicitly rather than through the
  closed form ``Poisson(λ_orb + λ_drb)``.  The two agree on the mass at
  each ``trb``.
* The tail is cut at ``max_trb = round(1.75 × max observed TRB)``.  This is
  a heuristic, not a bound with a guaranteed error.  The priced
  probability therefore slightly understates the true tail.  The exact
  infinite-tail value is returned alongside as
  :attr:`ProbabilityResult.untruncated_probability` so the gap is visible,
  but it is never substituted.
* ``threshold > max_trb`` is an empty range and prices at exactly 0.0.

Run tests with::

    pytest tests/test_rebound_model.py -v
"""

from __future__ import annotations

import math
from numbers import Integral
from typing import Sequence

from scipy.stats import poisson

from backend.core.errors import InsufficientData
from backend.core.interfaces import (
    GameLogEntry,
    GamePoint,
    ProbabilityResult,
    RateParameters,
)
from backend.core.rates import estimate_rates, usable_values
from backend.core.sport_config import DEFAULT_TAIL_MULTIPLIER, SportConfig

#: Largest k whose factorial still converts to a finite float.
_MAX_DIRECT_K = 170


# ---------------------------------------------------------------------------
# Poisson building blocks
# ---------------------------------------------------------------------------


def poisson_pmf(k: int, lam: float) -> float:
    """Poisson probability mass ``e^(−λ) λ^k / k!``.

    ``λ = 0`` is allowed and puts all mass on ``k = 0`` (``0 ** 0 == 1``).

    Raises:
        ValueError: If ``k < 0`` or ``λ < 0``.
    """
    if k < 0:
        raise ValueError(f"k must be ≥ 0, got {k!r}.")
    if lam < 0:
        raise ValueError(f"Poisson rate must be ≥ 0, got {lam!r}.")
    if lam == 0:
        return 1.0 if k == 0 else 0.0
    if k > _MAX_DIRECT_K:
        # k! overflows a float past 170; work in log space instead
        return math.exp(k * math.log(lam) - lam - math.lgamma(k + 1))
    return math.exp(-lam) * lam ** k / math.factorial(k)


def trb_mass(trb: int, rates: RateParameters) -> float:
    """P(TRB = trb) by convolving the ORB and DRB distributions."""
    total = 0.0
    for orb in range(trb + 1):
        drb = trb - orb
        total += poisson_pmf(orb, rates.lambda_orb) * poisson_pmf(drb, rates.lambda_drb)
    return total


def threshold_probability(
    threshold: int,
    max_trb: int,
    rates: RateParameters,
) -> float:
    """P(TRB ≥ threshold) restricted to ``[threshold, max_trb]``.

    Returns 0.0 when the range is empty (``threshold > max_trb``).
    """
    total = 0.0
    for trb in range(threshold, max_trb + 1):
        total += trb_mass(trb, rates)
    return total


def untruncated_tail_probability(threshold: int, rates: RateParameters) -> float:
    """Closed-form P(TRB ≥ threshold) over the infinite tail.

    Uses the sum-of-Poissons identity, ``TRB ~ Poisson(λ_orb + λ_drb)``.
    """
    if rates.lambda_trb == 0.0:
        return 1.0 if threshold <= 0 else 0.0
    return float(poisson.sf(threshold - 1, rates.lambda_trb))


# ---------------------------------------------------------------------------
# Truncation bound
# ---------------------------------------------------------------------------


def max_trb_considered(
    log: Sequence[GameLogEntry],
    tail_multiplier: float = DEFAULT_TAIL_MULTIPLIER,
    *,
    athlete: str | None = None,
) -> int:
    """``round(tail_multiplier × max(rebs))``, ignoring missing ``rebs``.

    Python's :func:`round` is half-to-even, so ``1.75 × 2 = 3.5 → 4`` and
    ``1.75 × 6 = 10.5 → 10``.

    Raises:
        InsufficientData: If no game has a known ``rebs``.
    """
    rebs = usable_values(entry.rebs for entry in log)
    if not rebs:
        raise InsufficientData("rebs", athlete)
    return int(round(max(rebs) * tail_multiplier))


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def _validate_threshold(threshold: object) -> int:
    # bool is an Integral subclass but never a valid line
    if isinstance(threshold, bool) or not isinstance(threshold, Integral):
        raise ValueError(
            f"threshold must be a positive integer, got {threshold!r}."
        )
    if threshold < 1:
        raise ValueError(f"threshold must be ≥ 1, got {threshold!r}.")
    return int(threshold)


def chart_series(
    log: Sequence[GameLogEntry],
    threshold: int,
) -> tuple[GamePoint, ...]:
    """Per-game (date, rebounds, met-threshold) points for the chart."""
    points = []
    for entry in log:
        rebs = entry.rebs
        if isinstance(rebs, float) and math.isnan(rebs):
            rebs = None
        points.append(
            GamePoint(
                game_date=entry.game_date,
                rebounds=rebs,
                met_threshold=rebs is not None and rebs >= threshold,
            )
        )
    return tuple(points)


def evaluate(
    log: Sequence[GameLogEntry],
    threshold: int,
    config: SportConfig | None = None,
    *,
    athlete: str | None = None,
) -> ProbabilityResult:
    """Price ``TRB ≥ threshold`` for one athlete's next game.

    Args:
        log: The athlete's full historical log, ordered by date.
        threshold: The rebound line, a positive integer.
        config: League config; only ``tail_multiplier`` is read.  Defaults
            to the 1.75 multiplier when omitted.
        athlete: Optional name, used only in error messages.

    Returns:
        :class:`ProbabilityResult` with the truncated probability, the
        bound it was truncated at, the rates, and the chart series.

    Raises:
        ValueError: If ``threshold`` is not a positive integer.
        InsufficientData: If ``orb``, ``drb`` or ``rebs`` has no usable
            historical value.
    """
    threshold = _validate_threshold(threshold)
    tail_multiplier = (
        config.tail_multiplier if config is not None else DEFAULT_TAIL_MULTIPLIER
    )

    rates = estimate_rates(log, athlete=athlete)
    max_trb = max_trb_considered(log, tail_multiplier, athlete=athlete)
    probability = threshold_probability(threshold, max_trb, rates)

    games = chart_series(log, threshold)
    known = [g for g in games if g.rebounds is not None]
    hit_rate = (
        sum(1 for g in known if g.met_threshold) / len(known) if known else None
    )

    return ProbabilityResult(
        threshold=threshold,
        probability=probability,
        max_trb_considered=max_trb,
        rates=rates,
        games=games,
        untruncated_probability=untruncated_tail_probability(threshold, rates),
        historical_hit_rate=hit_rate,
    )
