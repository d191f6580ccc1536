"""Per-game Poisson rate estimation from an athlete's game log.

Pure: no I/O, no logging.  The rates are plain sample means; there is no
shrinkage, recency weighting or opponent adjustment.
"""

from __future__ import annotations

import math
from typing import Iterable, Sequence

from backend.core.errors import InsufficientData
from backend.core.interfaces import GameLogEntry, RateParameters


def usable_values(values: Iterable[float | int | None]) -> list[float]:
    """Drop missing values (``None`` and float ``NaN``)."""
    out: list[float] = []
    for v in values:
        if v is None:
            continue
        if isinstance(v, float) and math.isnan(v):
            continue
        out.append(float(v))
    return out


def field_mean(
    log: Sequence[GameLogEntry],
    field: str,
    *,
    athlete: str | None = None,
) -> float:
    """Arithmetic mean of ``field`` over entries where it is present.

    Raises:
        InsufficientData: If no entry has a usable value.  A zero rate is
            never substituted; it would claim the player never rebounds.
    """
    values = usable_values(getattr(entry, field) for entry in log)
    if not values:
        raise InsufficientData(field, athlete)
    return sum(values) / len(values)


def estimate_rates(
    log: Sequence[GameLogEntry],
    *,
    athlete: str | None = None,
) -> RateParameters:
    """Estimate ``λ_orb`` and ``λ_drb`` from the full log.

    Missing values are dropped per field, not per row: a game with no
    ``orb`` still counts toward ``λ_drb`` if its ``drb`` is known.

    Examples::

        or = [3, 4, 5], dr = [6, 7, 8]  →  RateParameters(4.0, 7.0)
    """
    return RateParameters(
        lambda_orb=field_mean(log, "orb", athlete=athlete),
        lambda_drb=field_mean(log, "drb", athlete=athlete),
    )
