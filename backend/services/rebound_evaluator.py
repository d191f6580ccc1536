"""
Rebound prop evaluation: one synchronous pass through the pricing pipeline.

    game log → rates → P(TRB ≥ threshold) → fair odds → Kelly stake

The evaluator holds only read-only collaborators (the repository and the
league config) and keeps no state between calls, so one instance can serve
every request thread.  Stages run in order and the first failure
propagates; there are no partial results.  The only stage that may be
skipped is the stake, and only when no sportsbook quote was supplied.

Usage::

    repo = load_repository()
    evaluator = ReboundEvaluator(repo)
    result = evaluator.evaluate("Johni Broome", threshold=10, sportsbook_odds=-120)
"""

import logging
from typing import Optional

from backend.core.errors import ReboundModelError
from backend.core.interfaces import GameLogRepository, ReboundEvaluation
from backend.core.kelly import stake
from backend.core.odds_math import to_odds
from backend.core.rebound_model import evaluate
from backend.core.sport_config import SportConfig

logger = logging.getLogger(__name__)


class ReboundEvaluator:
    """Prices total-rebound lines for athletes in a game-log repository."""

    def __init__(self, repository: GameLogRepository, config: Optional[SportConfig] = None):
        if not isinstance(repository, GameLogRepository):
            raise TypeError(
                f"repository must be a GameLogRepository, got {type(repository).__name__}"
            )
        self.repository = repository
        self.config = config or SportConfig.ncaa_basketball()

    def evaluate(
        self,
        athlete: str,
        threshold: int,
        sportsbook_odds: Optional[float] = None,
    ) -> ReboundEvaluation:
        """
        Run the full pipeline for one athlete and one line.

        Raises:
            AthleteNotFound:  athlete has no game log.
            InsufficientData: no usable orb / drb / rebs history.
            UndefinedOdds:    probability is 0 (or 1), no fair price.
            InvalidOdds:      sportsbook quote of 0.
            ValueError:       threshold is not a positive integer.
        """
        try:
            log = self.repository.get_log(athlete)
            probability = evaluate(log, threshold, self.config, athlete=athlete)
            odds = to_odds(probability.probability)
            sized = None
            if sportsbook_odds is not None:
                sized = stake(
                    probability.probability,
                    sportsbook_odds,
                    kelly_divisor=self.config.kelly_divisor,
                )
        except ReboundModelError as exc:
            logger.warning("Evaluation failed for %s (TRB >= %s): %s", athlete, threshold, exc)
            raise

        logger.info(
            "%s TRB >= %d: p=%.4f (max_trb=%d, λ_orb=%.2f, λ_drb=%.2f) fair=%+.2f%s",
            athlete,
            probability.threshold,
            probability.probability,
            probability.max_trb_considered,
            probability.rates.lambda_orb,
            probability.rates.lambda_drb,
            odds.american_odds,
            f" qk={sized.quarter_kelly_percent:.2f}% @ {sportsbook_odds:+g}" if sized else "",
        )
        return ReboundEvaluation(
            athlete=athlete,
            probability=probability,
            odds=odds,
            stake=sized,
        )
