"""Synthetic price walk for the live candle.

Purely visual: before a decision the walk is calm and unbiased; once the
outcome is known it turns more volatile and drifts toward the winning color
so the finished candle agrees with the result.
"""

import random

from src.pg_common.enums import BetSide, Outcome
from src.pg_round.domain.models import Candle

CALM_VOLATILITY = 5.0
DECIDED_VOLATILITY = 15.0
DRIFT_BIAS = 0.5
FINAL_MOVE_MIN = 50.0
FINAL_MOVE_SPAN = 100.0
DOJI_JITTER = 10.0


class PriceWalk:
    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()

    def step(self, candle: Candle, outcome: Outcome | None) -> None:
        volatility = DECIDED_VOLATILITY if outcome is not None else CALM_VOLATILITY
        if outcome is None:
            bias = 0.0
        elif outcome.winning_side is BetSide.UP:
            bias = DRIFT_BIAS
        else:
            bias = -DRIFT_BIAS
        candle.move_to(candle.close + (self._rng.random() - 0.5 + bias) * volatility)

    def nudge(self, candle: Candle, side: BetSide) -> None:
        """Jump toward an admin-forced side."""
        jump = self._dramatic_move()
        candle.move_to(candle.close + jump if side is BetSide.UP else candle.close - jump)

    def finish(self, candle: Candle, outcome: Outcome) -> None:
        """Place the closing price on the correct side of the open."""
        if outcome.is_doji:
            final = candle.open + (self._rng.random() - 0.5) * DOJI_JITTER
        elif outcome.winning_side is BetSide.UP:
            final = candle.open + self._dramatic_move()
        else:
            final = candle.open - self._dramatic_move()
        candle.move_to(final)

    def _dramatic_move(self) -> float:
        return self._rng.random() * FINAL_MOVE_SPAN + FINAL_MOVE_MIN
