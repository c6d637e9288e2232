"""Payout rule for a single bet against a round decision."""

from src.pg_common.cents import apply_multiplier
from src.pg_common.enums import BetSide, BetStatus
from src.pg_round.domain.models import RoundDecision


def bet_payout(side: str, amount: int, decision: RoundDecision) -> tuple[BetStatus, int]:
    """WON with amount x multiplier when the side matches, else LOST with 0.

    A doji outcome still has a winning color (GREEN_DOJI -> UP); it only
    pays the reduced multiplier carried by the decision.
    """
    if BetSide(side) is decision.outcome.winning_side:
        return BetStatus.WON, apply_multiplier(amount, decision.multiplier_bps)
    return BetStatus.LOST, 0
