"""Pydantic schemas for the bet API."""

from pydantic import BaseModel, Field

from src.pg_betting.domain.models import Bet
from src.pg_common.cents import cents_to_display


class PlaceBetRequest(BaseModel):
    period: int = Field(..., gt=0, description="Round the bet is for")
    side: str = Field(..., min_length=2, max_length=5, description="UP/DOWN (or green/red)")
    amount_cents: int = Field(..., gt=0, description="Stake in cents")


class BetResponse(BaseModel):
    bet_id: str
    period: int
    side: str
    amount_cents: int
    amount_display: str
    status: str
    payout_cents: int
    payout_display: str
    created_at: str | None
    settled_at: str | None

    @classmethod
    def from_domain(cls, bet: Bet) -> "BetResponse":
        return cls(
            bet_id=bet.id,
            period=bet.period,
            side=bet.side,
            amount_cents=bet.amount,
            amount_display=cents_to_display(bet.amount),
            status=bet.status,
            payout_cents=bet.payout,
            payout_display=cents_to_display(bet.payout),
            created_at=bet.created_at.isoformat() if bet.created_at else None,
            settled_at=bet.settled_at.isoformat() if bet.settled_at else None,
        )


class BetListResponse(BaseModel):
    items: list[BetResponse]
