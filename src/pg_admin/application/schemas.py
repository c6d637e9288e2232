"""Pydantic schemas for the admin API."""

from pydantic import BaseModel, Field

from src.pg_common.cents import bps_to_display, cents_to_display
from src.pg_round.domain.models import RoundDecision


class SideExposure(BaseModel):
    count: int
    amount_cents: int
    amount_display: str

    @classmethod
    def of(cls, count: int, amount: int) -> "SideExposure":
        return cls(count=count, amount_cents=amount, amount_display=cents_to_display(amount))


class GameMonitorResponse(BaseModel):
    period: int
    countdown: int
    status: str
    betting_open: bool
    decided: bool
    can_force_result: bool
    green: SideExposure   # UP
    red: SideExposure     # DOWN
    total: SideExposure


class ForceResultRequest(BaseModel):
    side: str = Field(..., min_length=2, max_length=5, description="UP/DOWN (or green/red)")


class ForceResultResponse(BaseModel):
    period: int
    outcome: str
    multiplier_bps: int
    multiplier_display: str
    source: str

    @classmethod
    def from_decision(cls, period: int, decision: RoundDecision) -> "ForceResultResponse":
        return cls(
            period=period,
            outcome=decision.outcome.value,
            multiplier_bps=decision.multiplier_bps,
            multiplier_display=bps_to_display(decision.multiplier_bps),
            source=decision.source.value,
        )
