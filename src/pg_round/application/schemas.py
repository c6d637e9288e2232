"""Pydantic response schemas for the round read API."""

from pydantic import BaseModel

from src.pg_betting.domain.models import StakeSnapshot
from src.pg_common.cents import bps_to_display, cents_to_display
from src.pg_round.domain.models import ChartCandle, GameResult, RoundStatusView


class SideTotals(BaseModel):
    up_cents: int
    up_display: str
    up_count: int
    down_cents: int
    down_display: str
    down_count: int

    @classmethod
    def from_snapshot(cls, stakes: StakeSnapshot) -> "SideTotals":
        return cls(
            up_cents=stakes.up,
            up_display=cents_to_display(stakes.up),
            up_count=stakes.up_count,
            down_cents=stakes.down,
            down_display=cents_to_display(stakes.down),
            down_count=stakes.down_count,
        )


class RoundStatusResponse(BaseModel):
    period: int
    countdown: int
    status: str
    betting_open: bool
    decided: bool
    can_force_result: bool
    totals: SideTotals | None = None

    @classmethod
    def from_view(
        cls, view: RoundStatusView, stakes: StakeSnapshot | None = None
    ) -> "RoundStatusResponse":
        return cls(
            period=view.period,
            countdown=view.countdown,
            status=view.status.value,
            betting_open=view.betting_open,
            decided=view.decided,
            can_force_result=view.can_force_result,
            totals=SideTotals.from_snapshot(stakes) if stakes is not None else None,
        )


class GameResultItem(BaseModel):
    period: int
    outcome: str
    multiplier_bps: int
    multiplier_display: str
    display_number: int
    reference_price: int
    source: str
    created_at: str | None = None

    @classmethod
    def from_domain(cls, result: GameResult) -> "GameResultItem":
        return cls(
            period=result.period,
            outcome=result.outcome,
            multiplier_bps=result.multiplier_bps,
            multiplier_display=bps_to_display(result.multiplier_bps),
            display_number=result.display_number,
            reference_price=result.reference_price,
            source=result.source,
            created_at=result.created_at.isoformat() if result.created_at else None,
        )


class CandleItem(BaseModel):
    period: int
    open: float
    high: float
    low: float
    close: float
    closed_at: str | None = None

    @classmethod
    def from_domain(cls, candle: ChartCandle) -> "CandleItem":
        return cls(
            period=candle.period,
            open=candle.open,
            high=candle.high,
            low=candle.low,
            close=candle.close,
            closed_at=candle.closed_at.isoformat() if candle.closed_at else None,
        )


class ResultListResponse(BaseModel):
    items: list[GameResultItem]


class ChartResponse(BaseModel):
    items: list[CandleItem]
