"""Domain models for pg_round: rounds, candles, decisions, results."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from src.pg_common.enums import Outcome, ResolutionSource, RoundStatus


@dataclass(frozen=True)
class RoundConfig:
    period_seconds: int = 120
    betting_close_offset: int = 60
    override_cutoff: int = 19
    win_multiplier_bps: int = 19200
    doji_multiplier_bps: int = 13000
    initial_price: float = 1200.0

    def __post_init__(self) -> None:
        if self.period_seconds <= 1:
            raise ValueError("period_seconds must be > 1")
        if not (0 < self.betting_close_offset < self.period_seconds):
            raise ValueError("betting_close_offset must be inside the period")
        if not (0 <= self.override_cutoff < self.period_seconds):
            raise ValueError("override_cutoff must be inside the period")
        if self.win_multiplier_bps <= 0 or self.doji_multiplier_bps <= 0:
            raise ValueError("multipliers must be positive")

    @classmethod
    def from_settings(cls, settings: Any) -> "RoundConfig":
        return cls(
            period_seconds=settings.PERIOD_SECONDS,
            betting_close_offset=settings.BETTING_CLOSE_OFFSET,
            override_cutoff=settings.OVERRIDE_CUTOFF,
            win_multiplier_bps=settings.WIN_MULTIPLIER_BPS,
            doji_multiplier_bps=settings.DOJI_MULTIPLIER_BPS,
            initial_price=settings.INITIAL_PRICE,
        )


@dataclass
class Candle:
    """Live OHLC for the current round. Cosmetic, never decides an outcome."""

    open: float
    high: float
    low: float
    close: float

    @classmethod
    def flat(cls, price: float) -> "Candle":
        return cls(open=price, high=price, low=price, close=price)

    def move_to(self, price: float) -> None:
        self.close = price
        self.high = max(self.high, price)
        self.low = min(self.low, price)


@dataclass(frozen=True)
class RoundDecision:
    outcome: Outcome
    multiplier_bps: int
    display_number: int   # 1-9, cosmetic
    source: ResolutionSource


@dataclass
class Round:
    period: int
    countdown: int
    candle: Candle
    opened_at: datetime
    status: RoundStatus = RoundStatus.OPEN
    decision: RoundDecision | None = None

    def betting_open(self, close_offset: int) -> bool:
        return self.status is RoundStatus.OPEN and self.countdown > close_offset


@dataclass(frozen=True)
class ChartCandle:
    period: int
    open: float
    high: float
    low: float
    close: float
    opened_at: datetime | None = None
    closed_at: datetime | None = None


@dataclass(frozen=True)
class GameResult:
    period: int
    outcome: str            # Outcome value
    multiplier_bps: int
    display_number: int
    reference_price: int    # rounded close
    source: str             # ResolutionSource value
    created_at: datetime | None = None

    def to_decision(self) -> RoundDecision:
        return RoundDecision(
            outcome=Outcome(self.outcome),
            multiplier_bps=self.multiplier_bps,
            display_number=self.display_number,
            source=ResolutionSource(self.source),
        )


@dataclass(frozen=True)
class RoundStatusView:
    period: int
    countdown: int
    status: RoundStatus
    betting_open: bool
    decided: bool
    can_force_result: bool
