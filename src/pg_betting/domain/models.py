"""Domain models for pg_betting: pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime

from src.pg_common.enums import BetSide, BetStatus


@dataclass
class Bet:
    id: str
    user_id: str
    username: str
    period: int
    side: str                 # BetSide value
    amount: int               # cents, > 0
    status: str = BetStatus.PENDING.value
    payout: int = 0           # cents, set once at settlement
    created_at: datetime | None = None
    settled_at: datetime | None = None

    @property
    def is_pending(self) -> bool:
        return self.status == BetStatus.PENDING


@dataclass(frozen=True)
class StakeSnapshot:
    """Total exposure per side for one round."""

    period: int
    up: int = 0        # cents staked on UP
    down: int = 0      # cents staked on DOWN
    up_count: int = 0
    down_count: int = 0

    @property
    def total(self) -> int:
        return self.up + self.down

    def amount_for(self, side: BetSide) -> int:
        return self.up if side is BetSide.UP else self.down
