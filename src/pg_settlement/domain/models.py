"""Settlement report: what one pass over a round's bets did."""

from dataclasses import dataclass, field


@dataclass
class SettlementReport:
    period: int
    won: int = 0
    lost: int = 0
    skipped: int = 0           # already settled by an earlier pass
    paid_out: int = 0          # cents credited
    failed: list[str] = field(default_factory=list)  # bet ids to retry

    @property
    def settled(self) -> int:
        return self.won + self.lost

    @property
    def complete(self) -> bool:
        return not self.failed
