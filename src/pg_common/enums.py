"""Global enums: must match DB CHECK constraints exactly."""

from enum import Enum


class RoundStatus(str, Enum):
    OPEN = "OPEN"
    BETTING_CLOSED = "BETTING_CLOSED"
    RESOLVED = "RESOLVED"


class BetSide(str, Enum):
    """Bettable direction. Displayed to players as green (UP) / red (DOWN)."""
    UP = "UP"
    DOWN = "DOWN"

    @property
    def color(self) -> str:
        return "green" if self is BetSide.UP else "red"


class Outcome(str, Enum):
    """Round outcome class. Doji variants pay the reduced multiplier."""
    GREEN = "GREEN"
    RED = "RED"
    GREEN_DOJI = "GREEN_DOJI"
    RED_DOJI = "RED_DOJI"

    @property
    def winning_side(self) -> BetSide:
        if self in (Outcome.GREEN, Outcome.GREEN_DOJI):
            return BetSide.UP
        return BetSide.DOWN

    @property
    def is_doji(self) -> bool:
        return self in (Outcome.GREEN_DOJI, Outcome.RED_DOJI)


class ResolutionSource(str, Enum):
    HEURISTIC = "HEURISTIC"
    ADMIN = "ADMIN"


class BetStatus(str, Enum):
    PENDING = "PENDING"
    WON = "WON"
    LOST = "LOST"


class LedgerEntryType(str, Enum):
    BET_STAKE = "BET_STAKE"
    BET_PAYOUT = "BET_PAYOUT"
    RECHARGE = "RECHARGE"
    WITHDRAW = "WITHDRAW"


class RechargeStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class WithdrawalStatus(str, Enum):
    PENDING = "PENDING"
    PAID = "PAID"
    REJECTED = "REJECTED"


class EventType(str, Enum):
    """Broadcast event names: part of the wire contract, never rename."""
    PRICE_UPDATE = "priceUpdate"
    BETTING_CLOSED = "bettingClosed"
    GAME_RESULT = "gameResult"
    CANDLE_COMPLETE = "candleComplete"
    NEW_PERIOD = "newPeriod"
    BET_PLACED = "betPlaced"
