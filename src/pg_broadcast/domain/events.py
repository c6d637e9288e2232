"""Wire events published by the round engine.

Field names are camelCase on the wire (``bettingActive``, ``winningSide``)
and stable: clients key on them. Every frame is ``{"type": ..., "data": ...}``.
"""

from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from src.pg_common.enums import EventType


class WireEvent(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    event_type: ClassVar[EventType]

    def to_wire(self) -> dict[str, Any]:
        return {"type": self.event_type.value, "data": self.model_dump(by_alias=True)}


class PriceUpdate(WireEvent):
    event_type: ClassVar[EventType] = EventType.PRICE_UPDATE

    period: int
    open: float
    high: float
    low: float
    close: float
    countdown: int
    betting_active: bool


class BettingClosed(WireEvent):
    event_type: ClassVar[EventType] = EventType.BETTING_CLOSED

    period: int


class GameResultEvent(WireEvent):
    event_type: ClassVar[EventType] = EventType.GAME_RESULT

    period: int
    winning_side: str        # Outcome value, e.g. "GREEN" or "RED_DOJI"
    display_number: int
    reference_price: int


class CandleComplete(WireEvent):
    event_type: ClassVar[EventType] = EventType.CANDLE_COMPLETE

    period: int
    open: float
    high: float
    low: float
    close: float


class NewPeriod(WireEvent):
    event_type: ClassVar[EventType] = EventType.NEW_PERIOD

    period: int
    countdown: int
    betting_active: bool


class BetPlaced(WireEvent):
    event_type: ClassVar[EventType] = EventType.BET_PLACED

    period: int
    username: str
    side: str
    amount: int  # cents
