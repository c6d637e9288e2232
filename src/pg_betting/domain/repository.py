"""Repository and gate Protocols for the Bet Book."""

from contextlib import AbstractAsyncContextManager
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.pg_betting.domain.models import Bet, StakeSnapshot


class BetRepositoryProtocol(Protocol):
    async def insert(self, db: AsyncSession, bet: Bet) -> Bet: ...

    async def stake_totals(self, db: AsyncSession, period: int) -> StakeSnapshot: ...

    async def list_by_period(
        self, db: AsyncSession, period: int, status: str | None = None
    ) -> list[Bet]: ...

    async def list_by_user(self, db: AsyncSession, user_id: str, limit: int) -> list[Bet]: ...

    async def mark_settled(
        self, db: AsyncSession, bet_id: str, status: str, payout: int
    ) -> Bet | None:
        """PENDING -> WON/LOST. Returns None when the bet was already settled."""
        ...


class BettingGateProtocol(Protocol):
    """Implemented by the round clock.

    ``betting_window(period)`` raises RoundClosedError unless ``period`` is the
    live round and still accepting bets, and holds the round steady (no tick
    can close it) until the block exits.
    """

    def betting_window(self, period: int) -> AbstractAsyncContextManager[None]: ...
