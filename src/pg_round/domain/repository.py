"""Round archive Protocol: finished candles and results, append-only."""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.pg_round.domain.models import ChartCandle, GameResult


class RoundArchiveProtocol(Protocol):
    async def save_candle(self, db: AsyncSession, candle: ChartCandle) -> None: ...

    async def save_result(self, db: AsyncSession, result: GameResult) -> None: ...

    async def latest_candle(self, db: AsyncSession) -> ChartCandle | None: ...

    async def list_candles(self, db: AsyncSession, limit: int) -> list[ChartCandle]: ...

    async def list_results(self, db: AsyncSession, limit: int) -> list[GameResult]: ...

    async def results_with_pending_bets(
        self, db: AsyncSession, limit: int
    ) -> list[GameResult]: ...

    async def periods_missing_result(
        self, db: AsyncSession, before_period: int, limit: int
    ) -> list[int]: ...
