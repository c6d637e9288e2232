"""Round read service: live status plus archived results and candles."""

from sqlalchemy.ext.asyncio import AsyncSession

from src.pg_betting.application.service import BetBook
from src.pg_round.application.schemas import (
    CandleItem,
    ChartResponse,
    GameResultItem,
    ResultListResponse,
    RoundStatusResponse,
)
from src.pg_round.domain.repository import RoundArchiveProtocol
from src.pg_round.engine.clock import RoundClock
from src.pg_round.infrastructure.persistence import RoundArchive


class RoundApplicationService:
    def __init__(self, archive: RoundArchiveProtocol | None = None) -> None:
        self._archive: RoundArchiveProtocol = archive or RoundArchive()

    async def current_status(
        self,
        db: AsyncSession,
        clock: RoundClock,
        bet_book: BetBook,
        include_totals: bool = True,
    ) -> RoundStatusResponse:
        view = clock.status()
        stakes = await bet_book.snapshot_stakes(db, view.period) if include_totals else None
        return RoundStatusResponse.from_view(view, stakes)

    async def list_results(self, db: AsyncSession, limit: int) -> ResultListResponse:
        results = await self._archive.list_results(db, limit)
        return ResultListResponse(items=[GameResultItem.from_domain(r) for r in results])

    async def list_candles(self, db: AsyncSession, limit: int) -> ChartResponse:
        """Oldest first, which is the order a chart draws them in."""
        candles = await self._archive.list_candles(db, limit)
        return ChartResponse(items=[CandleItem.from_domain(c) for c in reversed(candles)])
