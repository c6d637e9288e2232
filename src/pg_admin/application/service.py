"""Admin application service: live round oversight and funding review."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.pg_admin.application.schemas import (
    ForceResultResponse,
    GameMonitorResponse,
    SideExposure,
)
from src.pg_betting.application.service import BetBook, parse_side
from src.pg_common.enums import RechargeStatus, WithdrawalStatus
from src.pg_funding.application.service import FundingService
from src.pg_funding.domain.models import Recharge, Withdrawal
from src.pg_round.engine.clock import RoundClock

logger = logging.getLogger(__name__)


class AdminService:
    def __init__(self, funding: FundingService | None = None) -> None:
        self._funding = funding or FundingService()

    async def game_monitor(
        self, db: AsyncSession, clock: RoundClock, bet_book: BetBook
    ) -> GameMonitorResponse:
        view = clock.status()
        stakes = await bet_book.snapshot_stakes(db, view.period)
        return GameMonitorResponse(
            period=view.period,
            countdown=view.countdown,
            status=view.status.value,
            betting_open=view.betting_open,
            decided=view.decided,
            can_force_result=view.can_force_result,
            green=SideExposure.of(stakes.up_count, stakes.up),
            red=SideExposure.of(stakes.down_count, stakes.down),
            total=SideExposure.of(stakes.up_count + stakes.down_count, stakes.total),
        )

    async def force_result(
        self, clock: RoundClock, raw_side: str, admin_username: str
    ) -> ForceResultResponse:
        side = parse_side(raw_side)
        period, decision = await clock.force_result(side)
        logger.warning("result for period %d forced to %s by %s", period, side.value, admin_username)
        return ForceResultResponse.from_decision(period, decision)

    async def list_recharges(
        self, db: AsyncSession, status: str | None, limit: int
    ) -> list[Recharge]:
        return await self._funding.list_recharges(db, status=status, limit=limit)

    async def review_recharge(
        self, db: AsyncSession, recharge_id: str, status: str
    ) -> Recharge:
        return await self._funding.review_recharge(db, recharge_id, RechargeStatus(status))

    async def list_withdrawals(
        self, db: AsyncSession, status: str | None, limit: int
    ) -> list[Withdrawal]:
        return await self._funding.list_withdrawals(db, status=status, limit=limit)

    async def review_withdrawal(
        self, db: AsyncSession, withdrawal_id: str, status: str
    ) -> Withdrawal:
        return await self._funding.review_withdrawal(
            db, withdrawal_id, WithdrawalStatus(status)
        )
