"""SettlementPipeline: turns a resolved round into payouts.

Each bet is settled in its own transaction: the PENDING -> WON/LOST update
and the ledger credit commit together. The status guard in
``mark_settled`` makes every pass idempotent per bet id, so a failed or
interrupted settlement is resumed by running it again.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.pg_account.domain.repository import LedgerProtocol
from src.pg_account.infrastructure.persistence import LedgerRepository
from src.pg_betting.domain.models import Bet
from src.pg_betting.domain.repository import BetRepositoryProtocol
from src.pg_betting.infrastructure.persistence import BetRepository
from src.pg_common.database import SessionFactory
from src.pg_common.enums import BetStatus, LedgerEntryType
from src.pg_round.domain.models import RoundDecision
from src.pg_round.domain.repository import RoundArchiveProtocol
from src.pg_round.infrastructure.persistence import RoundArchive
from src.pg_settlement.domain.models import SettlementReport
from src.pg_settlement.domain.payout import bet_payout

logger = logging.getLogger(__name__)

_RECONCILE_BATCH = 50


class SettlementPipeline:
    def __init__(
        self,
        session_factory: SessionFactory,
        bets: BetRepositoryProtocol | None = None,
        ledger: LedgerProtocol | None = None,
        archive: RoundArchiveProtocol | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._bets: BetRepositoryProtocol = bets or BetRepository()
        self._ledger: LedgerProtocol = ledger or LedgerRepository()
        self._archive: RoundArchiveProtocol = archive or RoundArchive()

    async def settle_round(self, period: int, decision: RoundDecision) -> SettlementReport:
        report = SettlementReport(period=period)
        async with self._session_factory() as db:
            pending = await self._bets.list_by_period(db, period, BetStatus.PENDING.value)

        for bet in pending:
            try:
                async with self._session_factory() as db:
                    settled = await self._settle_one(db, bet, decision)
            except Exception:
                logger.exception("settlement of bet %s (period %d) failed", bet.id, period)
                report.failed.append(bet.id)
                continue

            if settled is None:
                report.skipped += 1
            elif settled.status == BetStatus.WON:
                report.won += 1
                report.paid_out += settled.payout
            else:
                report.lost += 1

        logger.info(
            "period %d settled: won=%d lost=%d skipped=%d paid=%d failed=%d",
            period, report.won, report.lost, report.skipped, report.paid_out, len(report.failed),
        )
        return report

    async def reconcile(self) -> list[SettlementReport]:
        """Finish every persisted result that still has PENDING bets."""
        async with self._session_factory() as db:
            results = await self._archive.results_with_pending_bets(db, _RECONCILE_BATCH)
        reports = []
        for result in results:
            logger.warning("resuming settlement for period %d", result.period)
            reports.append(await self.settle_round(result.period, result.to_decision()))
        return reports

    async def _settle_one(
        self, db: AsyncSession, bet: Bet, decision: RoundDecision
    ) -> Bet | None:
        status, payout = bet_payout(bet.side, bet.amount, decision)
        try:
            settled = await self._bets.mark_settled(db, bet.id, status.value, payout)
            if settled is not None and payout > 0:
                await self._ledger.credit(
                    db,
                    bet.user_id,
                    payout,
                    LedgerEntryType.BET_PAYOUT,
                    "BET",
                    bet.id,
                    f"Bet win - Period {bet.period}",
                )
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return settled
