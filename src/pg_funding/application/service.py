"""FundingService: user funding requests and their admin review.

Money moves only through the Ledger:
  submit_withdrawal  -> debit WITHDRAW (same transaction as the request row)
  approve recharge   -> credit RECHARGE (same transaction as the status flip)
Rejecting either request, or paying out a withdrawal, is a status flip only.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.pg_account.domain.repository import LedgerProtocol
from src.pg_account.infrastructure.persistence import LedgerRepository
from src.pg_common.enums import LedgerEntryType, RechargeStatus, WithdrawalStatus
from src.pg_common.errors import FundingRequestNotFoundError, FundingRequestProcessedError
from src.pg_common.id_generator import generate_id
from src.pg_funding.domain.models import Recharge, Withdrawal
from src.pg_funding.domain.repository import FundingRepositoryProtocol
from src.pg_funding.infrastructure.persistence import FundingRepository

logger = logging.getLogger(__name__)


class FundingService:
    def __init__(
        self,
        repo: FundingRepositoryProtocol | None = None,
        ledger: LedgerProtocol | None = None,
    ) -> None:
        self._repo: FundingRepositoryProtocol = repo or FundingRepository()
        self._ledger: LedgerProtocol = ledger or LedgerRepository()

    # ------------------------------------------------------------------
    # User side
    # ------------------------------------------------------------------

    async def submit_recharge(
        self,
        db: AsyncSession,
        user_id: str,
        username: str,
        amount: int,
        upi: str | None,
        utr: str | None,
    ) -> Recharge:
        recharge = Recharge(
            id=generate_id(), user_id=user_id, username=username, amount=amount, upi=upi, utr=utr
        )
        try:
            saved = await self._repo.insert_recharge(db, recharge)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("recharge %s submitted by %s for %d", saved.id, username, amount)
        return saved

    async def submit_withdrawal(
        self,
        db: AsyncSession,
        user_id: str,
        username: str,
        amount: int,
        account_number: str,
        ifsc_code: str,
        account_holder: str,
    ) -> Withdrawal:
        withdrawal = Withdrawal(
            id=generate_id(),
            user_id=user_id,
            username=username,
            amount=amount,
            account_number=account_number,
            ifsc_code=ifsc_code,
            account_holder=account_holder,
        )
        try:
            await self._ledger.debit(
                db,
                user_id,
                amount,
                LedgerEntryType.WITHDRAW,
                "WITHDRAWAL",
                withdrawal.id,
                "Withdrawal request",
            )
            saved = await self._repo.insert_withdrawal(db, withdrawal)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("withdrawal %s submitted by %s for %d", saved.id, username, amount)
        return saved

    async def list_recharges(
        self,
        db: AsyncSession,
        user_id: str | None = None,
        status: str | None = None,
        limit: int = 50,
    ) -> list[Recharge]:
        return await self._repo.list_recharges(db, user_id, status, limit)

    async def list_withdrawals(
        self,
        db: AsyncSession,
        user_id: str | None = None,
        status: str | None = None,
        limit: int = 50,
    ) -> list[Withdrawal]:
        return await self._repo.list_withdrawals(db, user_id, status, limit)

    # ------------------------------------------------------------------
    # Admin review
    # ------------------------------------------------------------------

    async def review_recharge(
        self, db: AsyncSession, recharge_id: str, status: RechargeStatus
    ) -> Recharge:
        if status is RechargeStatus.PENDING:
            raise ValueError("a recharge can only be APPROVED or REJECTED")
        try:
            updated = await self._repo.transition_recharge(db, recharge_id, status.value)
            if updated is None:
                existing = await self._repo.get_recharge(db, recharge_id)
                if existing is None:
                    raise FundingRequestNotFoundError("Recharge", recharge_id)
                raise FundingRequestProcessedError("Recharge", recharge_id, existing.status)
            if status is RechargeStatus.APPROVED:
                await self._ledger.credit(
                    db,
                    updated.user_id,
                    updated.amount,
                    LedgerEntryType.RECHARGE,
                    "RECHARGE",
                    updated.id,
                    f"Recharge approved - {updated.utr or updated.id}",
                )
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("recharge %s -> %s", recharge_id, status.value)
        return updated

    async def review_withdrawal(
        self, db: AsyncSession, withdrawal_id: str, status: WithdrawalStatus
    ) -> Withdrawal:
        if status is WithdrawalStatus.PENDING:
            raise ValueError("a withdrawal can only be PAID or REJECTED")
        try:
            updated = await self._repo.transition_withdrawal(db, withdrawal_id, status.value)
            if updated is None:
                existing = await self._repo.get_withdrawal(db, withdrawal_id)
                if existing is None:
                    raise FundingRequestNotFoundError("Withdrawal", withdrawal_id)
                raise FundingRequestProcessedError("Withdrawal", withdrawal_id, existing.status)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("withdrawal %s -> %s", withdrawal_id, status.value)
        return updated
