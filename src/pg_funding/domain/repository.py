"""Funding repository Protocol.

``transition`` methods only move a request out of PENDING and return None
when no PENDING row matched, so an approval can never be applied twice.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.pg_funding.domain.models import Recharge, Withdrawal


class FundingRepositoryProtocol(Protocol):
    async def insert_recharge(self, db: AsyncSession, recharge: Recharge) -> Recharge: ...

    async def get_recharge(self, db: AsyncSession, recharge_id: str) -> Recharge | None: ...

    async def list_recharges(
        self, db: AsyncSession, user_id: str | None, status: str | None, limit: int
    ) -> list[Recharge]: ...

    async def transition_recharge(
        self, db: AsyncSession, recharge_id: str, status: str
    ) -> Recharge | None: ...

    async def insert_withdrawal(
        self, db: AsyncSession, withdrawal: Withdrawal
    ) -> Withdrawal: ...

    async def get_withdrawal(
        self, db: AsyncSession, withdrawal_id: str
    ) -> Withdrawal | None: ...

    async def list_withdrawals(
        self, db: AsyncSession, user_id: str | None, status: str | None, limit: int
    ) -> list[Withdrawal]: ...

    async def transition_withdrawal(
        self, db: AsyncSession, withdrawal_id: str, status: str
    ) -> Withdrawal | None: ...
