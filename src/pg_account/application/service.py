"""AccountApplicationService: read side of the ledger for the account API.

Balance mutations never go through here; they are issued by the Bet Book,
the Settlement Pipeline and the funding services via LedgerProtocol.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from src.pg_account.application.schemas import (
    BalanceResponse,
    LedgerEntryItem,
    LedgerResponse,
    cursor_decode,
    cursor_encode,
)
from src.pg_account.domain.repository import LedgerProtocol
from src.pg_account.infrastructure.persistence import LedgerRepository
from src.pg_common.cents import cents_to_display
from src.pg_common.errors import AccountNotFoundError


class AccountApplicationService:
    def __init__(self, ledger: LedgerProtocol | None = None) -> None:
        self._ledger: LedgerProtocol = ledger or LedgerRepository()

    async def get_balance(self, db: AsyncSession, user_id: str) -> BalanceResponse:
        account = await self._ledger.get_account(db, user_id)
        if account is None:
            raise AccountNotFoundError(user_id)
        return BalanceResponse.from_cents(
            user_id=user_id,
            available=account.available_balance,
            bonus=account.bonus_balance,
        )

    async def list_ledger(
        self,
        db: AsyncSession,
        user_id: str,
        cursor: str | None,
        limit: int,
        entry_type: str | None,
    ) -> LedgerResponse:
        cursor_id = cursor_decode(cursor)
        # Fetch limit+1 to detect has_more without a COUNT(*) query
        entries = await self._ledger.list_entries(
            db, user_id, cursor_id, limit + 1, entry_type
        )
        has_more = len(entries) > limit
        page = entries[:limit]

        items = [
            LedgerEntryItem(
                id=e.id,
                entry_type=e.entry_type,
                amount_cents=e.amount,
                amount_display=cents_to_display(e.amount),
                balance_after_cents=e.balance_after,
                balance_after_display=cents_to_display(e.balance_after),
                reference_type=e.reference_type,
                reference_id=e.reference_id,
                description=e.description,
                created_at=e.created_at.isoformat() if e.created_at else "",
            )
            for e in page
        ]

        next_cursor = cursor_encode(page[-1].id) if has_more and page else None
        return LedgerResponse(items=items, next_cursor=next_cursor, has_more=has_more)
