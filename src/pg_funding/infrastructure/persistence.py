"""FundingRepository: raw SQL implementation of FundingRepositoryProtocol.

Transaction ownership: the CALLER starts and commits the transaction.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.pg_common.errors import InternalError
from src.pg_funding.domain.models import Recharge, Withdrawal

_RECHARGE_COLUMNS = "id, user_id, username, amount, upi, utr, status, created_at, processed_at"
_WITHDRAWAL_COLUMNS = (
    "id, user_id, username, amount, account_number, ifsc_code, account_holder, "
    "status, created_at, processed_at"
)

_INSERT_RECHARGE_SQL = text(f"""
    INSERT INTO recharges (id, user_id, username, amount, upi, utr, status)
    VALUES (:id, :user_id, :username, :amount, :upi, :utr, :status)
    RETURNING {_RECHARGE_COLUMNS}
""")

_GET_RECHARGE_SQL = text(f"""
    SELECT {_RECHARGE_COLUMNS} FROM recharges WHERE id = :id
""")

_LIST_RECHARGES_SQL = text(f"""
    SELECT {_RECHARGE_COLUMNS} FROM recharges
    WHERE (:user_id IS NULL OR user_id = :user_id)
      AND (:status IS NULL OR status = :status)
    ORDER BY created_at DESC, id DESC
    LIMIT :limit
""")

_TRANSITION_RECHARGE_SQL = text(f"""
    UPDATE recharges
    SET status = :status, processed_at = NOW()
    WHERE id = :id AND status = 'PENDING'
    RETURNING {_RECHARGE_COLUMNS}
""")

_INSERT_WITHDRAWAL_SQL = text(f"""
    INSERT INTO withdrawals
        (id, user_id, username, amount, account_number, ifsc_code, account_holder, status)
    VALUES
        (:id, :user_id, :username, :amount, :account_number, :ifsc_code,
         :account_holder, :status)
    RETURNING {_WITHDRAWAL_COLUMNS}
""")

_GET_WITHDRAWAL_SQL = text(f"""
    SELECT {_WITHDRAWAL_COLUMNS} FROM withdrawals WHERE id = :id
""")

_LIST_WITHDRAWALS_SQL = text(f"""
    SELECT {_WITHDRAWAL_COLUMNS} FROM withdrawals
    WHERE (:user_id IS NULL OR user_id = :user_id)
      AND (:status IS NULL OR status = :status)
    ORDER BY created_at DESC, id DESC
    LIMIT :limit
""")

_TRANSITION_WITHDRAWAL_SQL = text(f"""
    UPDATE withdrawals
    SET status = :status, processed_at = NOW()
    WHERE id = :id AND status = 'PENDING'
    RETURNING {_WITHDRAWAL_COLUMNS}
""")


def _row_to_recharge(row: object) -> Recharge:
    return Recharge(
        id=row.id,  # type: ignore[attr-defined]
        user_id=row.user_id,  # type: ignore[attr-defined]
        username=row.username,  # type: ignore[attr-defined]
        amount=row.amount,  # type: ignore[attr-defined]
        upi=row.upi,  # type: ignore[attr-defined]
        utr=row.utr,  # type: ignore[attr-defined]
        status=row.status,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        processed_at=row.processed_at,  # type: ignore[attr-defined]
    )


def _row_to_withdrawal(row: object) -> Withdrawal:
    return Withdrawal(
        id=row.id,  # type: ignore[attr-defined]
        user_id=row.user_id,  # type: ignore[attr-defined]
        username=row.username,  # type: ignore[attr-defined]
        amount=row.amount,  # type: ignore[attr-defined]
        account_number=row.account_number,  # type: ignore[attr-defined]
        ifsc_code=row.ifsc_code,  # type: ignore[attr-defined]
        account_holder=row.account_holder,  # type: ignore[attr-defined]
        status=row.status,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        processed_at=row.processed_at,  # type: ignore[attr-defined]
    )


class FundingRepository:
    async def insert_recharge(self, db: AsyncSession, recharge: Recharge) -> Recharge:
        result = await db.execute(
            _INSERT_RECHARGE_SQL,
            {
                "id": recharge.id,
                "user_id": recharge.user_id,
                "username": recharge.username,
                "amount": recharge.amount,
                "upi": recharge.upi,
                "utr": recharge.utr,
                "status": recharge.status,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Recharge insert returned no rows")
        return _row_to_recharge(row)

    async def get_recharge(self, db: AsyncSession, recharge_id: str) -> Recharge | None:
        row = (await db.execute(_GET_RECHARGE_SQL, {"id": recharge_id})).fetchone()
        return _row_to_recharge(row) if row else None

    async def list_recharges(
        self, db: AsyncSession, user_id: str | None, status: str | None, limit: int
    ) -> list[Recharge]:
        result = await db.execute(
            _LIST_RECHARGES_SQL, {"user_id": user_id, "status": status, "limit": limit}
        )
        return [_row_to_recharge(row) for row in result.fetchall()]

    async def transition_recharge(
        self, db: AsyncSession, recharge_id: str, status: str
    ) -> Recharge | None:
        row = (
            await db.execute(_TRANSITION_RECHARGE_SQL, {"id": recharge_id, "status": status})
        ).fetchone()
        return _row_to_recharge(row) if row else None

    async def insert_withdrawal(self, db: AsyncSession, withdrawal: Withdrawal) -> Withdrawal:
        result = await db.execute(
            _INSERT_WITHDRAWAL_SQL,
            {
                "id": withdrawal.id,
                "user_id": withdrawal.user_id,
                "username": withdrawal.username,
                "amount": withdrawal.amount,
                "account_number": withdrawal.account_number,
                "ifsc_code": withdrawal.ifsc_code,
                "account_holder": withdrawal.account_holder,
                "status": withdrawal.status,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Withdrawal insert returned no rows")
        return _row_to_withdrawal(row)

    async def get_withdrawal(self, db: AsyncSession, withdrawal_id: str) -> Withdrawal | None:
        row = (await db.execute(_GET_WITHDRAWAL_SQL, {"id": withdrawal_id})).fetchone()
        return _row_to_withdrawal(row) if row else None

    async def list_withdrawals(
        self, db: AsyncSession, user_id: str | None, status: str | None, limit: int
    ) -> list[Withdrawal]:
        result = await db.execute(
            _LIST_WITHDRAWALS_SQL, {"user_id": user_id, "status": status, "limit": limit}
        )
        return [_row_to_withdrawal(row) for row in result.fetchall()]

    async def transition_withdrawal(
        self, db: AsyncSession, withdrawal_id: str, status: str
    ) -> Withdrawal | None:
        row = (
            await db.execute(
                _TRANSITION_WITHDRAWAL_SQL, {"id": withdrawal_id, "status": status}
            )
        ).fetchone()
        return _row_to_withdrawal(row) if row else None
