"""BetRepository: raw SQL implementation of BetRepositoryProtocol.

Transaction ownership: the CALLER starts and commits the transaction.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.pg_betting.domain.models import Bet, StakeSnapshot
from src.pg_common.enums import BetSide
from src.pg_common.errors import InternalError

_BET_COLUMNS = (
    "id, user_id, username, period, side, amount, status, payout, created_at, settled_at"
)

_INSERT_BET_SQL = text(f"""
    INSERT INTO bets (id, user_id, username, period, side, amount, status, payout)
    VALUES (:id, :user_id, :username, :period, :side, :amount, :status, :payout)
    RETURNING {_BET_COLUMNS}
""")

_STAKE_TOTALS_SQL = text("""
    SELECT side, COALESCE(SUM(amount), 0) AS total, COUNT(*) AS n
    FROM bets
    WHERE period = :period
    GROUP BY side
""")

_LIST_BY_PERIOD_SQL = text(f"""
    SELECT {_BET_COLUMNS}
    FROM bets
    WHERE period = :period
      AND (:status IS NULL OR status = :status)
    ORDER BY created_at ASC, id ASC
""")

_LIST_BY_USER_SQL = text(f"""
    SELECT {_BET_COLUMNS}
    FROM bets
    WHERE user_id = :user_id
    ORDER BY created_at DESC, id DESC
    LIMIT :limit
""")

# The status guard is the settlement idempotency key: a retried settlement
# matches zero rows for a bet that was already paid.
_MARK_SETTLED_SQL = text(f"""
    UPDATE bets
    SET status = :status,
        payout = :payout,
        settled_at = NOW()
    WHERE id = :bet_id AND status = 'PENDING'
    RETURNING {_BET_COLUMNS}
""")


def _row_to_bet(row: object) -> Bet:
    return Bet(
        id=row.id,  # type: ignore[attr-defined]
        user_id=row.user_id,  # type: ignore[attr-defined]
        username=row.username,  # type: ignore[attr-defined]
        period=row.period,  # type: ignore[attr-defined]
        side=row.side,  # type: ignore[attr-defined]
        amount=row.amount,  # type: ignore[attr-defined]
        status=row.status,  # type: ignore[attr-defined]
        payout=row.payout,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        settled_at=row.settled_at,  # type: ignore[attr-defined]
    )


class BetRepository:
    async def insert(self, db: AsyncSession, bet: Bet) -> Bet:
        result = await db.execute(
            _INSERT_BET_SQL,
            {
                "id": bet.id,
                "user_id": bet.user_id,
                "username": bet.username,
                "period": bet.period,
                "side": bet.side,
                "amount": bet.amount,
                "status": bet.status,
                "payout": bet.payout,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Bet insert returned no rows")
        return _row_to_bet(row)

    async def stake_totals(self, db: AsyncSession, period: int) -> StakeSnapshot:
        rows = (await db.execute(_STAKE_TOTALS_SQL, {"period": period})).fetchall()
        totals = {row.side: (int(row.total), int(row.n)) for row in rows}
        up, up_count = totals.get(BetSide.UP.value, (0, 0))
        down, down_count = totals.get(BetSide.DOWN.value, (0, 0))
        return StakeSnapshot(
            period=period, up=up, down=down, up_count=up_count, down_count=down_count
        )

    async def list_by_period(
        self, db: AsyncSession, period: int, status: str | None = None
    ) -> list[Bet]:
        result = await db.execute(_LIST_BY_PERIOD_SQL, {"period": period, "status": status})
        return [_row_to_bet(row) for row in result.fetchall()]

    async def list_by_user(self, db: AsyncSession, user_id: str, limit: int) -> list[Bet]:
        result = await db.execute(_LIST_BY_USER_SQL, {"user_id": user_id, "limit": limit})
        return [_row_to_bet(row) for row in result.fetchall()]

    async def mark_settled(
        self, db: AsyncSession, bet_id: str, status: str, payout: int
    ) -> Bet | None:
        result = await db.execute(
            _MARK_SETTLED_SQL, {"bet_id": bet_id, "status": status, "payout": payout}
        )
        row = result.fetchone()
        return _row_to_bet(row) if row else None
