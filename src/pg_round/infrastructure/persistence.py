"""RoundArchive: raw SQL implementation of RoundArchiveProtocol.

Both inserts are ON CONFLICT (period) DO NOTHING so a retried round end
never duplicates or rewrites history.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.pg_round.domain.models import ChartCandle, GameResult

_CANDLE_COLUMNS = "period, open, high, low, close, opened_at, closed_at"
_RESULT_COLUMNS = (
    "period, outcome, multiplier_bps, display_number, reference_price, source, created_at"
)

_INSERT_CANDLE_SQL = text("""
    INSERT INTO chart_candles (period, open, high, low, close, opened_at, closed_at)
    VALUES (:period, :open, :high, :low, :close, :opened_at, :closed_at)
    ON CONFLICT (period) DO NOTHING
""")

_INSERT_RESULT_SQL = text("""
    INSERT INTO game_results
        (period, outcome, multiplier_bps, display_number, reference_price, source)
    VALUES
        (:period, :outcome, :multiplier_bps, :display_number, :reference_price, :source)
    ON CONFLICT (period) DO NOTHING
""")

_LIST_CANDLES_SQL = text(f"""
    SELECT {_CANDLE_COLUMNS} FROM chart_candles
    ORDER BY period DESC
    LIMIT :limit
""")

_LIST_RESULTS_SQL = text(f"""
    SELECT {_RESULT_COLUMNS} FROM game_results
    ORDER BY period DESC
    LIMIT :limit
""")

_RESULTS_WITH_PENDING_SQL = text(f"""
    SELECT {_RESULT_COLUMNS} FROM game_results gr
    WHERE EXISTS (
        SELECT 1 FROM bets b
        WHERE b.period = gr.period AND b.status = 'PENDING'
    )
    ORDER BY period ASC
    LIMIT :limit
""")

_PERIODS_MISSING_RESULT_SQL = text("""
    SELECT DISTINCT b.period FROM bets b
    WHERE b.status = 'PENDING'
      AND b.period < :before_period
      AND NOT EXISTS (SELECT 1 FROM game_results gr WHERE gr.period = b.period)
    ORDER BY b.period ASC
    LIMIT :limit
""")


def _row_to_candle(row: object) -> ChartCandle:
    return ChartCandle(
        period=row.period,  # type: ignore[attr-defined]
        open=float(row.open),  # type: ignore[attr-defined]
        high=float(row.high),  # type: ignore[attr-defined]
        low=float(row.low),  # type: ignore[attr-defined]
        close=float(row.close),  # type: ignore[attr-defined]
        opened_at=row.opened_at,  # type: ignore[attr-defined]
        closed_at=row.closed_at,  # type: ignore[attr-defined]
    )


def _row_to_result(row: object) -> GameResult:
    return GameResult(
        period=row.period,  # type: ignore[attr-defined]
        outcome=row.outcome,  # type: ignore[attr-defined]
        multiplier_bps=row.multiplier_bps,  # type: ignore[attr-defined]
        display_number=row.display_number,  # type: ignore[attr-defined]
        reference_price=row.reference_price,  # type: ignore[attr-defined]
        source=row.source,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
    )


class RoundArchive:
    async def save_candle(self, db: AsyncSession, candle: ChartCandle) -> None:
        await db.execute(
            _INSERT_CANDLE_SQL,
            {
                "period": candle.period,
                "open": candle.open,
                "high": candle.high,
                "low": candle.low,
                "close": candle.close,
                "opened_at": candle.opened_at,
                "closed_at": candle.closed_at,
            },
        )

    async def save_result(self, db: AsyncSession, result: GameResult) -> None:
        await db.execute(
            _INSERT_RESULT_SQL,
            {
                "period": result.period,
                "outcome": result.outcome,
                "multiplier_bps": result.multiplier_bps,
                "display_number": result.display_number,
                "reference_price": result.reference_price,
                "source": result.source,
            },
        )

    async def latest_candle(self, db: AsyncSession) -> ChartCandle | None:
        candles = await self.list_candles(db, 1)
        return candles[0] if candles else None

    async def list_candles(self, db: AsyncSession, limit: int) -> list[ChartCandle]:
        result = await db.execute(_LIST_CANDLES_SQL, {"limit": limit})
        return [_row_to_candle(row) for row in result.fetchall()]

    async def list_results(self, db: AsyncSession, limit: int) -> list[GameResult]:
        result = await db.execute(_LIST_RESULTS_SQL, {"limit": limit})
        return [_row_to_result(row) for row in result.fetchall()]

    async def results_with_pending_bets(
        self, db: AsyncSession, limit: int
    ) -> list[GameResult]:
        result = await db.execute(_RESULTS_WITH_PENDING_SQL, {"limit": limit})
        return [_row_to_result(row) for row in result.fetchall()]

    async def periods_missing_result(
        self, db: AsyncSession, before_period: int, limit: int
    ) -> list[int]:
        result = await db.execute(
            _PERIODS_MISSING_RESULT_SQL, {"before_period": before_period, "limit": limit}
        )
        return [row.period for row in result.fetchall()]
