"""Round read service over an in-memory archive."""

from datetime import UTC, datetime

from fakes import FakeSession, InMemoryArchive, InMemoryBets
from src.pg_round.application.service import RoundApplicationService
from src.pg_round.domain.models import ChartCandle, GameResult


def _archive() -> InMemoryArchive:
    archive = InMemoryArchive(InMemoryBets())
    for period in (10, 11, 12):
        archive.candles[period] = ChartCandle(
            period=period, open=1.0, high=2.0, low=0.5, close=1.5,
            closed_at=datetime(2026, 1, 1, tzinfo=UTC),
        )
        archive.results[period] = GameResult(
            period=period, outcome="RED_DOJI", multiplier_bps=13000,
            display_number=period % 9 + 1, reference_price=2, source="HEURISTIC",
        )
    return archive


class TestHistory:
    async def test_chart_is_oldest_first(self) -> None:
        chart = await RoundApplicationService(_archive()).list_candles(FakeSession(), 2)
        assert [c.period for c in chart.items] == [11, 12]
        assert chart.items[0].closed_at == "2026-01-01T00:00:00+00:00"

    async def test_results_newest_first(self) -> None:
        results = await RoundApplicationService(_archive()).list_results(FakeSession(), 20)
        assert [r.period for r in results.items] == [12, 11, 10]
        assert results.items[0].multiplier_display == "1.30x"
        assert results.items[0].created_at is None


class TestStatus:
    async def test_without_totals(self, make_game) -> None:  # type: ignore[no-untyped-def]
        game = make_game({"alice": 1000})
        await game.clock.bootstrap()

        status = await RoundApplicationService(game.archive).current_status(
            FakeSession(), game.clock, game.bet_book, include_totals=False
        )

        assert status.totals is None
        assert status.status == "OPEN"
        assert status.can_force_result is True
