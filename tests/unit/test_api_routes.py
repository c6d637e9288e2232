"""HTTP surface: envelope, auth guards and error translation.

The app lifespan is not run; the engine and DB session come from
dependency overrides.
"""

from collections.abc import AsyncGenerator
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from httpx import AsyncClient

from fakes import FakeSession
from src.main import app
from src.pg_broadcast.application.hub import Broadcaster
from src.pg_broadcast.domain.events import BettingClosed
from src.pg_common.database import get_db_session
from src.pg_gateway.auth.dependencies import get_current_user
from src.pg_gateway.middleware.rate_limit import bet_rate_limit
from src.pg_round.api.dependencies import get_bet_book, get_broadcaster, get_round_clock


async def _session() -> AsyncGenerator[FakeSession, None]:
    yield FakeSession()


async def _no_limit() -> None:
    return None


def _as_user(username: str, is_admin: bool = False) -> None:
    user = SimpleNamespace(
        id=f"user-{username}", username=username, is_active=True, is_admin=is_admin
    )
    app.dependency_overrides[get_current_user] = lambda: user


@pytest.fixture
async def game(make_game):  # type: ignore[no-untyped-def]
    game = make_game({"alice": 50_000})
    await game.clock.bootstrap()
    app.dependency_overrides[get_db_session] = _session
    app.dependency_overrides[get_round_clock] = lambda: game.clock
    app.dependency_overrides[get_bet_book] = lambda: game.bet_book
    app.dependency_overrides[bet_rate_limit] = _no_limit
    return game


class TestHealth:
    async def test_engine_not_running_without_lifespan(self, client: AsyncClient) -> None:
        resp = await client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok", "version": "0.1.0", "round_engine": False}

    async def test_missing_engine_is_internal_error(self, client: AsyncClient) -> None:
        app.dependency_overrides[get_db_session] = _session
        resp = await client.get("/api/v1/game/status")
        assert resp.status_code == 500
        assert resp.json()["code"] == 9002


class TestGameStatus:
    async def test_status_includes_totals(self, client: AsyncClient, game) -> None:  # type: ignore[no-untyped-def]
        await game.bet("alice", "DOWN", 1_500)

        resp = await client.get("/api/v1/game/status")

        body = resp.json()
        assert body["code"] == 0
        assert body["request_id"].startswith("req_")
        data = body["data"]
        assert data["period"] == game.clock.current_round.period
        assert data["betting_open"] is True
        assert data["totals"]["down_cents"] == 1_500
        assert data["totals"]["down_display"] == "₹15.00"


class TestPlaceBet:
    async def test_success(self, client: AsyncClient, game) -> None:  # type: ignore[no-untyped-def]
        _as_user("alice")
        period = game.clock.current_round.period

        resp = await client.post(
            "/api/v1/game/bets",
            json={"period": period, "side": "green", "amount_cents": 2_000},
        )

        assert resp.status_code == 200
        data = resp.json()["data"]
        assert (data["side"], data["amount_cents"], data["status"]) == ("UP", 2_000, "PENDING")
        assert game.balance("alice") == 48_000
        assert game.broadcaster.types()[-1] == "betPlaced"

    async def test_closed_round_envelope(self, client: AsyncClient, game) -> None:  # type: ignore[no-untyped-def]
        _as_user("alice")
        await game.tick_until(game.config.betting_close_offset)

        resp = await client.post(
            "/api/v1/game/bets",
            json={
                "period": game.clock.current_round.period,
                "side": "UP",
                "amount_cents": 100,
            },
        )

        assert resp.status_code == 422
        body = resp.json()
        assert body["code"] == 3001
        assert body["data"] is None
        assert game.balance("alice") == 50_000

    async def test_insufficient_funds(self, client: AsyncClient, game) -> None:  # type: ignore[no-untyped-def]
        _as_user("alice")
        resp = await client.post(
            "/api/v1/game/bets",
            json={
                "period": game.clock.current_round.period,
                "side": "DOWN",
                "amount_cents": 60_000,
            },
        )
        assert resp.json()["code"] == 2001

    async def test_validation_error_envelope(self, client: AsyncClient, game) -> None:  # type: ignore[no-untyped-def]
        _as_user("alice")
        resp = await client.post(
            "/api/v1/game/bets", json={"period": 1, "side": "UP", "amount_cents": 0}
        )
        assert resp.status_code == 422
        body = resp.json()
        assert body["code"] == 4001
        assert body["data"][0]["loc"][-1] == "amount_cents"

    async def test_requires_token(self, client: AsyncClient, game) -> None:  # type: ignore[no-untyped-def]
        resp = await client.post(
            "/api/v1/game/bets", json={"period": 1, "side": "UP", "amount_cents": 10}
        )
        assert resp.status_code == 401


class TestAdminRoutes:
    async def test_player_is_refused(self, client: AsyncClient, game) -> None:  # type: ignore[no-untyped-def]
        _as_user("alice")
        resp = await client.post("/api/v1/admin/round/result", json={"side": "UP"})
        assert resp.status_code == 403
        assert resp.json()["code"] == 1007

    async def test_admin_forces_result(self, client: AsyncClient, game) -> None:  # type: ignore[no-untyped-def]
        _as_user("root", is_admin=True)

        resp = await client.post("/api/v1/admin/round/result", json={"side": "DOWN"})

        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["source"] == "ADMIN"
        assert data["outcome"] in ("RED", "RED_DOJI")

        again = await client.post("/api/v1/admin/round/result", json={"side": "UP"})
        assert again.status_code == 409
        assert again.json()["code"] == 3003

    async def test_too_late(self, client: AsyncClient, game) -> None:  # type: ignore[no-untyped-def]
        _as_user("root", is_admin=True)
        await game.tick_until(game.config.override_cutoff)

        resp = await client.post("/api/v1/admin/round/result", json={"side": "UP"})

        assert resp.json()["code"] == 3002

    async def test_game_monitor(self, client: AsyncClient, game) -> None:  # type: ignore[no-untyped-def]
        _as_user("root", is_admin=True)
        await game.bet("alice", "UP", 700)

        resp = await client.get("/api/v1/admin/game-monitor")

        data = resp.json()["data"]
        assert data["green"] == {"count": 1, "amount_cents": 700, "amount_display": "₹7.00"}
        assert data["red"]["count"] == 0


class _GreetingBroadcaster(Broadcaster):
    """Queues one frame for every new subscriber."""

    def subscribe(self):  # type: ignore[no-untyped-def]
        sub = super().subscribe()
        sub.offer(BettingClosed(period=77).to_wire())
        return sub


class TestStream:
    def test_frames_are_pushed_and_subscription_released(self) -> None:
        hub = _GreetingBroadcaster()
        app.dependency_overrides[get_broadcaster] = lambda: hub
        try:
            with TestClient(app).websocket_connect("/ws") as ws:
                assert ws.receive_json() == {"type": "bettingClosed", "data": {"period": 77}}
        finally:
            app.dependency_overrides.clear()
