"""In-memory stand-ins for the repositories, used to drive whole rounds.

They implement the same Protocols as the SQL repositories; nothing is
rolled back on ``rollback()``, so tests inject failures *before* a store
is mutated.
"""

import random
from dataclasses import replace
from datetime import UTC, datetime

from src.pg_account.domain.models import Account, LedgerEntry
from src.pg_betting.application.service import BetBook
from src.pg_betting.domain.models import Bet, StakeSnapshot
from src.pg_broadcast.application.hub import Broadcaster
from src.pg_common.enums import BetSide, BetStatus
from src.pg_common.errors import AccountNotFoundError, InsufficientFundsError
from src.pg_gateway.user.repository import UserRef
from src.pg_round.domain.models import ChartCandle, GameResult, RoundConfig
from src.pg_round.domain.resolver import StakeWeightedResolver
from src.pg_round.engine.clock import RoundClock
from src.pg_settlement.application.service import SettlementPipeline

_EPOCH = datetime(2026, 1, 1, tzinfo=UTC)

START_PERIOD = 1001
PERIOD_SECONDS = 120


class FakeSession:
    def __init__(self) -> None:
        self.commits = 0
        self.rollbacks = 0

    async def __aenter__(self) -> "FakeSession":
        return self

    async def __aexit__(self, *exc: object) -> None:
        return None

    async def commit(self) -> None:
        self.commits += 1

    async def rollback(self) -> None:
        self.rollbacks += 1


class InMemoryLedger:
    def __init__(self, balances: dict[str, int] | None = None) -> None:
        self.balances = dict(balances or {})
        self.entries: list[LedgerEntry] = []

    def _account(self, user_id: str) -> Account:
        return Account(
            id=f"acc-{user_id}",
            user_id=user_id,
            available_balance=self.balances[user_id],
            bonus_balance=0,
            version=len(self.entries),
            created_at=_EPOCH,
            updated_at=_EPOCH,
        )

    def _append(self, user_id, amount, entry_type, ref_type, ref_id, description):  # type: ignore[no-untyped-def]
        entry = LedgerEntry(
            id=len(self.entries) + 1,
            user_id=user_id,
            entry_type=str(entry_type.value if hasattr(entry_type, "value") else entry_type),
            amount=amount,
            balance_after=self.balances[user_id],
            reference_type=ref_type,
            reference_id=ref_id,
            description=description,
        )
        self.entries.append(entry)
        return entry

    async def get_account(self, db, user_id):  # type: ignore[no-untyped-def]
        return self._account(user_id) if user_id in self.balances else None

    async def credit(self, db, user_id, amount, entry_type, ref_type, ref_id, description):  # type: ignore[no-untyped-def]
        if user_id not in self.balances:
            raise AccountNotFoundError(user_id)
        self.balances[user_id] += amount
        entry = self._append(user_id, amount, entry_type, ref_type, ref_id, description)
        return self._account(user_id), entry

    async def debit(self, db, user_id, amount, entry_type, ref_type, ref_id, description):  # type: ignore[no-untyped-def]
        if user_id not in self.balances:
            raise AccountNotFoundError(user_id)
        if self.balances[user_id] < amount:
            raise InsufficientFundsError(amount, self.balances[user_id])
        self.balances[user_id] -= amount
        entry = self._append(user_id, -amount, entry_type, ref_type, ref_id, description)
        return self._account(user_id), entry

    async def list_entries(self, db, user_id, cursor_id, limit, entry_type):  # type: ignore[no-untyped-def]
        rows = [e for e in reversed(self.entries) if e.user_id == user_id]
        return rows[:limit]

    def credits_for(self, user_id: str) -> int:
        return sum(e.amount for e in self.entries if e.user_id == user_id and e.amount > 0)


class InMemoryBets:
    def __init__(self) -> None:
        self.bets: dict[str, Bet] = {}
        self.fail_marks = 0

    async def insert(self, db, bet):  # type: ignore[no-untyped-def]
        self.bets[bet.id] = bet
        return bet

    async def stake_totals(self, db, period):  # type: ignore[no-untyped-def]
        up = [b for b in self.bets.values() if b.period == period and b.side == BetSide.UP.value]
        down = [
            b for b in self.bets.values() if b.period == period and b.side == BetSide.DOWN.value
        ]
        return StakeSnapshot(
            period=period,
            up=sum(b.amount for b in up),
            down=sum(b.amount for b in down),
            up_count=len(up),
            down_count=len(down),
        )

    async def list_by_period(self, db, period, status=None):  # type: ignore[no-untyped-def]
        return [
            b
            for b in self.bets.values()
            if b.period == period and (status is None or b.status == status)
        ]

    async def list_by_user(self, db, user_id, limit):  # type: ignore[no-untyped-def]
        return [b for b in self.bets.values() if b.user_id == user_id][:limit]

    async def mark_settled(self, db, bet_id, status, payout):  # type: ignore[no-untyped-def]
        if self.fail_marks > 0:
            self.fail_marks -= 1
            raise ConnectionError("database unavailable")
        bet = self.bets.get(bet_id)
        if bet is None or bet.status != BetStatus.PENDING.value:
            return None
        settled = replace(bet, status=status, payout=payout)
        self.bets[bet_id] = settled
        return settled


class InMemoryArchive:
    def __init__(self, bets: InMemoryBets) -> None:
        self._bets = bets
        self.candles: dict[int, ChartCandle] = {}
        self.results: dict[int, GameResult] = {}

    async def save_candle(self, db, candle):  # type: ignore[no-untyped-def]
        self.candles.setdefault(candle.period, candle)

    async def save_result(self, db, result):  # type: ignore[no-untyped-def]
        self.results.setdefault(result.period, result)

    async def latest_candle(self, db):  # type: ignore[no-untyped-def]
        if not self.candles:
            return None
        return self.candles[max(self.candles)]

    async def list_candles(self, db, limit):  # type: ignore[no-untyped-def]
        return [self.candles[p] for p in sorted(self.candles, reverse=True)][:limit]

    async def list_results(self, db, limit):  # type: ignore[no-untyped-def]
        return [self.results[p] for p in sorted(self.results, reverse=True)][:limit]

    async def results_with_pending_bets(self, db, limit):  # type: ignore[no-untyped-def]
        pending = {b.period for b in self._bets.bets.values() if b.status == "PENDING"}
        return [self.results[p] for p in sorted(self.results) if p in pending][:limit]

    async def periods_missing_result(self, db, before_period, limit):  # type: ignore[no-untyped-def]
        pending = {
            b.period
            for b in self._bets.bets.values()
            if b.status == "PENDING" and b.period < before_period and b.period not in self.results
        }
        return sorted(pending)[:limit]


class StaticUsers:
    def __init__(self, *names: str) -> None:
        self._users = {name: UserRef(id=f"user-{name}", username=name) for name in names}

    async def get_by_username(self, db, username):  # type: ignore[no-untyped-def]
        return self._users.get(username)


class FakeTime:
    def __init__(self, now: float) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


class RecordingBroadcaster(Broadcaster):
    """Real hub that also keeps every frame it was asked to publish."""

    def __init__(self) -> None:
        super().__init__(queue_size=1000)
        self.frames: list[dict] = []

    def publish(self, event) -> None:  # type: ignore[no-untyped-def]
        self.frames.append(event.to_wire())
        super().publish(event)

    def types(self) -> list[str]:
        return [f["type"] for f in self.frames]


class Game:
    """A fully wired engine over in-memory stores."""

    def __init__(self, balances: dict[str, int], seed: int = 7) -> None:
        rng = random.Random(seed)
        self.config = RoundConfig(period_seconds=PERIOD_SECONDS)
        self.ledger = InMemoryLedger({f"user-{n}": c for n, c in balances.items()})
        self.bets = InMemoryBets()
        self.archive = InMemoryArchive(self.bets)
        self.broadcaster = RecordingBroadcaster()
        self.time = FakeTime(START_PERIOD * PERIOD_SECONDS)
        self.bet_book = BetBook(
            repo=self.bets,
            ledger=self.ledger,
            users=StaticUsers(*balances),
            broadcaster=self.broadcaster,
        )
        self.settlement = SettlementPipeline(
            FakeSession, bets=self.bets, ledger=self.ledger, archive=self.archive
        )
        self.clock = RoundClock(
            config=self.config,
            resolver=StakeWeightedResolver(self.config, rng),
            bet_book=self.bet_book,
            settlement=self.settlement,
            archive=self.archive,
            broadcaster=self.broadcaster,
            session_factory=FakeSession,
            time_source=self.time,
            rng=rng,
            lock_timeout=0.05,
        )
        self.bet_book.bind_gate(self.clock)

    async def bet(self, username: str, side: str, amount: int, period: int | None = None) -> Bet:
        period = self.clock.current_round.period if period is None else period
        return await self.bet_book.place_bet(FakeSession(), username, period, side, amount)

    async def tick_until(self, countdown: int) -> None:
        assert countdown > 0, "use finish_round to cross a round boundary"
        while self.clock.current_round.countdown > countdown:
            await self.clock.tick()

    async def finish_round(self) -> None:
        period = self.clock.current_round.period
        while self.clock.current_round.period == period:
            await self.clock.tick()

    async def ticks(self, n: int) -> None:
        for _ in range(n):
            await self.clock.tick()

    def balance(self, username: str) -> int:
        return self.ledger.balances[f"user-{username}"]
