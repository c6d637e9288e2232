"""RoundClock: stateful owner of the live round.

One lock guards all round state. ``tick`` (called by RoundDriver once per
second) and ``force_result`` take it, and so does every bet placement through
``betting_window``, so a bet is either fully recorded before betting closes
or rejected with ROUND_CLOSED.

Per tick:
    countdown -= 1
    countdown == 0          -> finish round (decide if needed, finalize candle,
                               persist result + candle, settle, publish
                               candleComplete/gameResult) then open the next
                               round and publish newPeriod
    countdown <= close      -> (once) BETTING_CLOSED, resolve if undecided,
                               publish bettingClosed
    otherwise               -> price walk, publish priceUpdate

Failures after the outcome is fixed are logged and parked for retry; the
rollover always happens. A tick retries at most one parked round, and each
parked round backs off exponentially in ticks.

At bootstrap, rounds an earlier process left without a result (a crash or
stop mid-round) are resolved from their stakes and settled before the live
round opens.
"""

import asyncio
import logging
import random
import time
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import UTC, datetime

from src.pg_betting.application.service import BetBook
from src.pg_betting.domain.models import StakeSnapshot
from src.pg_broadcast.application.hub import Broadcaster
from src.pg_broadcast.domain.events import (
    BettingClosed,
    CandleComplete,
    GameResultEvent,
    NewPeriod,
    PriceUpdate,
)
from src.pg_common.database import SessionFactory
from src.pg_common.enums import BetSide, ResolutionSource, RoundStatus
from src.pg_common.errors import (
    AlreadyResolvedError,
    InternalError,
    RoundClosedError,
    TooLateError,
)
from src.pg_round.domain.models import (
    Candle,
    ChartCandle,
    GameResult,
    Round,
    RoundConfig,
    RoundDecision,
    RoundStatusView,
)
from src.pg_round.domain.price import PriceWalk
from src.pg_round.domain.repository import RoundArchiveProtocol
from src.pg_round.domain.resolver import OutcomeResolver
from src.pg_settlement.application.service import SettlementPipeline

logger = logging.getLogger(__name__)

_MAX_RETRY_BACKOFF_TICKS = 64
_MISSED_ROUNDS_BATCH = 50


@dataclass
class _UnsettledRound:
    candle: ChartCandle | None
    result: GameResult
    persisted: bool = False
    attempts: int = 0
    retry_at: int = 0     # tick number


class RoundClock:
    def __init__(
        self,
        config: RoundConfig,
        resolver: OutcomeResolver,
        bet_book: BetBook,
        settlement: SettlementPipeline,
        archive: RoundArchiveProtocol,
        broadcaster: Broadcaster,
        session_factory: SessionFactory,
        time_source: Callable[[], float] = time.time,
        rng: random.Random | None = None,
        lock_timeout: float = 2.0,
    ) -> None:
        self._config = config
        self._resolver = resolver
        self._bet_book = bet_book
        self._settlement = settlement
        self._archive = archive
        self._broadcaster = broadcaster
        self._session_factory = session_factory
        self._time_source = time_source
        self._walk = PriceWalk(rng)
        self._lock = asyncio.Lock()
        self._lock_timeout = lock_timeout
        self._round: Round | None = None
        self._unsettled: dict[int, _UnsettledRound] = {}
        self._ticks = 0

    @property
    def config(self) -> RoundConfig:
        return self._config

    @property
    def current_round(self) -> Round:
        if self._round is None:
            raise InternalError("Round clock has not been started")
        return self._round

    @property
    def unsettled_periods(self) -> list[int]:
        return sorted(self._unsettled)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def bootstrap(self) -> Round:
        """Open the round for the current wall-clock bucket.

        Resumes any settlement an earlier process left unfinished.
        """
        now = self._time_source()
        period_seconds = self._config.period_seconds
        period = int(now // period_seconds)
        countdown = period_seconds - int(now) % period_seconds

        opening_price = self._config.initial_price
        try:
            async with self._session_factory() as db:
                last = await self._archive.latest_candle(db)
            if last is not None:
                opening_price = last.close
        except Exception:
            logger.exception("could not load the last candle, opening at %.2f", opening_price)

        try:
            await self._settlement.reconcile()
        except Exception:
            logger.exception("startup settlement reconciliation failed")

        await self._resolve_missed_rounds(period, opening_price)

        async with self._lock:
            self._round = Round(
                period=period,
                countdown=countdown,
                candle=Candle.flat(opening_price),
                opened_at=self._now(),
            )
            logger.info("round clock started at period %d (%ds left)", period, countdown)
            self._broadcaster.publish(
                NewPeriod(
                    period=period,
                    countdown=countdown,
                    betting_active=self._round.betting_open(self._config.betting_close_offset),
                )
            )
            return self._round

    async def tick(self) -> None:
        async with self._lock:
            self._ticks += 1
            if self._unsettled:
                await self._retry_unsettled()

            rnd = self.current_round
            rnd.countdown -= 1

            if rnd.countdown <= 0:
                await self._finish_round(rnd)
                self._open_next_round(rnd)
            else:
                if (
                    rnd.status is RoundStatus.OPEN
                    and rnd.countdown <= self._config.betting_close_offset
                ):
                    await self._close_betting(rnd)
                self._walk.step(rnd.candle, rnd.decision.outcome if rnd.decision else None)
                self._broadcaster.publish(
                    PriceUpdate(
                        period=rnd.period,
                        open=round(rnd.candle.open, 2),
                        high=round(rnd.candle.high, 2),
                        low=round(rnd.candle.low, 2),
                        close=round(rnd.candle.close, 2),
                        countdown=rnd.countdown,
                        betting_active=rnd.betting_open(self._config.betting_close_offset),
                    )
                )

    # ------------------------------------------------------------------
    # Collaborator entry points
    # ------------------------------------------------------------------

    async def force_result(self, side: BetSide) -> tuple[int, RoundDecision]:
        """Admin override for the live round; returns ``(period, decision)``.

        TOO_LATE once countdown <= override_cutoff; ALREADY_RESOLVED when an
        admin already forced this round. A heuristic decision is replaced.
        """
        async with self._acquire():
            rnd = self.current_round
            if rnd.countdown <= self._config.override_cutoff:
                raise TooLateError(rnd.countdown, self._config.override_cutoff)
            if rnd.status is RoundStatus.RESOLVED or (
                rnd.decision is not None and rnd.decision.source is ResolutionSource.ADMIN
            ):
                raise AlreadyResolvedError(rnd.period)

            decision = self._resolver.force(side)
            rnd.decision = decision
            self._walk.nudge(rnd.candle, side)
            logger.warning(
                "admin forced %s for period %d at %ds",
                decision.outcome.value, rnd.period, rnd.countdown,
            )
            return rnd.period, decision

    @asynccontextmanager
    async def betting_window(self, period: int) -> AsyncIterator[None]:
        async with self._acquire():
            rnd = self.current_round
            if rnd.period != period or not rnd.betting_open(self._config.betting_close_offset):
                raise RoundClosedError(period)
            yield

    def status(self) -> RoundStatusView:
        rnd = self.current_round
        return RoundStatusView(
            period=rnd.period,
            countdown=rnd.countdown,
            status=rnd.status,
            betting_open=rnd.betting_open(self._config.betting_close_offset),
            decided=rnd.decision is not None,
            can_force_result=rnd.countdown > self._config.override_cutoff
            and not (
                rnd.decision is not None and rnd.decision.source is ResolutionSource.ADMIN
            ),
        )

    # ------------------------------------------------------------------
    # Transitions (lock held)
    # ------------------------------------------------------------------

    async def _close_betting(self, rnd: Round) -> None:
        rnd.status = RoundStatus.BETTING_CLOSED
        if rnd.decision is None:
            try:
                stakes = await self._snapshot(rnd.period)
            except Exception:
                # Decided again at round end; the snapshot is retried there
                logger.exception("stake snapshot failed for period %d", rnd.period)
            else:
                rnd.decision = self._resolver.resolve(stakes)
                logger.info(
                    "period %d closed: up=%d down=%d -> %s",
                    rnd.period, stakes.up, stakes.down, rnd.decision.outcome.value,
                )
        self._broadcaster.publish(BettingClosed(period=rnd.period))

    async def _finish_round(self, rnd: Round) -> None:
        if rnd.status is RoundStatus.OPEN:
            await self._close_betting(rnd)
        if rnd.decision is None:
            try:
                stakes = await self._snapshot(rnd.period)
            except Exception:
                logger.exception(
                    "stake snapshot failed again for period %d, resolving blind", rnd.period
                )
                stakes = StakeSnapshot(period=rnd.period)
            rnd.decision = self._resolver.resolve(stakes)

        decision = rnd.decision
        self._walk.finish(rnd.candle, decision.outcome)
        closed_at = self._now()
        candle = ChartCandle(
            period=rnd.period,
            open=round(rnd.candle.open, 2),
            high=round(rnd.candle.high, 2),
            low=round(rnd.candle.low, 2),
            close=round(rnd.candle.close, 2),
            opened_at=rnd.opened_at,
            closed_at=closed_at,
        )
        pending = _UnsettledRound(
            candle=candle,
            result=GameResult(
                period=rnd.period,
                outcome=decision.outcome.value,
                multiplier_bps=decision.multiplier_bps,
                display_number=decision.display_number,
                reference_price=round(candle.close),
                source=decision.source.value,
                created_at=closed_at,
            ),
        )
        if not await self._persist_and_settle(pending):
            self._park(pending)

        rnd.status = RoundStatus.RESOLVED
        self._broadcaster.publish(
            CandleComplete(
                period=candle.period,
                open=candle.open,
                high=candle.high,
                low=candle.low,
                close=candle.close,
            )
        )
        self._broadcaster.publish(
            GameResultEvent(
                period=rnd.period,
                winning_side=decision.outcome.value,
                display_number=decision.display_number,
                reference_price=pending.result.reference_price,
            )
        )

    def _open_next_round(self, finished: Round) -> None:
        nxt = Round(
            period=finished.period + 1,
            countdown=self._config.period_seconds,
            candle=Candle.flat(round(finished.candle.close, 2)),
            opened_at=self._now(),
        )
        self._round = nxt
        logger.info("period %d open", nxt.period)
        self._broadcaster.publish(
            NewPeriod(period=nxt.period, countdown=nxt.countdown, betting_active=True)
        )

    async def _persist_and_settle(self, pending: _UnsettledRound) -> bool:
        """Result first, then payouts, so a crash in between can be resumed."""
        period = pending.result.period
        if not pending.persisted:
            try:
                async with self._session_factory() as db:
                    try:
                        if pending.candle is not None:
                            await self._archive.save_candle(db, pending.candle)
                        await self._archive.save_result(db, pending.result)
                        await db.commit()
                    except Exception:
                        await db.rollback()
                        raise
            except Exception:
                logger.exception("could not persist result for period %d", period)
                return False
            pending.persisted = True

        try:
            report = await self._settlement.settle_round(period, pending.result.to_decision())
        except Exception:
            logger.exception("settlement for period %d failed", period)
            return False
        return report.complete

    def _park(self, pending: _UnsettledRound) -> None:
        pending.retry_at = self._ticks + 1
        self._unsettled[pending.result.period] = pending

    async def _retry_unsettled(self) -> None:
        due = [p for p in sorted(self._unsettled) if self._unsettled[p].retry_at <= self._ticks]
        if not due:
            return
        period = due[0]
        pending = self._unsettled[period]
        if await self._persist_and_settle(pending):
            logger.info("period %d settled on retry", period)
            del self._unsettled[period]
            return
        pending.attempts += 1
        backoff = min(2 ** pending.attempts, _MAX_RETRY_BACKOFF_TICKS)
        pending.retry_at = self._ticks + backoff
        logger.warning(
            "period %d still unsettled after %d retries, next in %d ticks",
            period, pending.attempts, backoff,
        )

    async def _resolve_missed_rounds(self, current_period: int, price: float) -> None:
        """Give a result to past rounds that still hold PENDING bets but never got one."""
        try:
            async with self._session_factory() as db:
                periods = await self._archive.periods_missing_result(
                    db, current_period, _MISSED_ROUNDS_BATCH
                )
        except Exception:
            logger.exception("could not look up rounds left without a result")
            return

        for period in periods:
            try:
                stakes = await self._snapshot(period)
            except Exception:
                logger.exception("stake snapshot failed for missed period %d", period)
                stakes = StakeSnapshot(period=period)
            decision = self._resolver.resolve(stakes)
            logger.warning(
                "period %d was left without a result, resolved %s on restart",
                period, decision.outcome.value,
            )
            # No candle: the price walk of a missed round is unknown
            pending = _UnsettledRound(
                candle=None,
                result=GameResult(
                    period=period,
                    outcome=decision.outcome.value,
                    multiplier_bps=decision.multiplier_bps,
                    display_number=decision.display_number,
                    reference_price=round(price),
                    source=decision.source.value,
                    created_at=self._now(),
                ),
            )
            if not await self._persist_and_settle(pending):
                self._park(pending)

    async def _snapshot(self, period: int) -> StakeSnapshot:
        async with self._session_factory() as db:
            return await self._bet_book.snapshot_stakes(db, period)

    @asynccontextmanager
    async def _acquire(self) -> AsyncIterator[None]:
        """Lock with a bounded wait for request handlers (fail fast, never hang)."""
        try:
            async with asyncio.timeout(self._lock_timeout):
                await self._lock.acquire()
        except TimeoutError:
            raise InternalError("Round engine busy, try again") from None
        try:
            yield
        finally:
            self._lock.release()

    def _now(self) -> datetime:
        return datetime.fromtimestamp(self._time_source(), UTC)
