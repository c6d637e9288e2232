"""Wires the round engine together for one process."""

import random
from dataclasses import dataclass

from config.settings import Settings
from src.pg_betting.application.service import BetBook
from src.pg_broadcast.application.hub import Broadcaster
from src.pg_common.database import SessionFactory
from src.pg_round.domain.models import RoundConfig
from src.pg_round.domain.resolver import build_resolver
from src.pg_round.engine.clock import RoundClock
from src.pg_round.engine.driver import RoundDriver
from src.pg_round.infrastructure.persistence import RoundArchive
from src.pg_settlement.application.service import SettlementPipeline


@dataclass
class GameEngine:
    broadcaster: Broadcaster
    bet_book: BetBook
    settlement: SettlementPipeline
    clock: RoundClock
    driver: RoundDriver


def build_engine(
    settings: Settings,
    session_factory: SessionFactory,
    rng: random.Random | None = None,
) -> GameEngine:
    rng = rng or random.Random()
    config = RoundConfig.from_settings(settings)
    archive = RoundArchive()
    broadcaster = Broadcaster(queue_size=settings.SUBSCRIBER_QUEUE_SIZE)
    bet_book = BetBook(broadcaster=broadcaster)
    settlement = SettlementPipeline(session_factory, archive=archive)
    clock = RoundClock(
        config=config,
        resolver=build_resolver(settings.RESOLVER_POLICY, config, rng),
        bet_book=bet_book,
        settlement=settlement,
        archive=archive,
        broadcaster=broadcaster,
        session_factory=session_factory,
        rng=rng,
        lock_timeout=settings.ROUND_LOCK_TIMEOUT_SECONDS,
    )
    bet_book.bind_gate(clock)
    driver = RoundDriver(clock, interval=settings.TICK_INTERVAL_SECONDS)
    return GameEngine(
        broadcaster=broadcaster,
        bet_book=bet_book,
        settlement=settlement,
        clock=clock,
        driver=driver,
    )
