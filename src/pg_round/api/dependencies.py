"""FastAPI dependencies exposing the process-wide game engine.

The engine is built in the app lifespan and stored on ``app.state``;
HTTPConnection covers both HTTP requests and WebSocket connections.
"""

from starlette.requests import HTTPConnection

from src.pg_betting.application.service import BetBook
from src.pg_broadcast.application.hub import Broadcaster
from src.pg_common.errors import InternalError
from src.pg_round.engine.clock import RoundClock
from src.pg_round.engine.factory import GameEngine


def get_engine(conn: HTTPConnection) -> GameEngine:
    engine = getattr(conn.app.state, "engine", None)
    if engine is None:
        raise InternalError("Game engine is not running")
    return engine


def get_round_clock(conn: HTTPConnection) -> RoundClock:
    return get_engine(conn).clock


def get_bet_book(conn: HTTPConnection) -> BetBook:
    return get_engine(conn).bet_book


def get_broadcaster(conn: HTTPConnection) -> Broadcaster:
    return get_engine(conn).broadcaster
