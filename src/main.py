"""FastAPI application entry point.

Run with: uvicorn src.main:app --port 8000

Run a single worker: the round clock lives in this process, and a second
worker would run a second, competing clock.
"""

# ruff: noqa: E402  -- uvloop.install() must run before other imports

import uvloop

uvloop.install()

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy import text

from config.settings import settings
from src.pg_account.api.router import router as account_router
from src.pg_admin.api.router import router as admin_router
from src.pg_betting.api.router import router as bet_router
from src.pg_broadcast.api.router import router as stream_router
from src.pg_common.database import async_session_factory, engine
from src.pg_common.errors import AppError
from src.pg_common.redis_client import close_redis, ping_redis
from src.pg_common.response import error_response
from src.pg_funding.api.router import router as funding_router
from src.pg_gateway.api.router import router as auth_router
from src.pg_gateway.middleware.request_log import RequestLogMiddleware
from src.pg_round.api.router import router as round_router
from src.pg_round.engine.factory import build_engine

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

_VALIDATION_CODE = 4001


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: check DB and Redis, start the round engine. Shutdown: reverse."""
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
    await ping_redis()

    game = build_engine(settings, async_session_factory)
    app.state.engine = game
    if settings.ROUND_ENGINE_ENABLED:
        await game.driver.start()
    else:
        logger.warning("ROUND_ENGINE_ENABLED is off: rounds will not advance")
    yield
    await game.driver.stop()
    await engine.dispose()
    await close_redis()


app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    lifespan=lifespan,
)


app.add_middleware(RequestLogMiddleware)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    resp = error_response(exc.code, exc.message)
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return JSONResponse(
        status_code=exc.http_status,
        content=resp.model_dump(),
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    resp = error_response(
        _VALIDATION_CODE, "Request validation failed", jsonable_encoder(exc.errors())
    )
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return JSONResponse(status_code=422, content=resp.model_dump())


app.include_router(auth_router, prefix="/api/v1")
app.include_router(account_router, prefix="/api/v1")
app.include_router(round_router, prefix="/api/v1")
app.include_router(bet_router, prefix="/api/v1")
app.include_router(funding_router, prefix="/api/v1")
app.include_router(admin_router, prefix="/api/v1")
app.include_router(stream_router)


@app.get("/health")
async def health(request: Request) -> dict[str, object]:
    game = getattr(request.app.state, "engine", None)
    running = game is not None and game.driver.running
    return {"status": "ok", "version": "0.1.0", "round_engine": running}
