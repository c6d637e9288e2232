"""Round API: live round status, result history and chart candles."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.pg_betting.application.service import BetBook
from src.pg_common.database import get_db_session
from src.pg_common.response import ApiResponse, success_response
from src.pg_round.api.dependencies import get_bet_book, get_round_clock
from src.pg_round.application.service import RoundApplicationService
from src.pg_round.engine.clock import RoundClock

router = APIRouter(prefix="/game", tags=["game"])

_service = RoundApplicationService()


@router.get("/status")
async def get_status(
    db: Annotated[AsyncSession, Depends(get_db_session)],
    clock: Annotated[RoundClock, Depends(get_round_clock)],
    bet_book: Annotated[BetBook, Depends(get_bet_book)],
    request: Request,
) -> ApiResponse:
    data = await _service.current_status(db, clock, bet_book)
    resp = success_response(data.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.get("/results")
async def list_results(
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
    limit: int = Query(20, ge=1, le=100),
) -> ApiResponse:
    data = await _service.list_results(db, limit)
    resp = success_response(data.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.get("/chart")
async def get_chart(
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
    limit: int = Query(50, ge=1, le=100),
) -> ApiResponse:
    data = await _service.list_candles(db, limit)
    resp = success_response(data.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp
