"""Bet API: place a bet on the live round, list my bets."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.pg_betting.application.schemas import BetListResponse, BetResponse, PlaceBetRequest
from src.pg_betting.application.service import BetBook
from src.pg_common.database import get_db_session
from src.pg_common.response import ApiResponse, success_response
from src.pg_gateway.auth.dependencies import get_current_user
from src.pg_gateway.middleware.rate_limit import bet_rate_limit
from src.pg_gateway.user.db_models import UserModel
from src.pg_round.api.dependencies import get_bet_book

router = APIRouter(prefix="/game", tags=["bets"])


@router.post("/bets", dependencies=[Depends(bet_rate_limit)])
async def place_bet(
    body: PlaceBetRequest,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    bet_book: Annotated[BetBook, Depends(get_bet_book)],
    request: Request,
) -> ApiResponse:
    bet = await bet_book.place_bet(
        db, current_user.username, body.period, body.side, body.amount_cents
    )
    resp = success_response(BetResponse.from_domain(bet).model_dump())
    resp.message = "Bet placed successfully"
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.get("/bets")
async def list_my_bets(
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    bet_book: Annotated[BetBook, Depends(get_bet_book)],
    request: Request,
    limit: int = Query(50, ge=1, le=100),
) -> ApiResponse:
    bets = await bet_book.bets_for_user(db, str(current_user.id), limit)
    data = BetListResponse(items=[BetResponse.from_domain(b) for b in bets])
    resp = success_response(data.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp
