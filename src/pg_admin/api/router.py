"""Admin REST API. Every route requires an admin user."""

from typing import Annotated, Literal

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.pg_admin.application.schemas import ForceResultRequest
from src.pg_admin.application.service import AdminService
from src.pg_betting.application.service import BetBook
from src.pg_common.database import get_db_session
from src.pg_common.response import ApiResponse, success_response
from src.pg_funding.application.schemas import (
    RechargeListResponse,
    RechargeResponse,
    RechargeReviewRequest,
    WithdrawalListResponse,
    WithdrawalResponse,
    WithdrawalReviewRequest,
)
from src.pg_gateway.auth.dependencies import require_admin
from src.pg_gateway.user.db_models import UserModel
from src.pg_round.api.dependencies import get_bet_book, get_round_clock
from src.pg_round.engine.clock import RoundClock

router = APIRouter(prefix="/admin", tags=["admin"])
_service = AdminService()


@router.get("/game-monitor")
async def game_monitor(
    admin: Annotated[UserModel, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    clock: Annotated[RoundClock, Depends(get_round_clock)],
    bet_book: Annotated[BetBook, Depends(get_bet_book)],
    request: Request,
) -> ApiResponse:
    data = await _service.game_monitor(db, clock, bet_book)
    resp = success_response(data.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.post("/round/result")
async def force_result(
    body: ForceResultRequest,
    admin: Annotated[UserModel, Depends(require_admin)],
    clock: Annotated[RoundClock, Depends(get_round_clock)],
    request: Request,
) -> ApiResponse:
    data = await _service.force_result(clock, body.side, admin.username)
    resp = success_response(data.model_dump())
    resp.message = f"Result set to {data.outcome} for period {data.period}"
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.get("/recharges")
async def list_recharges(
    admin: Annotated[UserModel, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
    status: Literal["PENDING", "APPROVED", "REJECTED"] | None = Query(None),
    limit: int = Query(100, ge=1, le=500),
) -> ApiResponse:
    items = await _service.list_recharges(db, status, limit)
    data = RechargeListResponse(items=[RechargeResponse.from_domain(r) for r in items])
    resp = success_response(data.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.put("/recharges/{recharge_id}")
async def review_recharge(
    recharge_id: str,
    body: RechargeReviewRequest,
    admin: Annotated[UserModel, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    recharge = await _service.review_recharge(db, recharge_id, body.status)
    resp = success_response(RechargeResponse.from_domain(recharge).model_dump())
    resp.message = "Recharge status updated"
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.get("/withdrawals")
async def list_withdrawals(
    admin: Annotated[UserModel, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
    status: Literal["PENDING", "PAID", "REJECTED"] | None = Query(None),
    limit: int = Query(100, ge=1, le=500),
) -> ApiResponse:
    items = await _service.list_withdrawals(db, status, limit)
    data = WithdrawalListResponse(items=[WithdrawalResponse.from_domain(w) for w in items])
    resp = success_response(data.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.put("/withdrawals/{withdrawal_id}")
async def review_withdrawal(
    withdrawal_id: str,
    body: WithdrawalReviewRequest,
    admin: Annotated[UserModel, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    withdrawal = await _service.review_withdrawal(db, withdrawal_id, body.status)
    resp = success_response(WithdrawalResponse.from_domain(withdrawal).model_dump())
    resp.message = "Withdrawal status updated"
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp
