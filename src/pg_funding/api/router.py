"""Funding API: submit and list my recharge / withdrawal requests."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.pg_common.database import get_db_session
from src.pg_common.response import ApiResponse, success_response
from src.pg_funding.application.schemas import (
    RechargeListResponse,
    RechargeRequest,
    RechargeResponse,
    WithdrawalListResponse,
    WithdrawalRequest,
    WithdrawalResponse,
)
from src.pg_funding.application.service import FundingService
from src.pg_gateway.auth.dependencies import get_current_user
from src.pg_gateway.user.db_models import UserModel

router = APIRouter(prefix="/funding", tags=["funding"])

_service = FundingService()


@router.post("/recharges", status_code=201)
async def submit_recharge(
    body: RechargeRequest,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    recharge = await _service.submit_recharge(
        db, str(current_user.id), current_user.username, body.amount_cents, body.upi, body.utr
    )
    resp = success_response(RechargeResponse.from_domain(recharge).model_dump())
    resp.message = "Recharge request submitted"
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.get("/recharges")
async def list_my_recharges(
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
    limit: int = Query(50, ge=1, le=100),
) -> ApiResponse:
    items = await _service.list_recharges(db, user_id=str(current_user.id), limit=limit)
    data = RechargeListResponse(items=[RechargeResponse.from_domain(r) for r in items])
    resp = success_response(data.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.post("/withdrawals", status_code=201)
async def submit_withdrawal(
    body: WithdrawalRequest,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    withdrawal = await _service.submit_withdrawal(
        db,
        str(current_user.id),
        current_user.username,
        body.amount_cents,
        body.account_number,
        body.ifsc_code,
        body.account_holder,
    )
    resp = success_response(WithdrawalResponse.from_domain(withdrawal).model_dump())
    resp.message = "Withdrawal request submitted"
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.get("/withdrawals")
async def list_my_withdrawals(
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
    limit: int = Query(50, ge=1, le=100),
) -> ApiResponse:
    items = await _service.list_withdrawals(db, user_id=str(current_user.id), limit=limit)
    data = WithdrawalListResponse(items=[WithdrawalResponse.from_domain(w) for w in items])
    resp = success_response(data.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp
