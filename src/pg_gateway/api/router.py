"""Auth routes. Players and admins share one login; ``is_admin`` is echoed
back so a client can decide whether to show the admin console."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.pg_common.database import get_db_session
from src.pg_common.response import ApiResponse, success_response
from src.pg_gateway.user.db_models import UserModel
from src.pg_gateway.user.schemas import (
    LoginRequest,
    LoginResponse,
    RefreshRequest,
    RefreshResponse,
    RegisterRequest,
    RegisterResponse,
    UserInfo,
)
from src.pg_gateway.user.service import UserService

router = APIRouter(prefix="/auth", tags=["auth"])
_service = UserService()

_TOKEN_TTL_SECONDS = settings.JWT_EXPIRE_MINUTES * 60


def _user_info(user: UserModel) -> UserInfo:
    return UserInfo(
        user_id=str(user.id),
        username=user.username,
        usercode=user.usercode,
        email=user.email,
        mobile=user.mobile,
        is_admin=user.is_admin,
    )


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    body: RegisterRequest,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    # The user row and its zero-balance account commit together
    async with db.begin():
        user = await _service.register(
            body.username, body.email, body.password, db, mobile=body.mobile
        )

    data = RegisterResponse(
        user_id=str(user.id),
        username=user.username,
        usercode=user.usercode,
        email=user.email,
        mobile=user.mobile,
        created_at=user.created_at.isoformat(),
    )
    resp = success_response(data.model_dump())
    resp.message = "User registered successfully"
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.post("/login")
async def login(
    body: LoginRequest,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    user, access, refresh = await _service.login(body.username, body.password, db)
    data = LoginResponse(
        access_token=access,
        refresh_token=refresh,
        expires_in=_TOKEN_TTL_SECONDS,
        user=_user_info(user),
    )
    resp = success_response(data.model_dump())
    resp.message = "Login successful"
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.post("/refresh")
async def refresh_token(body: RefreshRequest, request: Request) -> ApiResponse:
    access = await _service.refresh(body.refresh_token)
    data = RefreshResponse(access_token=access, expires_in=_TOKEN_TTL_SECONDS)
    resp = success_response(data.model_dump())
    resp.message = "Token refreshed"
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp
