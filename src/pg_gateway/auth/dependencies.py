"""Auth dependencies for routers.

    current_user: Annotated[UserModel, Depends(get_current_user)]
    admin: Annotated[UserModel, Depends(require_admin)]

The user row is re-read on every request, so blocking a player or revoking
admin rights applies immediately to tokens already issued.
"""

import uuid
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from src.pg_common.database import get_db_session
from src.pg_common.errors import AccountDisabledError, AdminRequiredError, InvalidCredentialsError
from src.pg_gateway.auth.jwt_handler import decode_token
from src.pg_gateway.user.db_models import UserModel

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login")


def _unauthorized() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid or expired token",
        headers={"WWW-Authenticate": "Bearer"},
    )


def _subject(token: str) -> uuid.UUID:
    try:
        payload = decode_token(token, expected_type="access")
        return uuid.UUID(payload.get("sub") or "")
    except (InvalidCredentialsError, ValueError):
        raise _unauthorized() from None


async def get_current_user(
    token: Annotated[str, Depends(oauth2_scheme)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> UserModel:
    user = await db.get(UserModel, _subject(token))
    if user is None:
        raise _unauthorized()
    if not user.is_active:
        raise AccountDisabledError()
    return user


async def require_admin(
    current_user: Annotated[UserModel, Depends(get_current_user)],
) -> UserModel:
    if not current_user.is_admin:
        raise AdminRequiredError()
    return current_user
