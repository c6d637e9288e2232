"""UserService: registration, login and token refresh.

Registration creates the user and its empty wallet (``accounts`` row) in the
caller's transaction, so a player can never exist without a balance to bet
from. Every new user also gets a short public ``usercode`` that can be shown
or shared without exposing the username.
"""

import logging
import secrets
import string

from sqlalchemy import select, text
from sqlalchemy.ext.asyncio import AsyncSession

from src.pg_common.errors import (
    AccountDisabledError,
    EmailExistsError,
    InternalError,
    InvalidCredentialsError,
    UsernameExistsError,
)
from src.pg_gateway.auth.jwt_handler import (
    create_access_token,
    create_refresh_token,
    decode_token,
)
from src.pg_gateway.auth.password import hash_password, verify_password
from src.pg_gateway.user.db_models import UserModel

logger = logging.getLogger(__name__)

_USERCODE_ALPHABET = string.ascii_uppercase + string.digits
_USERCODE_LENGTH = 8
_USERCODE_ATTEMPTS = 5

_OPEN_WALLET_SQL = text("""
    INSERT INTO accounts (user_id, available_balance, bonus_balance, version)
    VALUES (:user_id, 0, 0, 0)
""")


def new_usercode() -> str:
    return "".join(secrets.choice(_USERCODE_ALPHABET) for _ in range(_USERCODE_LENGTH))


class UserService:
    async def register(
        self,
        username: str,
        email: str,
        password: str,
        db: AsyncSession,
        mobile: str | None = None,
    ) -> UserModel:
        if await self._find(db, UserModel.username == username) is not None:
            raise UsernameExistsError()
        if await self._find(db, UserModel.email == email) is not None:
            raise EmailExistsError()

        user = UserModel(
            username=username,
            email=email,
            mobile=mobile,
            usercode=await self._free_usercode(db),
            password_hash=hash_password(password),
            is_active=True,
            is_admin=False,
        )
        db.add(user)
        await db.flush()
        # created_at is a server default; load it while the session is open
        await db.refresh(user, ["created_at"])

        await db.execute(_OPEN_WALLET_SQL, {"user_id": str(user.id)})
        logger.info("registered %s (%s)", user.username, user.usercode)
        return user

    async def login(
        self,
        username: str,
        password: str,
        db: AsyncSession,
    ) -> tuple[UserModel, str, str]:
        """Return ``(user, access_token, refresh_token)``.

        An unknown name and a wrong password are indistinguishable to the
        caller. A blocked user is told so only after the password matched.
        """
        user = await self._find(db, UserModel.username == username)
        if user is None or not verify_password(password, user.password_hash):
            raise InvalidCredentialsError()
        if not user.is_active:
            raise AccountDisabledError()

        subject = str(user.id)
        return user, create_access_token(subject), create_refresh_token(subject)

    async def refresh(self, refresh_token: str) -> str:
        payload = decode_token(refresh_token, expected_type="refresh")
        return create_access_token(str(payload["sub"]))

    async def _find(self, db: AsyncSession, condition) -> UserModel | None:  # type: ignore[no-untyped-def]
        result = await db.execute(select(UserModel).where(condition))
        return result.scalar_one_or_none()

    async def _free_usercode(self, db: AsyncSession) -> str:
        for _ in range(_USERCODE_ATTEMPTS):
            code = new_usercode()
            if await self._find(db, UserModel.usercode == code) is None:
                return code
        raise InternalError("Could not allocate a user code")
