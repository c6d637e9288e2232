"""JWT issue/verify for players and admins."""

from datetime import timedelta
from unittest.mock import patch

import pytest
from jose import jwt

from src.pg_common.errors import InvalidCredentialsError, InvalidRefreshTokenError
from src.pg_gateway.auth.jwt_handler import (
    create_access_token,
    create_refresh_token,
    decode_token,
)


class TestClaims:
    @pytest.mark.parametrize(
        ("factory", "token_type"),
        [(create_access_token, "access"), (create_refresh_token, "refresh")],
    )
    def test_subject_and_type(self, factory, token_type: str) -> None:  # type: ignore[no-untyped-def]
        claims = jwt.get_unverified_claims(factory("user-7"))
        assert claims["sub"] == "user-7"
        assert claims["type"] == token_type
        assert claims["exp"] > claims["iat"]

    def test_admin_rights_are_not_a_claim(self) -> None:
        claims = jwt.get_unverified_claims(create_access_token("user-7"))
        assert set(claims) == {"sub", "type", "iat", "exp"}


class TestDecode:
    def test_round_trip(self) -> None:
        assert decode_token(create_refresh_token("u"), expected_type="refresh")["sub"] == "u"

    def test_wrong_type_each_way(self) -> None:
        with pytest.raises(InvalidRefreshTokenError):
            decode_token(create_access_token("u"), expected_type="refresh")
        with pytest.raises(InvalidCredentialsError):
            decode_token(create_refresh_token("u"), expected_type="access")

    def test_expired_access(self) -> None:
        with patch("src.pg_gateway.auth.jwt_handler._ACCESS_EXPIRE", timedelta(seconds=-1)):
            token = create_access_token("u")
        with pytest.raises(InvalidCredentialsError):
            decode_token(token, expected_type="access")

    def test_expired_refresh(self) -> None:
        with patch("src.pg_gateway.auth.jwt_handler._REFRESH_EXPIRE", timedelta(seconds=-1)):
            token = create_refresh_token("u")
        with pytest.raises(InvalidRefreshTokenError):
            decode_token(token, expected_type="refresh")

    def test_foreign_signature(self) -> None:
        forged = jwt.encode({"sub": "u", "type": "access"}, "other-secret", algorithm="HS256")
        with pytest.raises(InvalidCredentialsError):
            decode_token(forged, expected_type="access")

    def test_garbage(self) -> None:
        with pytest.raises(InvalidCredentialsError):
            decode_token("not.a.jwt", expected_type="access")
