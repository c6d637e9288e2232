"""Request validation for the auth API."""

import pytest
from pydantic import ValidationError

from src.pg_gateway.user.schemas import RegisterRequest


def _register(**overrides: object) -> RegisterRequest:
    fields: dict[str, object] = {
        "username": "alice_01",
        "email": "alice@example.com",
        "password": "Pass1word",
    }
    fields.update(overrides)
    return RegisterRequest(**fields)


class TestRegisterRequest:
    def test_valid(self) -> None:
        req = _register(mobile="+919812345678")
        assert req.mobile == "+919812345678"

    def test_mobile_optional(self) -> None:
        assert _register().mobile is None

    @pytest.mark.parametrize("password", ["password1", "PASSWORD1", "Password", "Pa1"])
    def test_weak_password(self, password: str) -> None:
        with pytest.raises(ValidationError):
            _register(password=password)

    @pytest.mark.parametrize("username", ["ab", "has space", "dash-name"])
    def test_bad_username(self, username: str) -> None:
        with pytest.raises(ValidationError):
            _register(username=username)

    def test_bad_mobile(self) -> None:
        with pytest.raises(ValidationError):
            _register(mobile="12-34")

    def test_bad_email(self) -> None:
        with pytest.raises(ValidationError):
            _register(email="not-an-email")
