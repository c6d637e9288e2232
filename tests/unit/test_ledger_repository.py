"""LedgerRepository SQL call sequencing with a mocked AsyncSession."""

from datetime import UTC, datetime
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.pg_account.infrastructure.persistence import LedgerRepository
from src.pg_common.enums import LedgerEntryType
from src.pg_common.errors import AccountNotFoundError, InsufficientFundsError

NOW = datetime.now(UTC)


def _result(row: object | None) -> MagicMock:
    result = MagicMock()
    result.fetchone.return_value = row
    result.fetchall.return_value = [row] if row else []
    return result


def _account_row(available: int) -> SimpleNamespace:
    return SimpleNamespace(
        id="acc-1", user_id="u-1", available_balance=available, bonus_balance=0,
        version=3, created_at=NOW, updated_at=NOW,
    )


def _ledger_row(amount: int, balance_after: int, entry_type: str) -> SimpleNamespace:
    return SimpleNamespace(
        id=42, user_id="u-1", entry_type=entry_type, amount=amount,
        balance_after=balance_after, reference_type="BET", reference_id="b-1",
        description="x", created_at=NOW,
    )


class TestCredit:
    async def test_update_then_ledger_insert(self) -> None:
        db = AsyncMock()
        db.execute.side_effect = [
            _result(_account_row(19200)),
            _result(_ledger_row(19200, 19200, "BET_PAYOUT")),
        ]

        account, entry = await LedgerRepository().credit(
            db, "u-1", 19200, LedgerEntryType.BET_PAYOUT, "BET", "b-1", "Bet win - Period 7"
        )

        assert account.available_balance == 19200
        assert entry.amount == 19200
        insert_params = db.execute.await_args_list[1].args[1]
        assert insert_params["amount"] == 19200
        assert insert_params["balance_after"] == 19200

    async def test_unknown_account(self) -> None:
        db = AsyncMock()
        db.execute.return_value = _result(None)
        with pytest.raises(AccountNotFoundError):
            await LedgerRepository().credit(db, "u-x", 1, "RECHARGE", None, None, "r")


class TestDebit:
    async def test_ledger_amount_is_negative(self) -> None:
        db = AsyncMock()
        db.execute.side_effect = [
            _result(_account_row(7500)),
            _result(_ledger_row(-2500, 7500, "BET_STAKE")),
        ]

        await LedgerRepository().debit(db, "u-1", 2500, "BET_STAKE", "BET", "b-1", "Bet placed")

        assert db.execute.await_args_list[0].args[1] == {"user_id": "u-1", "amount": 2500}
        assert db.execute.await_args_list[1].args[1]["amount"] == -2500

    async def test_insufficient_funds_reports_balance(self) -> None:
        db = AsyncMock()
        db.execute.side_effect = [_result(None), _result(_account_row(100))]

        with pytest.raises(InsufficientFundsError) as exc:
            await LedgerRepository().debit(db, "u-1", 2500, "BET_STAKE", "BET", "b-1", "x")

        assert "100" in exc.value.message
        assert db.execute.await_count == 2

    async def test_missing_account(self) -> None:
        db = AsyncMock()
        db.execute.side_effect = [_result(None), _result(None)]
        with pytest.raises(AccountNotFoundError):
            await LedgerRepository().debit(db, "u-1", 1, "WITHDRAW", None, None, "x")

    @pytest.mark.parametrize("amount", [0, -100])
    async def test_rejects_non_positive(self, amount: int) -> None:
        db = AsyncMock()
        with pytest.raises(ValueError):
            await LedgerRepository().debit(db, "u-1", amount, "BET_STAKE", None, None, "x")
        db.execute.assert_not_awaited()


class TestQueries:
    async def test_get_account_none(self) -> None:
        db = AsyncMock()
        db.execute.return_value = _result(None)
        assert await LedgerRepository().get_account(db, "u-1") is None

    async def test_list_entries_passes_filters(self) -> None:
        db = AsyncMock()
        db.execute.return_value = _result(_ledger_row(-100, 900, "BET_STAKE"))

        entries = await LedgerRepository().list_entries(db, "u-1", 50, 21, "BET_STAKE")

        assert [e.id for e in entries] == [42]
        assert db.execute.await_args.args[1] == {
            "user_id": "u-1", "cursor_id": 50, "entry_type": "BET_STAKE", "limit": 21,
        }
