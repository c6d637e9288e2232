"""Unit tests for AccountApplicationService using a mock ledger."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.pg_account.application.schemas import cursor_decode, cursor_encode
from src.pg_account.application.service import AccountApplicationService
from src.pg_account.domain.models import Account, LedgerEntry
from src.pg_common.errors import AccountNotFoundError


def _make_account(available: int = 100000, bonus: int = 0) -> Account:
    return Account(
        id="uuid-1",
        user_id="user-1",
        available_balance=available,
        bonus_balance=bonus,
        version=1,
        created_at=datetime.now(UTC),
        updated_at=datetime.now(UTC),
    )


def _make_entry(entry_id: int, amount: int = -1000, entry_type: str = "BET_STAKE") -> LedgerEntry:
    return LedgerEntry(
        id=entry_id,
        user_id="user-1",
        entry_type=entry_type,
        amount=amount,
        balance_after=90000,
        reference_type="BET",
        reference_id=f"bet-{entry_id}",
        description="Bet placed - Period 1001",
        created_at=datetime.now(UTC),
    )


class TestGetBalance:
    async def test_returns_balance_response(self) -> None:
        ledger = AsyncMock()
        ledger.get_account.return_value = _make_account(150000, 5000)

        result = await AccountApplicationService(ledger=ledger).get_balance(MagicMock(), "user-1")

        assert result.available_balance_cents == 150000
        assert result.available_balance_display == "₹1,500.00"
        assert result.bonus_balance_display == "₹50.00"

    async def test_missing_account(self) -> None:
        ledger = AsyncMock()
        ledger.get_account.return_value = None
        with pytest.raises(AccountNotFoundError):
            await AccountApplicationService(ledger=ledger).get_balance(MagicMock(), "user-1")


class TestListLedger:
    async def test_has_more_sets_cursor(self) -> None:
        ledger = AsyncMock()
        ledger.list_entries.return_value = [_make_entry(i) for i in (9, 8, 7)]
        db = MagicMock()

        page = await AccountApplicationService(ledger=ledger).list_ledger(
            db, "user-1", None, 2, None
        )

        ledger.list_entries.assert_awaited_once_with(db, "user-1", None, 3, None)
        assert [item.id for item in page.items] == [9, 8]
        assert page.has_more is True
        assert cursor_decode(page.next_cursor) == 8
        assert page.items[0].amount_display == "-₹10.00"

    async def test_last_page(self) -> None:
        ledger = AsyncMock()
        ledger.list_entries.return_value = [_make_entry(3, 19200, "BET_PAYOUT")]

        page = await AccountApplicationService(ledger=ledger).list_ledger(
            MagicMock(), "user-1", cursor_encode(4), 20, "BET_PAYOUT"
        )

        assert ledger.list_entries.await_args.args[2] == 4
        assert page.has_more is False
        assert page.next_cursor is None


class TestCursor:
    def test_round_trip(self) -> None:
        assert cursor_decode(cursor_encode(12345)) == 12345

    @pytest.mark.parametrize("cursor", [None, "garbage!!", "e30="])
    def test_invalid_cursor_is_ignored(self, cursor: str | None) -> None:
        assert cursor_decode(cursor) is None
