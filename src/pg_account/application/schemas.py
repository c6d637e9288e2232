"""Pydantic schemas and cursor utilities for pg_account API."""

import base64
import json

from pydantic import BaseModel

from src.pg_common.cents import cents_to_display

# ---------------------------------------------------------------------------
# Cursor-based pagination utilities
# ---------------------------------------------------------------------------


def cursor_encode(last_id: int) -> str:
    """Encode a BIGINT primary key into an opaque Base64 cursor string."""
    payload = json.dumps({"id": last_id})
    return base64.b64encode(payload.encode()).decode()


def cursor_decode(cursor: str | None) -> int | None:
    """Decode a cursor string back to the last seen id. Returns None on error."""
    if cursor is None:
        return None
    try:
        payload = json.loads(base64.b64decode(cursor.encode()).decode())
        return int(payload["id"])
    except (ValueError, KeyError, TypeError):
        return None


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class BalanceResponse(BaseModel):
    user_id: str
    available_balance_cents: int
    available_balance_display: str
    bonus_balance_cents: int
    bonus_balance_display: str

    @classmethod
    def from_cents(cls, user_id: str, available: int, bonus: int) -> "BalanceResponse":
        return cls(
            user_id=user_id,
            available_balance_cents=available,
            available_balance_display=cents_to_display(available),
            bonus_balance_cents=bonus,
            bonus_balance_display=cents_to_display(bonus),
        )


class LedgerEntryItem(BaseModel):
    id: int
    entry_type: str
    amount_cents: int
    amount_display: str
    balance_after_cents: int
    balance_after_display: str
    reference_type: str | None
    reference_id: str | None
    description: str | None
    created_at: str  # ISO8601 string


class LedgerResponse(BaseModel):
    items: list[LedgerEntryItem]
    next_cursor: str | None
    has_more: bool
