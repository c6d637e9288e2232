"""Domain models for pg_funding: recharge and withdrawal requests."""

from dataclasses import dataclass
from datetime import datetime

from src.pg_common.enums import RechargeStatus, WithdrawalStatus


@dataclass
class Recharge:
    id: str
    user_id: str
    username: str
    amount: int               # cents
    upi: str | None = None
    utr: str | None = None
    status: str = RechargeStatus.PENDING.value
    created_at: datetime | None = None
    processed_at: datetime | None = None


@dataclass
class Withdrawal:
    id: str
    user_id: str
    username: str
    amount: int               # cents, debited at submission
    account_number: str
    ifsc_code: str
    account_holder: str
    status: str = WithdrawalStatus.PENDING.value
    created_at: datetime | None = None
    processed_at: datetime | None = None
