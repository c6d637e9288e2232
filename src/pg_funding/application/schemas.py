"""Pydantic schemas for funding requests."""

from typing import Literal

from pydantic import BaseModel, Field

from src.pg_common.cents import cents_to_display
from src.pg_funding.domain.models import Recharge, Withdrawal


class RechargeRequest(BaseModel):
    amount_cents: int = Field(..., gt=0)
    upi: str | None = Field(None, max_length=100)
    utr: str | None = Field(None, max_length=50)


class WithdrawalRequest(BaseModel):
    amount_cents: int = Field(..., gt=0)
    account_number: str = Field(..., min_length=6, max_length=20)
    ifsc_code: str = Field(..., min_length=4, max_length=15)
    account_holder: str = Field(..., min_length=1, max_length=100)


class RechargeReviewRequest(BaseModel):
    status: Literal["APPROVED", "REJECTED"]


class WithdrawalReviewRequest(BaseModel):
    status: Literal["PAID", "REJECTED"]


class RechargeResponse(BaseModel):
    id: str
    user_id: str
    username: str
    amount_cents: int
    amount_display: str
    upi: str | None
    utr: str | None
    status: str
    created_at: str | None
    processed_at: str | None

    @classmethod
    def from_domain(cls, r: Recharge) -> "RechargeResponse":
        return cls(
            id=r.id,
            user_id=r.user_id,
            username=r.username,
            amount_cents=r.amount,
            amount_display=cents_to_display(r.amount),
            upi=r.upi,
            utr=r.utr,
            status=r.status,
            created_at=r.created_at.isoformat() if r.created_at else None,
            processed_at=r.processed_at.isoformat() if r.processed_at else None,
        )


class WithdrawalResponse(BaseModel):
    id: str
    user_id: str
    username: str
    amount_cents: int
    amount_display: str
    account_number: str
    ifsc_code: str
    account_holder: str
    status: str
    created_at: str | None
    processed_at: str | None

    @classmethod
    def from_domain(cls, w: Withdrawal) -> "WithdrawalResponse":
        return cls(
            id=w.id,
            user_id=w.user_id,
            username=w.username,
            amount_cents=w.amount,
            amount_display=cents_to_display(w.amount),
            account_number=w.account_number,
            ifsc_code=w.ifsc_code,
            account_holder=w.account_holder,
            status=w.status,
            created_at=w.created_at.isoformat() if w.created_at else None,
            processed_at=w.processed_at.isoformat() if w.processed_at else None,
        )


class RechargeListResponse(BaseModel):
    items: list[RechargeResponse]


class WithdrawalListResponse(BaseModel):
    items: list[WithdrawalResponse]
