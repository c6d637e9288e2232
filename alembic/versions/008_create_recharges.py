"""008: create recharges table

Revision ID: 008
Revises: 007
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "008"
down_revision: Union[str, None] = "007"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE recharges (
            id              VARCHAR(64)     PRIMARY KEY,
            user_id         VARCHAR(64)     NOT NULL,
            username        VARCHAR(50)     NOT NULL,
            amount          BIGINT          NOT NULL,
            upi             VARCHAR(100),
            utr             VARCHAR(50),
            status          VARCHAR(10)     NOT NULL DEFAULT 'PENDING',
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            processed_at    TIMESTAMPTZ,
            CONSTRAINT ck_recharges_amount_gt_0 CHECK (amount > 0),
            CONSTRAINT ck_recharges_status CHECK (status IN ('PENDING', 'APPROVED', 'REJECTED'))
        );
    """)
    op.execute("CREATE INDEX idx_recharges_user_time ON recharges (user_id, created_at DESC);")
    op.execute("CREATE INDEX idx_recharges_status ON recharges (status, created_at DESC);")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS recharges CASCADE;")
