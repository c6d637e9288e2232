"""009: create withdrawals table

Revision ID: 009
Revises: 008
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "009"
down_revision: Union[str, None] = "008"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE withdrawals (
            id              VARCHAR(64)     PRIMARY KEY,
            user_id         VARCHAR(64)     NOT NULL,
            username        VARCHAR(50)     NOT NULL,
            amount          BIGINT          NOT NULL,
            account_number  VARCHAR(20)     NOT NULL,
            ifsc_code       VARCHAR(15)     NOT NULL,
            account_holder  VARCHAR(100)    NOT NULL,
            status          VARCHAR(10)     NOT NULL DEFAULT 'PENDING',
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            processed_at    TIMESTAMPTZ,
            CONSTRAINT ck_withdrawals_amount_gt_0 CHECK (amount > 0),
            CONSTRAINT ck_withdrawals_status CHECK (status IN ('PENDING', 'PAID', 'REJECTED'))
        );
    """)
    op.execute("CREATE INDEX idx_withdrawals_user_time ON withdrawals (user_id, created_at DESC);")
    op.execute("CREATE INDEX idx_withdrawals_status ON withdrawals (status, created_at DESC);")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS withdrawals CASCADE;")
