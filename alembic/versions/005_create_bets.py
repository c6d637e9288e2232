"""005: create bets table

Revision ID: 005
Revises: 004
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "005"
down_revision: Union[str, None] = "004"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE bets (
            id          VARCHAR(64)     PRIMARY KEY,
            user_id     VARCHAR(64)     NOT NULL,
            username    VARCHAR(50)     NOT NULL,
            period      BIGINT          NOT NULL,
            side        VARCHAR(4)      NOT NULL,
            amount      BIGINT          NOT NULL,
            status      VARCHAR(10)     NOT NULL DEFAULT 'PENDING',
            payout      BIGINT          NOT NULL DEFAULT 0,
            created_at  TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            settled_at  TIMESTAMPTZ,
            CONSTRAINT ck_bets_side       CHECK (side IN ('UP', 'DOWN')),
            CONSTRAINT ck_bets_status     CHECK (status IN ('PENDING', 'WON', 'LOST')),
            CONSTRAINT ck_bets_amount_gt_0 CHECK (amount > 0),
            CONSTRAINT ck_bets_payout_gte_0 CHECK (payout >= 0)
        );
    """)
    op.execute("CREATE INDEX idx_bets_period_status ON bets (period, status);")
    op.execute("CREATE INDEX idx_bets_user_time ON bets (user_id, created_at DESC);")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS bets CASCADE;")
