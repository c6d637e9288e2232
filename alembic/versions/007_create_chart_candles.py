"""007: create chart_candles table

Revision ID: 007
Revises: 006
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "007"
down_revision: Union[str, None] = "006"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE chart_candles (
            id          BIGSERIAL           PRIMARY KEY,
            period      BIGINT              NOT NULL,
            open        DOUBLE PRECISION    NOT NULL,
            high        DOUBLE PRECISION    NOT NULL,
            low         DOUBLE PRECISION    NOT NULL,
            close       DOUBLE PRECISION    NOT NULL,
            opened_at   TIMESTAMPTZ,
            closed_at   TIMESTAMPTZ,
            CONSTRAINT uq_chart_candles_period UNIQUE (period)
        );
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS chart_candles CASCADE;")
