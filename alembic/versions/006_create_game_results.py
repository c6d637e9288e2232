"""006: create game_results table

Revision ID: 006
Revises: 005
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "006"
down_revision: Union[str, None] = "005"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE game_results (
            id              BIGSERIAL       PRIMARY KEY,
            period          BIGINT          NOT NULL,
            outcome         VARCHAR(12)     NOT NULL,
            multiplier_bps  INTEGER         NOT NULL,
            display_number  SMALLINT        NOT NULL,
            reference_price BIGINT          NOT NULL,
            source          VARCHAR(10)     NOT NULL,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_game_results_period UNIQUE (period),
            CONSTRAINT ck_game_results_outcome CHECK (
                outcome IN ('GREEN', 'RED', 'GREEN_DOJI', 'RED_DOJI')
            ),
            CONSTRAINT ck_game_results_source CHECK (source IN ('HEURISTIC', 'ADMIN')),
            CONSTRAINT ck_game_results_display CHECK (display_number BETWEEN 1 AND 9),
            CONSTRAINT ck_game_results_multiplier CHECK (multiplier_bps > 0)
        );
    """)
    op.execute("COMMENT ON TABLE game_results IS 'One row per finished round, written before settlement';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS game_results CASCADE;")
