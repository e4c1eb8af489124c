"""002: create markets table

Revision ID: 002
Revises: 001
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE markets (
            id              SERIAL          PRIMARY KEY,
            question        TEXT            NOT NULL,
            options         TEXT[]          NOT NULL,
            creator_id      TEXT            NOT NULL,
            status          VARCHAR(16)     NOT NULL DEFAULT 'OPEN',
            outcome         TEXT,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_markets_status CHECK (status IN ('OPEN', 'RESOLVED', 'VOIDED')),
            CONSTRAINT ck_markets_outcome_resolved CHECK (outcome IS NULL OR status = 'RESOLVED'),
            CONSTRAINT ck_markets_min_options CHECK (cardinality(options) >= 2)
        );
    """)
    op.execute("CREATE INDEX idx_markets_status_created ON markets (status, created_at);")
    op.execute("COMMENT ON TABLE markets IS 'Prediction markets — OPEN until resolved or voided once';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS markets CASCADE;")
