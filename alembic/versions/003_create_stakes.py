"""003: create stakes table

Revision ID: 003
Revises: 002
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE stakes (
            id              SERIAL          PRIMARY KEY,
            market_id       INTEGER         NOT NULL REFERENCES markets (id) ON DELETE CASCADE,
            user_id         TEXT            NOT NULL,
            option          TEXT            NOT NULL,
            amount          INTEGER         NOT NULL,
            CONSTRAINT ck_stakes_amount_gt_0 CHECK (amount > 0)
        );
    """)
    op.execute("CREATE INDEX idx_stakes_market_id ON stakes (market_id);")
    op.execute("CREATE INDEX idx_stakes_user_id ON stakes (user_id);")
    op.execute("COMMENT ON TABLE stakes IS 'Immutable stakes; no edits, no cancellation';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS stakes CASCADE;")
