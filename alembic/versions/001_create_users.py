"""001: create users table

Revision ID: 001
Revises:
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # DEFAULT mirrors settings.STARTING_BALANCE; the app always inserts it explicitly
    op.execute("""
        CREATE TABLE users (
            user_id     TEXT            PRIMARY KEY,
            balance     INTEGER         NOT NULL DEFAULT 100,
            CONSTRAINT ck_users_balance_gte_0 CHECK (balance >= 0)
        );
    """)
    op.execute("COMMENT ON TABLE users IS 'Per-handle credit balances, created lazily';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS users CASCADE;")
