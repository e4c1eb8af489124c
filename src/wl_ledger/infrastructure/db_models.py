"""SQLAlchemy ORM models for wl_ledger.

These map to the users table created by Alembic revision 001.
DO NOT add/remove columns here without a corresponding migration.
"""

from sqlalchemy import CheckConstraint, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.wl_common.database import Base


class UserORM(Base):
    __tablename__ = "users"
    __table_args__ = (CheckConstraint("balance >= 0", name="ck_users_balance_gte_0"),)

    user_id: Mapped[str] = mapped_column(Text, primary_key=True)
    # Default comes from STARTING_BALANCE at insert time (see LedgerRepository.ensure_user)
    balance: Mapped[int] = mapped_column(Integer, nullable=False)
