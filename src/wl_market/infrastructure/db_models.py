"""SQLAlchemy ORM models for wl_market.

These map to the markets/stakes tables created by Alembic revisions 002/003.
DO NOT add/remove columns here without a corresponding migration.
"""

from datetime import datetime

from sqlalchemy import (
    JSON,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import Mapped, mapped_column

from src.wl_common.database import Base

# TEXT[] on PostgreSQL, JSON list elsewhere (SQLite in tests)
_OptionsType = JSON().with_variant(ARRAY(Text), "postgresql")


class MarketORM(Base):
    __tablename__ = "markets"
    __table_args__ = (
        CheckConstraint(
            "status IN ('OPEN', 'RESOLVED', 'VOIDED')", name="ck_markets_status"
        ),
        CheckConstraint(
            "outcome IS NULL OR status = 'RESOLVED'", name="ck_markets_outcome_resolved"
        ),
        Index("idx_markets_status_created", "status", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    question: Mapped[str] = mapped_column(Text, nullable=False)
    options: Mapped[list[str]] = mapped_column(_OptionsType, nullable=False)
    creator_id: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False, server_default="OPEN")
    outcome: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )


class StakeORM(Base):
    __tablename__ = "stakes"
    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_stakes_amount_gt_0"),
        Index("idx_stakes_market_id", "market_id"),
        Index("idx_stakes_user_id", "user_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    market_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("markets.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[str] = mapped_column(Text, nullable=False)
    option: Mapped[str] = mapped_column(Text, nullable=False)
    amount: Mapped[int] = mapped_column(Integer, nullable=False)
    # NOTE: No updated_at — stakes are immutable once placed
