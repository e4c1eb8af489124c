"""Admin application service — destructive maintenance operations."""

import logging

from sqlalchemy import delete, text
from sqlalchemy.ext.asyncio import AsyncSession

from src.wl_common.database import Database
from src.wl_common.errors import PermissionDeniedError
from src.wl_common.result import Result, capture
from src.wl_ledger.infrastructure.db_models import UserORM
from src.wl_market.infrastructure.db_models import MarketORM, StakeORM

logger = logging.getLogger(__name__)

_TRUNCATE_ALL_SQL = text("TRUNCATE TABLE stakes, markets, users RESTART IDENTITY CASCADE")


class AdminService:
    def __init__(self, database: Database) -> None:
        self._database = database

    async def reset_all(self, *, is_admin: bool) -> Result[None]:
        """Empty users, markets and stakes. Debug/administrative use only."""
        return await capture(self._reset_all(is_admin), name="reset_all")

    async def _reset_all(self, is_admin: bool) -> None:
        if not is_admin:
            raise PermissionDeniedError("reset all data")
        async with self._database.transaction() as db:
            await _truncate(db, self._database.dialect)
        logger.warning("all users, markets and stakes deleted")


async def _truncate(db: AsyncSession, dialect: str) -> None:
    if dialect == "postgresql":
        await db.execute(_TRUNCATE_ALL_SQL)
        return
    # No TRUNCATE elsewhere; children first since FK cascades may be off.
    # Ids restart too: the tables are rowid tables without AUTOINCREMENT, so
    # the next id of an emptied table is 1.
    for table in (StakeORM, MarketORM, UserORM):
        await db.execute(delete(table))
