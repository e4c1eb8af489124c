"""LedgerRepository — concrete implementation of LedgerRepositoryProtocol.

`adjust` is the only statement path that changes a balance. It locks the
user's row (SELECT ... FOR UPDATE), checks the resulting balance and writes
it, all inside the caller's transaction.

Transaction ownership: The CALLER (application service) is responsible for
opening the unit of work via `async with database.transaction()`.
"""

from sqlalchemy import select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from src.wl_common.errors import InsufficientFundsError
from src.wl_ledger.domain.models import BalanceChange, UserBalance
from src.wl_ledger.infrastructure.db_models import UserORM

_INSERT_BY_DIALECT = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


class LedgerRepository:
    """Concrete repository — balance rows are created lazily at starting_balance."""

    def __init__(self, starting_balance: int) -> None:
        self.starting_balance = starting_balance

    async def ensure_user(self, db: AsyncSession, user_id: str) -> None:
        """INSERT ... ON CONFLICT DO NOTHING: never overwrites an existing balance."""
        insert = _INSERT_BY_DIALECT[db.get_bind().dialect.name]
        stmt = (
            insert(UserORM)
            .values(user_id=user_id, balance=self.starting_balance)
            .on_conflict_do_nothing(index_elements=[UserORM.user_id])
        )
        await db.execute(stmt)

    async def get_balance(self, db: AsyncSession, user_id: str) -> int:
        await self.ensure_user(db, user_id)
        result = await db.execute(
            select(UserORM.balance).where(UserORM.user_id == user_id)
        )
        return result.scalar_one()

    async def lock_balance(self, db: AsyncSession, user_id: str) -> int:
        result = await db.execute(
            select(UserORM.balance)
            .where(UserORM.user_id == user_id)
            .with_for_update()
        )
        return result.scalar_one()

    async def adjust(
        self, db: AsyncSession, user_id: str, delta: int
    ) -> BalanceChange:
        await self.ensure_user(db, user_id)
        old_balance = await self.lock_balance(db, user_id)
        new_balance = old_balance + delta
        if new_balance < 0:
            raise InsufficientFundsError(required=-delta, available=old_balance)
        if delta:
            await db.execute(
                update(UserORM)
                .where(UserORM.user_id == user_id)
                .values(balance=new_balance)
            )
        return BalanceChange(user_id=user_id, old_balance=old_balance, new_balance=new_balance)

    async def set_absolute(
        self, db: AsyncSession, user_id: str, target: int
    ) -> BalanceChange:
        # Delta comes from a locked read so nothing can land between read and write
        await self.ensure_user(db, user_id)
        current = await self.lock_balance(db, user_id)
        return await self.adjust(db, user_id, target - current)

    async def list_non_default_balances(self, db: AsyncSession) -> list[UserBalance]:
        result = await db.execute(
            select(UserORM.user_id, UserORM.balance)
            .where(UserORM.balance != self.starting_balance)
            .order_by(UserORM.balance.desc(), UserORM.user_id)
        )
        return [UserBalance(user_id=row.user_id, balance=row.balance) for row in result]
