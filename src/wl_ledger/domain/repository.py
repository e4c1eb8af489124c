"""Repository Protocol — dependency inversion for testability.

Unit tests inject a mock that conforms to this Protocol.
Infrastructure layer provides the real implementation.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.wl_ledger.domain.models import BalanceChange, UserBalance


class LedgerRepositoryProtocol(Protocol):
    starting_balance: int

    async def ensure_user(self, db: AsyncSession, user_id: str) -> None: ...

    async def get_balance(self, db: AsyncSession, user_id: str) -> int: ...

    async def lock_balance(self, db: AsyncSession, user_id: str) -> int: ...

    async def adjust(
        self, db: AsyncSession, user_id: str, delta: int
    ) -> BalanceChange: ...

    async def set_absolute(
        self, db: AsyncSession, user_id: str, target: int
    ) -> BalanceChange: ...

    async def list_non_default_balances(self, db: AsyncSession) -> list[UserBalance]: ...
