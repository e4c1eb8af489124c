"""Repository Protocol — dependency inversion for testability.

Unit tests inject a mock that conforms to this Protocol.
Infrastructure layer provides the real implementation.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.wl_common.enums import MarketStatus
from src.wl_market.domain.models import Market, Stake, UserOpenStake


class MarketRepositoryProtocol(Protocol):
    async def insert_market(
        self, db: AsyncSession, question: str, options: list[str], creator_id: str
    ) -> int: ...

    async def insert_stake(
        self, db: AsyncSession, market_id: int, user_id: str, option: str, amount: int
    ) -> Stake: ...

    async def get_market(
        self,
        db: AsyncSession,
        market_id: int,
        *,
        for_update: bool = False,
        for_share: bool = False,
    ) -> Market | None: ...

    async def list_stakes(self, db: AsyncSession, market_id: int) -> list[Stake]: ...

    async def list_markets(
        self, db: AsyncSession, status: MarketStatus | None
    ) -> list[Market]: ...

    async def list_user_stakes(
        self, db: AsyncSession, user_id: str, status: MarketStatus
    ) -> list[UserOpenStake]: ...

    async def mark_settled(
        self,
        db: AsyncSession,
        market_id: int,
        status: MarketStatus,
        outcome: str | None,
    ) -> None: ...
