"""MarketRepository — concrete implementation of MarketRepositoryProtocol.

Row locks:
  - settlement reads the market row FOR UPDATE (one settler at a time);
  - stake placement reads it FOR SHARE, so a settler waits for in-flight
    stakes to commit and a staker re-reads the state after a settler commits.
Dialects without row locks (SQLite) ignore with_for_update().

Transaction ownership: The CALLER (application service) is responsible for
opening the unit of work via `async with database.transaction()`.
"""

from collections import defaultdict

from sqlalchemy import insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.wl_common.enums import MarketStatus
from src.wl_common.errors import AlreadySettledError
from src.wl_market.domain.models import Market, Stake, UserOpenStake
from src.wl_market.infrastructure.db_models import MarketORM, StakeORM

_markets = MarketORM.__table__
_stakes = StakeORM.__table__

_MARKET_COLUMNS = (
    MarketORM.id,
    MarketORM.question,
    MarketORM.options,
    MarketORM.creator_id,
    MarketORM.status,
    MarketORM.outcome,
    MarketORM.created_at,
)
_STAKE_COLUMNS = (
    StakeORM.id,
    StakeORM.market_id,
    StakeORM.user_id,
    StakeORM.option,
    StakeORM.amount,
)

# ---------------------------------------------------------------------------
# Row mappers
# ---------------------------------------------------------------------------


def _row_to_market(row: object) -> Market:
    return Market(
        id=row.id,  # type: ignore[attr-defined]
        question=row.question,  # type: ignore[attr-defined]
        options=list(row.options),  # type: ignore[attr-defined]
        creator_id=row.creator_id,  # type: ignore[attr-defined]
        status=row.status,  # type: ignore[attr-defined]
        outcome=row.outcome,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
    )


def _row_to_stake(row: object) -> Stake:
    return Stake(
        id=row.id,  # type: ignore[attr-defined]
        market_id=row.market_id,  # type: ignore[attr-defined]
        user_id=row.user_id,  # type: ignore[attr-defined]
        option=row.option,  # type: ignore[attr-defined]
        amount=row.amount,  # type: ignore[attr-defined]
    )


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------

class MarketRepository:
    """Concrete repository — markets and their immutable stakes."""

    async def insert_market(
        self, db: AsyncSession, question: str, options: list[str], creator_id: str
    ) -> int:
        result = await db.execute(
            insert(_markets).values(
                question=question,
                options=options,
                creator_id=creator_id,
                status=MarketStatus.OPEN.value,
            )
        )
        return result.inserted_primary_key[0]

    async def insert_stake(
        self, db: AsyncSession, market_id: int, user_id: str, option: str, amount: int
    ) -> Stake:
        result = await db.execute(
            insert(_stakes).values(
                market_id=market_id, user_id=user_id, option=option, amount=amount
            )
        )
        return Stake(
            id=result.inserted_primary_key[0],
            market_id=market_id,
            user_id=user_id,
            option=option,
            amount=amount,
        )

    async def get_market(
        self,
        db: AsyncSession,
        market_id: int,
        *,
        for_update: bool = False,
        for_share: bool = False,
    ) -> Market | None:
        stmt = select(*_MARKET_COLUMNS).where(MarketORM.id == market_id)
        if for_update:
            stmt = stmt.with_for_update()
        elif for_share:
            stmt = stmt.with_for_update(read=True)
        row = (await db.execute(stmt)).fetchone()
        return _row_to_market(row) if row else None

    async def list_stakes(self, db: AsyncSession, market_id: int) -> list[Stake]:
        result = await db.execute(
            select(*_STAKE_COLUMNS)
            .where(StakeORM.market_id == market_id)
            .order_by(StakeORM.id)
        )
        return [_row_to_stake(row) for row in result]

    async def list_markets(
        self, db: AsyncSession, status: MarketStatus | None
    ) -> list[Market]:
        stmt = select(*_MARKET_COLUMNS).order_by(
            MarketORM.created_at.desc(), MarketORM.id.desc()
        )
        if status is not None:
            stmt = stmt.where(MarketORM.status == status.value)
        markets = [_row_to_market(row) for row in await db.execute(stmt)]
        if not markets:
            return []

        # One query for every stake of the page instead of one per market
        stake_rows = await db.execute(
            select(*_STAKE_COLUMNS)
            .where(StakeORM.market_id.in_([m.id for m in markets]))
            .order_by(StakeORM.id)
        )
        by_market: dict[int, list[Stake]] = defaultdict(list)
        for row in stake_rows:
            by_market[row.market_id].append(_row_to_stake(row))
        for market in markets:
            market.stakes = by_market.get(market.id, [])
        return markets

    async def list_user_stakes(
        self, db: AsyncSession, user_id: str, status: MarketStatus
    ) -> list[UserOpenStake]:
        result = await db.execute(
            select(MarketORM.question, *_STAKE_COLUMNS)
            .join(MarketORM, MarketORM.id == StakeORM.market_id)
            .where(StakeORM.user_id == user_id, MarketORM.status == status.value)
            .order_by(MarketORM.created_at.desc(), MarketORM.id.desc(), StakeORM.id)
        )
        return [
            UserOpenStake(market_id=row.market_id, question=row.question, stake=_row_to_stake(row))
            for row in result
        ]

    async def mark_settled(
        self,
        db: AsyncSession,
        market_id: int,
        status: MarketStatus,
        outcome: str | None,
    ) -> None:
        # Guarded on OPEN: the one-way transition holds even without the row lock
        result = await db.execute(
            update(_markets)
            .where(_markets.c.id == market_id, _markets.c.status == MarketStatus.OPEN.value)
            .values(status=status.value, outcome=outcome)
        )
        if result.rowcount != 1:
            raise AlreadySettledError(market_id, "not OPEN")
