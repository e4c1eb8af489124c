"""ReportingRepository — aggregate read queries. Never locks, never writes."""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.wl_common.enums import MarketStatus
from src.wl_ledger.infrastructure.db_models import UserORM
from src.wl_market.infrastructure.db_models import MarketORM, StakeORM
from src.wl_reporting.domain.models import LedgerStats

_USERS_SQL = select(
    func.count(UserORM.user_id).label("user_count"),
    func.coalesce(func.sum(UserORM.balance), 0).label("total_balance"),
)
_MARKETS_BY_STATUS_SQL = select(MarketORM.status, func.count(MarketORM.id)).group_by(
    MarketORM.status
)
_STAKES_SQL = select(
    func.count(StakeORM.id).label("stake_count"),
    func.coalesce(func.sum(StakeORM.amount), 0).label("total_staked"),
)
_OPEN_POT_SQL = (
    select(func.coalesce(func.sum(StakeORM.amount), 0))
    .join(MarketORM, MarketORM.id == StakeORM.market_id)
    .where(MarketORM.status == MarketStatus.OPEN.value)
)


class ReportingRepository:
    async def get_stats(self, db: AsyncSession, starting_balance: int) -> LedgerStats:
        users = (await db.execute(_USERS_SQL)).one()
        by_status = {status: 0 for status in MarketStatus}
        for status, count in await db.execute(_MARKETS_BY_STATUS_SQL):
            by_status[MarketStatus(status)] = count
        stakes = (await db.execute(_STAKES_SQL)).one()
        open_pot = (await db.execute(_OPEN_POT_SQL)).scalar_one()
        return LedgerStats(
            user_count=users.user_count,
            markets_by_status={status.value: count for status, count in by_status.items()},
            stake_count=stakes.stake_count,
            total_staked=int(stakes.total_staked),
            open_pot=int(open_pot),
            total_balance=int(users.total_balance),
            starting_balance=starting_balance,
        )
