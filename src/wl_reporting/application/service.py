"""ReportingService — read-only projections over the ledger and market store.

No method here locks or mutates; results may trail in-flight transactions
(read-committed).
"""

from src.wl_common.database import Database
from src.wl_common.errors import MarketNotFoundError
from src.wl_common.result import Result, capture
from src.wl_ledger.domain.models import UserBalance
from src.wl_ledger.domain.repository import LedgerRepositoryProtocol
from src.wl_market.domain.models import Stake
from src.wl_market.domain.repository import MarketRepositoryProtocol
from src.wl_reporting.domain.models import LedgerStats
from src.wl_reporting.infrastructure.queries import ReportingRepository


class ReportingService:
    def __init__(
        self,
        database: Database,
        ledger: LedgerRepositoryProtocol,
        markets: MarketRepositoryProtocol,
        repo: ReportingRepository | None = None,
    ) -> None:
        self._database = database
        self._ledger = ledger
        self._markets = markets
        self._repo = repo or ReportingRepository()

    async def list_balances(self) -> Result[list[UserBalance]]:
        """Every balance that differs from the starting balance, richest first."""
        return await capture(self._list_balances(), name="list_balances")

    async def get_stats(self) -> Result[LedgerStats]:
        return await capture(self._get_stats(), name="get_stats")

    async def list_market_stakes(self, market_id: int) -> Result[list[Stake]]:
        return await capture(self._list_market_stakes(market_id), name="list_market_stakes")

    async def _list_balances(self) -> list[UserBalance]:
        async with self._database.snapshot() as db:
            return await self._ledger.list_non_default_balances(db)

    async def _get_stats(self) -> LedgerStats:
        async with self._database.snapshot() as db:
            return await self._repo.get_stats(db, self._ledger.starting_balance)

    async def _list_market_stakes(self, market_id: int) -> list[Stake]:
        async with self._database.snapshot() as db:
            if await self._markets.get_market(db, market_id) is None:
                raise MarketNotFoundError(market_id)
            return await self._markets.list_stakes(db, market_id)
