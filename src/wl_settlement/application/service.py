"""SettlementService — resolve or void a market exactly once.

Both operations run as one unit of work:
  1. lock the market row (FOR UPDATE); a concurrent settler blocks here and
     then sees the committed RESOLVED/VOIDED state -> AlreadySettled;
  2. read every stake, plan the payouts/refunds;
  3. flip the market state and credit users through the ledger.
Any failure in 3 rolls back the state change and every credit together.
"""

import logging
from dataclasses import dataclass, field

from sqlalchemy.ext.asyncio import AsyncSession

from src.wl_common.database import Database
from src.wl_common.enums import MarketStatus
from src.wl_common.errors import (
    AlreadySettledError,
    InvalidOptionError,
    MarketNotFoundError,
    PermissionDeniedError,
)
from src.wl_common.result import Result, capture
from src.wl_ledger.domain.repository import LedgerRepositoryProtocol
from src.wl_market.domain.repository import MarketRepositoryProtocol
from src.wl_settlement.domain.payout import (
    Payout,
    Refund,
    SettlementPlan,
    plan_refund,
    plan_resolution,
)

logger = logging.getLogger(__name__)


@dataclass
class SettlementResult:
    market_id: int
    status: MarketStatus
    outcome: str | None
    total_pot: int
    winners: list[Payout] = field(default_factory=list)
    refunds: list[Refund] = field(default_factory=list)
    undistributed: int = 0

    @classmethod
    def from_plan(
        cls, market_id: int, status: MarketStatus, outcome: str | None, plan: SettlementPlan
    ) -> "SettlementResult":
        return cls(
            market_id=market_id,
            status=status,
            outcome=outcome,
            total_pot=plan.total_pot,
            winners=plan.winners,
            refunds=plan.refunds,
            undistributed=plan.undistributed,
        )


class SettlementService:
    def __init__(
        self,
        database: Database,
        markets: MarketRepositoryProtocol,
        ledger: LedgerRepositoryProtocol,
    ) -> None:
        self._database = database
        self._markets = markets
        self._ledger = ledger

    async def resolve_market(
        self, market_id: int, outcome: str, *, is_admin: bool
    ) -> Result[SettlementResult]:
        return await capture(
            self._resolve_market(market_id, outcome, is_admin), name="resolve_market"
        )

    async def void_market(self, market_id: int, *, is_admin: bool) -> Result[SettlementResult]:
        return await capture(self._void_market(market_id, is_admin), name="void_market")

    # ------------------------------------------------------------------

    async def _resolve_market(
        self, market_id: int, outcome: str, is_admin: bool
    ) -> SettlementResult:
        if not is_admin:
            raise PermissionDeniedError("resolve markets")
        outcome = (outcome or "").strip()
        if not outcome:
            raise InvalidOptionError(outcome)

        async with self._database.transaction() as db:
            await self._lock_open_market(db, market_id)
            stakes = await self._markets.list_stakes(db, market_id)
            plan = plan_resolution(stakes, outcome)
            await self._markets.mark_settled(db, market_id, MarketStatus.RESOLVED, outcome)
            await self._apply(db, plan)

        logger.info(
            "market resolved id=%d outcome=%r pot=%d winners=%d refunds=%d undistributed=%d",
            market_id, outcome, plan.total_pot, len(plan.winners), len(plan.refunds),
            plan.undistributed,
        )
        return SettlementResult.from_plan(market_id, MarketStatus.RESOLVED, outcome, plan)

    async def _void_market(self, market_id: int, is_admin: bool) -> SettlementResult:
        if not is_admin:
            raise PermissionDeniedError("void markets")

        async with self._database.transaction() as db:
            await self._lock_open_market(db, market_id)
            stakes = await self._markets.list_stakes(db, market_id)
            plan = plan_refund(stakes)
            await self._markets.mark_settled(db, market_id, MarketStatus.VOIDED, None)
            await self._apply(db, plan)

        logger.info(
            "market voided id=%d pot=%d refunds=%d", market_id, plan.total_pot, len(plan.refunds)
        )
        return SettlementResult.from_plan(market_id, MarketStatus.VOIDED, None, plan)

    async def _lock_open_market(self, db: AsyncSession, market_id: int) -> None:
        market = await self._markets.get_market(db, market_id, for_update=True)
        if market is None:
            raise MarketNotFoundError(market_id)
        if not market.is_open:
            raise AlreadySettledError(market_id, market.status)

    async def _apply(self, db: AsyncSession, plan: SettlementPlan) -> None:
        for user_id, amount in plan.credits():
            await self._ledger.adjust(db, user_id, amount)
