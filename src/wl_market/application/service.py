"""MarketService — market creation, stake placement and market projections.

Mutations (create_market, place_stake) validate everything that needs no
store access first, then run one `database.transaction()`; balance effects go
through the ledger repository's `adjust`, never around it.
Projections run in a read-only snapshot without locks.
"""

import logging

from src.wl_common.credits import validate_amount
from src.wl_common.database import Database
from src.wl_common.enums import MarketStatus
from src.wl_common.errors import (
    InvalidOptionError,
    InvalidOptionsError,
    InvalidQuestionError,
    MarketClosedError,
    MarketNotFoundError,
)
from src.wl_common.options import OptionSet
from src.wl_common.result import Result, capture
from src.wl_ledger.domain.repository import LedgerRepositoryProtocol
from src.wl_market.domain.models import Market, Stake, UserOpenStake
from src.wl_market.domain.repository import MarketRepositoryProtocol

logger = logging.getLogger(__name__)


class MarketService:
    def __init__(
        self,
        database: Database,
        repo: MarketRepositoryProtocol,
        ledger: LedgerRepositoryProtocol,
    ) -> None:
        self._database = database
        self._repo = repo
        self._ledger = ledger

    async def create_market(
        self,
        creator_id: str,
        question: str,
        options: list[str],
        creator_choice: str,
        creator_amount: int,
    ) -> Result[int]:
        return await capture(
            self._create_market(creator_id, question, options, creator_choice, creator_amount),
            name="create_market",
        )

    async def place_stake(
        self, market_id: int, user_id: str, option: str, amount: int
    ) -> Result[Stake]:
        return await capture(
            self._place_stake(market_id, user_id, option, amount), name="place_stake"
        )

    async def get_market(self, market_id: int) -> Result[Market | None]:
        return await capture(self._get_market(market_id), name="get_market")

    async def list_open_markets(self) -> Result[list[Market]]:
        return await capture(self._list_open_markets(), name="list_open_markets")

    async def list_user_open_stakes(self, user_id: str) -> Result[list[UserOpenStake]]:
        return await capture(
            self._list_user_open_stakes(user_id), name="list_user_open_stakes"
        )

    # ------------------------------------------------------------------

    async def _create_market(
        self,
        creator_id: str,
        question: str,
        options: list[str],
        creator_choice: str,
        creator_amount: int,
    ) -> int:
        question = (question or "").strip()
        if not question:
            raise InvalidQuestionError()
        option_set = OptionSet.parse(options or [])
        choice = option_set.match(creator_choice or "")
        if choice is None:
            raise InvalidOptionsError(
                f"choice {creator_choice!r} is not one of: {', '.join(option_set.texts)}"
            )
        validate_amount(creator_amount)

        async with self._database.transaction() as db:
            # Locks the creator's row; InsufficientFunds rolls back the whole unit
            await self._ledger.adjust(db, creator_id, -creator_amount)
            market_id = await self._repo.insert_market(
                db, question, option_set.texts, creator_id
            )
            await self._repo.insert_stake(db, market_id, creator_id, choice.text, creator_amount)

        logger.info(
            "market created id=%d creator=%s options=%d stake=%d on %r",
            market_id, creator_id, len(option_set), creator_amount, choice.text,
        )
        return market_id

    async def _place_stake(
        self, market_id: int, user_id: str, option: str, amount: int
    ) -> Stake:
        validate_amount(amount)

        async with self._database.transaction() as db:
            market = await self._repo.get_market(db, market_id, for_share=True)
            if market is None:
                raise MarketNotFoundError(market_id)
            if not market.is_open:
                raise MarketClosedError(market_id, market.status)
            choice = market.option_set.match(option or "")
            if choice is None:
                raise InvalidOptionError(option, market.options)
            await self._ledger.adjust(db, user_id, -amount)
            stake = await self._repo.insert_stake(db, market_id, user_id, choice.text, amount)

        logger.info(
            "stake placed market=%d user=%s amount=%d on %r",
            market_id, user_id, amount, choice.text,
        )
        return stake

    async def _get_market(self, market_id: int) -> Market | None:
        async with self._database.snapshot() as db:
            market = await self._repo.get_market(db, market_id)
            if market is not None:
                market.stakes = await self._repo.list_stakes(db, market_id)
        return market

    async def _list_open_markets(self) -> list[Market]:
        async with self._database.snapshot() as db:
            return await self._repo.list_markets(db, MarketStatus.OPEN)

    async def _list_user_open_stakes(self, user_id: str) -> list[UserOpenStake]:
        async with self._database.snapshot() as db:
            return await self._repo.list_user_stakes(db, user_id, MarketStatus.OPEN)
