"""LedgerService — balance reads and admin balance adjustments.

Every mutation runs in one `database.transaction()`; every public method
returns a Result and never raises through its boundary.
"""

import logging

from src.wl_common.credits import validate_amount
from src.wl_common.database import Database
from src.wl_common.enums import BalanceAction
from src.wl_common.errors import InvalidAmountError, PermissionDeniedError
from src.wl_common.result import Result, capture
from src.wl_ledger.domain.models import BalanceChange
from src.wl_ledger.domain.repository import LedgerRepositoryProtocol

logger = logging.getLogger(__name__)


class LedgerService:
    def __init__(self, database: Database, repo: LedgerRepositoryProtocol) -> None:
        self._database = database
        self._repo = repo

    async def get_balance(self, user_id: str) -> Result[int]:
        return await capture(self._get_balance(user_id), name="get_balance")

    async def adjust_balance(
        self, user_id: str, delta: int, *, is_admin: bool
    ) -> Result[BalanceChange]:
        return await capture(
            self._adjust_balance(user_id, delta, is_admin), name="adjust_balance"
        )

    async def set_balance(
        self, user_id: str, target: int, *, is_admin: bool
    ) -> Result[BalanceChange]:
        return await capture(
            self._set_balance(user_id, target, is_admin), name="set_balance"
        )

    async def change_balance(
        self, user_id: str, action: BalanceAction, amount: int, *, is_admin: bool
    ) -> Result[BalanceChange]:
        """add/remove take a positive amount; set takes a non-negative target."""
        if action is BalanceAction.SET:
            return await self.set_balance(user_id, amount, is_admin=is_admin)
        try:
            validate_amount(amount)
        except InvalidAmountError as exc:
            return Result.failure(exc)
        delta = amount if action is BalanceAction.ADD else -amount
        return await self.adjust_balance(user_id, delta, is_admin=is_admin)

    # ------------------------------------------------------------------

    async def _get_balance(self, user_id: str) -> int:
        # Lazily creates the row, so it needs a writable unit of work
        async with self._database.transaction() as db:
            return await self._repo.get_balance(db, user_id)

    async def _adjust_balance(
        self, user_id: str, delta: int, is_admin: bool
    ) -> BalanceChange:
        if not is_admin:
            raise PermissionDeniedError("adjust balances")
        if isinstance(delta, bool) or not isinstance(delta, int):
            raise InvalidAmountError(delta)
        async with self._database.transaction() as db:
            change = await self._repo.adjust(db, user_id, delta)
        logger.info(
            "balance adjusted user=%s %d -> %d", user_id, change.old_balance, change.new_balance
        )
        return change

    async def _set_balance(self, user_id: str, target: int, is_admin: bool) -> BalanceChange:
        if not is_admin:
            raise PermissionDeniedError("set balances")
        validate_amount(target, allow_zero=True)
        async with self._database.transaction() as db:
            change = await self._repo.set_absolute(db, user_id, target)
        logger.info(
            "balance set user=%s %d -> %d", user_id, change.old_balance, change.new_balance
        )
        return change
