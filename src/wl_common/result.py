"""Typed success/failure result returned by every core operation.

    result = await capture(self._place_stake(...), name="place_stake")
    if not result.ok:
        result.kind      # ErrorKind.INSUFFICIENT_FUNDS, ...
        result.error     # the AppError with code/message/http_status
"""

import logging
from collections.abc import Awaitable
from dataclasses import dataclass
from typing import Generic, TypeVar

from sqlalchemy.exc import SQLAlchemyError

from src.wl_common.enums import ErrorKind
from src.wl_common.errors import AppError, StoreUnavailableError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    value: T | None = None
    error: AppError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def kind(self) -> ErrorKind | None:
        return self.error.kind if self.error is not None else None

    @classmethod
    def success(cls, value: T | None = None) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: AppError) -> "Result[T]":
        return cls(error=error)

    def unwrap(self) -> T:
        """Return the payload, or raise the carried AppError."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]


async def capture(operation: Awaitable[T], *, name: str) -> Result[T]:
    """Await one core operation and fold its outcome into a Result.

    Business errors become failures with their own kind. Driver, pool and
    lock-timeout errors become StoreUnavailable; the transaction they ran in
    has already been rolled back by the unit of work.
    """
    try:
        value = await operation
    except AppError as exc:
        logger.info("%s rejected: %s", name, exc.message)
        return Result.failure(exc)
    except (SQLAlchemyError, OSError):
        logger.warning("%s failed: store unavailable", name, exc_info=True)
        return Result.failure(StoreUnavailableError(f"Store unavailable during {name}"))
    return Result.success(value)
