"""Unified error codes and custom exceptions.

Error code ranges:
  2xxx: Ledger
  3xxx: Market
  4xxx: Settlement
  6xxx: Authorization
  9xxx: System

Core services never let these escape: `src.wl_common.result.capture` turns them
into `Result.failure(...)`. Routers re-raise via `Result.unwrap()` and the
app-level handler renders them.
"""

from src.wl_common.enums import ErrorKind


class AppError(Exception):
    """Base application error."""

    kind: ErrorKind | None = None

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- 2xxx: Ledger ---

class InsufficientFundsError(AppError):
    kind = ErrorKind.INSUFFICIENT_FUNDS

    def __init__(self, required: int, available: int) -> None:
        self.required = required
        self.available = available
        super().__init__(
            2001,
            f"Insufficient credits: required {required}, available {available}",
            422,
        )


class InvalidAmountError(AppError):
    kind = ErrorKind.INVALID_AMOUNT

    def __init__(self, amount: object) -> None:
        super().__init__(2101, f"Amount must be a positive whole number of credits, got {amount!r}", 422)


# --- 3xxx: Market ---

class MarketNotFoundError(AppError):
    kind = ErrorKind.MARKET_NOT_FOUND

    def __init__(self, market_id: int) -> None:
        super().__init__(3001, f"Market not found: {market_id}", 404)


class MarketClosedError(AppError):
    kind = ErrorKind.MARKET_CLOSED

    def __init__(self, market_id: int, status: str) -> None:
        super().__init__(3002, f"Market {market_id} is closed (status={status})", 422)


class InvalidOptionError(AppError):
    kind = ErrorKind.INVALID_OPTION

    def __init__(self, option: str, choices: list[str] | None = None) -> None:
        if not (option or "").strip():
            message = "Option must not be empty"
        else:
            message = f"Invalid option {option!r}. Choose from: {', '.join(choices or [])}"
        super().__init__(3003, message, 422)


class InvalidOptionsError(AppError):
    kind = ErrorKind.INVALID_OPTIONS

    def __init__(self, detail: str) -> None:
        super().__init__(3101, f"Invalid options: {detail}", 422)


class InvalidQuestionError(AppError):
    kind = ErrorKind.INVALID_QUESTION

    def __init__(self) -> None:
        super().__init__(3102, "Question must not be empty", 422)


# --- 4xxx: Settlement ---

class AlreadySettledError(AppError):
    kind = ErrorKind.ALREADY_SETTLED

    def __init__(self, market_id: int, status: str) -> None:
        super().__init__(4001, f"Market {market_id} is already settled (status={status})", 409)


# --- 6xxx: Authorization ---

class PermissionDeniedError(AppError):
    kind = ErrorKind.PERMISSION_DENIED

    def __init__(self, action: str) -> None:
        super().__init__(6001, f"Admin permission required to {action}", 403)


# --- 9xxx: System ---

class InvalidRequestError(AppError):
    """Malformed request body or parameters caught before any core call."""

    def __init__(self, detail: str) -> None:
        super().__init__(9002, f"Invalid request: {detail}", 422)


class StoreUnavailableError(AppError):
    kind = ErrorKind.STORE_UNAVAILABLE

    def __init__(self, detail: str = "Store unavailable") -> None:
        super().__init__(9001, detail, 503)
