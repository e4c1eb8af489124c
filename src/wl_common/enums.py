"""Global enums — MarketStatus values must match the markets CHECK constraint exactly."""

from enum import Enum


class MarketStatus(str, Enum):
    OPEN = "OPEN"
    RESOLVED = "RESOLVED"
    VOIDED = "VOIDED"


class ErrorKind(str, Enum):
    """Failure reasons reported by core operations."""
    INVALID_OPTIONS = "InvalidOptions"
    INVALID_QUESTION = "InvalidQuestion"
    INVALID_AMOUNT = "InvalidAmount"
    INSUFFICIENT_FUNDS = "InsufficientFunds"
    MARKET_NOT_FOUND = "MarketNotFound"
    MARKET_CLOSED = "MarketClosed"
    INVALID_OPTION = "InvalidOption"
    ALREADY_SETTLED = "AlreadySettled"
    PERMISSION_DENIED = "PermissionDenied"
    STORE_UNAVAILABLE = "StoreUnavailable"


class BalanceAction(str, Enum):
    ADD = "add"
    REMOVE = "remove"
    SET = "set"
