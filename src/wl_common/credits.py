"""Integer credit utilities.

All balances, stakes, pots and payouts are int credits. No float, no Decimal.
"""

from src.wl_common.errors import InvalidAmountError


def validate_amount(amount: object, *, allow_zero: bool = False) -> int:
    """Return `amount` if it is a positive int (or non-negative with allow_zero).

    bool is rejected even though it subclasses int.
    """
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise InvalidAmountError(amount)
    if amount < 0 or (amount == 0 and not allow_zero):
        raise InvalidAmountError(amount)
    return amount


def credits_to_display(credits: int) -> str:
    """Convert credits to display string: 1500 -> '1,500 credits', 1 -> '1 credit'."""
    unit = "credit" if abs(credits) == 1 else "credits"
    return f"{credits:,} {unit}"


def floor_share(base: int, part: int, whole: int) -> int:
    """floor(base * part / whole) in exact integer arithmetic."""
    if whole <= 0:
        raise ValueError(f"whole must be positive, got {whole}")
    return (base * part) // whole
