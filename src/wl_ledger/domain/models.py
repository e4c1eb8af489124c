"""Domain models for wl_ledger — pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass


@dataclass
class UserBalance:
    user_id: str
    balance: int   # credits, never negative


@dataclass
class BalanceChange:
    user_id: str
    old_balance: int
    new_balance: int

    @property
    def delta(self) -> int:
        return self.new_balance - self.old_balance
