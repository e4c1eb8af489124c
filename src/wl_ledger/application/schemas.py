"""Pydantic schemas for wl_ledger API."""

from pydantic import BaseModel, Field

from src.wl_common.credits import credits_to_display
from src.wl_common.enums import BalanceAction
from src.wl_ledger.domain.models import BalanceChange, UserBalance

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class ChangeBalanceRequest(BaseModel):
    action: BalanceAction
    amount: int = Field(..., ge=0, description="Credits to add/remove, or the target for set")


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class BalanceResponse(BaseModel):
    user_id: str
    balance: int
    balance_display: str

    @classmethod
    def from_credits(cls, user_id: str, balance: int) -> "BalanceResponse":
        return cls(user_id=user_id, balance=balance, balance_display=credits_to_display(balance))

    @classmethod
    def from_domain(cls, b: UserBalance) -> "BalanceResponse":
        return cls.from_credits(b.user_id, b.balance)


class BalanceListResponse(BaseModel):
    items: list[BalanceResponse]


class BalanceChangeResponse(BaseModel):
    user_id: str
    old_balance: int
    new_balance: int
    delta: int

    @classmethod
    def from_domain(cls, c: BalanceChange) -> "BalanceChangeResponse":
        return cls(
            user_id=c.user_id,
            old_balance=c.old_balance,
            new_balance=c.new_balance,
            delta=c.delta,
        )
