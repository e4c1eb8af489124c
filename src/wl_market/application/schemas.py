"""Pydantic schemas for wl_market API.

Amounts carry no range constraint: zero and negative values reach the core
and fail as InvalidAmount there. A value that is not an integer at all (10.5,
"abc") fails parsing here; `src.main.validation_error_handler` reports that as
InvalidAmount too.
"""

from pydantic import BaseModel, Field

from src.wl_common.credits import credits_to_display
from src.wl_market.domain.models import Market, Stake, UserOpenStake

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class CreateMarketRequest(BaseModel):
    question: str
    options: list[str] = Field(..., description="Ordered outcome options, at least 2")
    choice: str = Field(..., description="Creator's own option")
    amount: int = Field(..., description="Creator's opening stake in credits")


class PlaceStakeRequest(BaseModel):
    option: str
    amount: int


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class StakeOut(BaseModel):
    id: int
    user_id: str
    option: str
    amount: int

    @classmethod
    def from_domain(cls, s: Stake) -> "StakeOut":
        return cls(id=s.id, user_id=s.user_id, option=s.option, amount=s.amount)


class CreateMarketResponse(BaseModel):
    market_id: int


class MarketDetail(BaseModel):
    id: int
    question: str
    options: list[str]
    creator_id: str
    status: str
    outcome: str | None
    created_at: str | None
    total_pot: int
    total_pot_display: str
    stakes: list[StakeOut]

    @classmethod
    def from_domain(cls, m: Market) -> "MarketDetail":
        return cls(
            id=m.id,
            question=m.question,
            options=m.options,
            creator_id=m.creator_id,
            status=m.status,
            outcome=m.outcome,
            created_at=m.created_at.isoformat() if m.created_at else None,
            total_pot=m.pot,
            total_pot_display=credits_to_display(m.pot),
            stakes=[StakeOut.from_domain(s) for s in m.stakes],
        )


class MarketListResponse(BaseModel):
    items: list[MarketDetail]


class UserOpenStakeOut(BaseModel):
    market_id: int
    question: str
    stake: StakeOut

    @classmethod
    def from_domain(cls, u: UserOpenStake) -> "UserOpenStakeOut":
        return cls(market_id=u.market_id, question=u.question, stake=StakeOut.from_domain(u.stake))


class UserOpenStakeListResponse(BaseModel):
    items: list[UserOpenStakeOut]
