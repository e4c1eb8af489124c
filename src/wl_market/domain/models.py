"""Domain models for wl_market — pure dataclasses, no business logic."""

from dataclasses import dataclass, field
from datetime import datetime

from src.wl_common.enums import MarketStatus
from src.wl_common.options import OptionSet


@dataclass
class Stake:
    id: int
    market_id: int
    user_id: str
    option: str      # canonical option text of the market
    amount: int      # credits, > 0


@dataclass
class Market:
    id: int
    question: str
    options: list[str]
    creator_id: str
    status: str                  # MarketStatus value
    outcome: str | None          # set only when RESOLVED
    created_at: datetime | None
    stakes: list[Stake] = field(default_factory=list)

    @property
    def is_open(self) -> bool:
        return self.status == MarketStatus.OPEN

    @property
    def option_set(self) -> OptionSet:
        return OptionSet.from_stored(self.options)

    @property
    def pot(self) -> int:
        return sum(s.amount for s in self.stakes)


@dataclass
class UserOpenStake:
    """One of a user's stakes on a still-open market, joined with its question."""

    market_id: int
    question: str
    stake: Stake
