"""Pydantic schemas for wl_reporting API."""

from pydantic import BaseModel

from src.wl_reporting.domain.models import LedgerStats


class StatsResponse(BaseModel):
    user_count: int
    market_count: int
    markets_by_status: dict[str, int]
    stake_count: int
    total_staked: int
    open_pot: int
    total_balance: int
    credits_granted: int
    conservation_gap: int

    @classmethod
    def from_domain(cls, s: LedgerStats) -> "StatsResponse":
        return cls(
            user_count=s.user_count,
            market_count=s.market_count,
            markets_by_status=s.markets_by_status,
            stake_count=s.stake_count,
            total_staked=s.total_staked,
            open_pot=s.open_pot,
            total_balance=s.total_balance,
            credits_granted=s.credits_granted,
            conservation_gap=s.conservation_gap,
        )
