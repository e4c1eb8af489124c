"""Domain models for wl_reporting — read-only projections."""

from dataclasses import dataclass, field


@dataclass
class LedgerStats:
    user_count: int
    markets_by_status: dict[str, int] = field(default_factory=dict)
    stake_count: int = 0
    total_staked: int = 0        # every stake ever placed, any market state
    open_pot: int = 0            # credits currently held by OPEN markets
    total_balance: int = 0       # sum of all user balances
    starting_balance: int = 0

    @property
    def market_count(self) -> int:
        return sum(self.markets_by_status.values())

    @property
    def credits_granted(self) -> int:
        return self.user_count * self.starting_balance

    @property
    def conservation_gap(self) -> int:
        """balances + open pots - granted credits.

        Zero unless admins adjusted balances or settlement flooring left
        credits undistributed (negative gap).
        """
        return self.total_balance + self.open_pot - self.credits_granted
