"""Payout distribution for market settlement.

Resolution, per winning stake b:

    payout_base = total_pot - (b's user's own losing stakes on this market)
    winnings    = floor(payout_base * b.amount / sum(winning stake amounts))

A user with several winning stakes is paid once per stake; only their losing
stakes are taken out of the base. Flooring can leave part of the pot
undistributed (reported as `undistributed`, never credited). Since every
base is <= total_pot, the credited sum never exceeds the pot.

If no stake matches the outcome, or the market is voided, every stake is
refunded its exact amount.
"""

from collections import defaultdict
from collections.abc import Sequence
from dataclasses import dataclass, field

from src.wl_common.credits import floor_share
from src.wl_common.options import Option
from src.wl_market.domain.models import Stake


@dataclass
class Payout:
    user_id: str
    winnings: int
    original_stake: int

    @property
    def profit(self) -> int:
        return self.winnings - self.original_stake


@dataclass
class Refund:
    user_id: str
    amount: int


@dataclass
class SettlementPlan:
    total_pot: int
    winners: list[Payout] = field(default_factory=list)
    refunds: list[Refund] = field(default_factory=list)

    @property
    def distributed(self) -> int:
        return sum(p.winnings for p in self.winners) + sum(r.amount for r in self.refunds)

    @property
    def undistributed(self) -> int:
        return self.total_pot - self.distributed

    def credits(self) -> list[tuple[str, int]]:
        """(user_id, amount) ledger credits, ordered by user so row locks are
        always taken in the same order; zero amounts are dropped."""
        entries = [(p.user_id, p.winnings) for p in self.winners]
        entries += [(r.user_id, r.amount) for r in self.refunds]
        return sorted(
            ((user_id, amount) for user_id, amount in entries if amount > 0),
            key=lambda entry: entry[0],
        )


def plan_refund(stakes: Sequence[Stake]) -> SettlementPlan:
    return SettlementPlan(
        total_pot=sum(s.amount for s in stakes),
        refunds=[Refund(user_id=s.user_id, amount=s.amount) for s in stakes],
    )


def plan_resolution(stakes: Sequence[Stake], outcome: str) -> SettlementPlan:
    outcome_option = Option(outcome)
    winning = [s for s in stakes if outcome_option.matches(s.option)]
    if not winning:
        return plan_refund(stakes)

    total_pot = sum(s.amount for s in stakes)
    winning_total = sum(s.amount for s in winning)
    losing_by_user: dict[str, int] = defaultdict(int)
    for s in stakes:
        if not outcome_option.matches(s.option):
            losing_by_user[s.user_id] += s.amount

    winners = [
        Payout(
            user_id=s.user_id,
            winnings=floor_share(total_pot - losing_by_user[s.user_id], s.amount, winning_total),
            original_stake=s.amount,
        )
        for s in winning
    ]
    return SettlementPlan(total_pot=total_pot, winners=winners)
