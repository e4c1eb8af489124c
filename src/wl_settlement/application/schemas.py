"""Pydantic schemas for settlement results."""

from pydantic import BaseModel

from src.wl_common.credits import credits_to_display
from src.wl_settlement.application.service import SettlementResult


class ResolveRequest(BaseModel):
    outcome: str


class PayoutOut(BaseModel):
    user_id: str
    winnings: int
    original_stake: int
    profit: int


class RefundOut(BaseModel):
    user_id: str
    amount: int


class SettlementResponse(BaseModel):
    market_id: int
    status: str
    outcome: str | None
    total_pot: int
    total_pot_display: str
    winners: list[PayoutOut]
    refunds: list[RefundOut]
    undistributed: int

    @classmethod
    def from_domain(cls, r: SettlementResult) -> "SettlementResponse":
        return cls(
            market_id=r.market_id,
            status=r.status.value,
            outcome=r.outcome,
            total_pot=r.total_pot,
            total_pot_display=credits_to_display(r.total_pot),
            winners=[
                PayoutOut(
                    user_id=p.user_id,
                    winnings=p.winnings,
                    original_stake=p.original_stake,
                    profit=p.profit,
                )
                for p in r.winners
            ],
            refunds=[RefundOut(user_id=f.user_id, amount=f.amount) for f in r.refunds],
            undistributed=r.undistributed,
        )
