"""Service wiring.

`build_services` is called once by the app factory with the process's
Database and Settings; routers reach the result through `get_services`.
"""

from dataclasses import dataclass

from fastapi import Request

from config.settings import Settings
from src.wl_admin.application.service import AdminService
from src.wl_common.database import Database
from src.wl_ledger.application.service import LedgerService
from src.wl_ledger.infrastructure.persistence import LedgerRepository
from src.wl_market.application.service import MarketService
from src.wl_market.infrastructure.persistence import MarketRepository
from src.wl_reporting.application.service import ReportingService
from src.wl_settlement.application.service import SettlementService


@dataclass
class Services:
    ledger: LedgerService
    markets: MarketService
    settlement: SettlementService
    reporting: ReportingService
    admin: AdminService


def build_services(database: Database, settings: Settings) -> Services:
    ledger_repo = LedgerRepository(starting_balance=settings.STARTING_BALANCE)
    market_repo = MarketRepository()
    return Services(
        ledger=LedgerService(database, ledger_repo),
        markets=MarketService(database, market_repo, ledger_repo),
        settlement=SettlementService(database, market_repo, ledger_repo),
        reporting=ReportingService(database, ledger_repo, market_repo),
        admin=AdminService(database),
    )


def get_services(request: Request) -> Services:
    """FastAPI dependency: the app's service container."""
    return request.app.state.services
