"""wl_reporting REST endpoints (read-only).

GET /balances                       — balances that differ from the starting balance
GET /markets/{market_id}/stakes     — every stake of one market
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from src.container import Services, get_services
from src.wl_common.response import ApiResponse, success_response
from src.wl_gateway.auth.dependencies import Caller, get_caller
from src.wl_ledger.application.schemas import BalanceListResponse, BalanceResponse
from src.wl_market.application.schemas import StakeOut

router = APIRouter(tags=["reporting"])


@router.get("/balances")
async def list_balances(
    request: Request,
    caller: Annotated[Caller, Depends(get_caller)],
    services: Annotated[Services, Depends(get_services)],
) -> ApiResponse:
    balances = (await services.reporting.list_balances()).unwrap()
    data = BalanceListResponse(items=[BalanceResponse.from_domain(b) for b in balances])
    return success_response(data.model_dump(), request)


@router.get("/markets/{market_id}/stakes")
async def list_market_stakes(
    market_id: int,
    request: Request,
    caller: Annotated[Caller, Depends(get_caller)],
    services: Annotated[Services, Depends(get_services)],
) -> ApiResponse:
    stakes = (await services.reporting.list_market_stakes(market_id)).unwrap()
    return success_response([StakeOut.from_domain(s).model_dump() for s in stakes], request)
