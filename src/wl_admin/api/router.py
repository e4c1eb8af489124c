"""Admin REST API.

The admin flag travels into each core call; the core refuses non-admins
with PermissionDenied (HTTP 403).

POST /admin/markets/{market_id}/resolve
POST /admin/markets/{market_id}/void
POST /admin/users/{user_id}/balance     — add / remove / set
POST /admin/reset
GET  /admin/stats
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from src.container import Services, get_services
from src.wl_common.errors import PermissionDeniedError
from src.wl_common.response import ApiResponse, success_response
from src.wl_gateway.auth.dependencies import Caller, get_caller
from src.wl_ledger.application.schemas import BalanceChangeResponse, ChangeBalanceRequest
from src.wl_reporting.application.schemas import StatsResponse
from src.wl_settlement.application.schemas import ResolveRequest, SettlementResponse

router = APIRouter(prefix="/admin", tags=["admin"])


@router.post("/markets/{market_id}/resolve")
async def resolve_market(
    market_id: int,
    body: ResolveRequest,
    request: Request,
    caller: Annotated[Caller, Depends(get_caller)],
    services: Annotated[Services, Depends(get_services)],
) -> ApiResponse:
    result = await services.settlement.resolve_market(
        market_id, body.outcome, is_admin=caller.is_admin
    )
    data = SettlementResponse.from_domain(result.unwrap())
    return success_response(data.model_dump(), request)


@router.post("/markets/{market_id}/void")
async def void_market(
    market_id: int,
    request: Request,
    caller: Annotated[Caller, Depends(get_caller)],
    services: Annotated[Services, Depends(get_services)],
) -> ApiResponse:
    result = await services.settlement.void_market(market_id, is_admin=caller.is_admin)
    data = SettlementResponse.from_domain(result.unwrap())
    return success_response(data.model_dump(), request)


@router.post("/users/{user_id}/balance")
async def change_balance(
    user_id: str,
    body: ChangeBalanceRequest,
    request: Request,
    caller: Annotated[Caller, Depends(get_caller)],
    services: Annotated[Services, Depends(get_services)],
) -> ApiResponse:
    result = await services.ledger.change_balance(
        user_id, body.action, body.amount, is_admin=caller.is_admin
    )
    data = BalanceChangeResponse.from_domain(result.unwrap())
    return success_response(data.model_dump(), request)


@router.post("/reset")
async def reset_all(
    request: Request,
    caller: Annotated[Caller, Depends(get_caller)],
    services: Annotated[Services, Depends(get_services)],
) -> ApiResponse:
    (await services.admin.reset_all(is_admin=caller.is_admin)).unwrap()
    return success_response({"reset": True}, request)


@router.get("/stats")
async def get_stats(
    request: Request,
    caller: Annotated[Caller, Depends(get_caller)],
    services: Annotated[Services, Depends(get_services)],
) -> ApiResponse:
    # Reads are not core-gated; the diagnostic view is still admin-only here
    if not caller.is_admin:
        raise PermissionDeniedError("view stats")
    stats = (await services.reporting.get_stats()).unwrap()
    return success_response(StatsResponse.from_domain(stats).model_dump(), request)
