"""wl_ledger REST API — balance lookups, caller identity from X-User-Id."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from src.container import Services, get_services
from src.wl_common.response import ApiResponse, success_response
from src.wl_gateway.auth.dependencies import Caller, get_caller
from src.wl_ledger.application.schemas import BalanceResponse

router = APIRouter(tags=["ledger"])


@router.get("/balance")
async def get_my_balance(
    request: Request,
    caller: Annotated[Caller, Depends(get_caller)],
    services: Annotated[Services, Depends(get_services)],
) -> ApiResponse:
    balance = (await services.ledger.get_balance(caller.user_id)).unwrap()
    data = BalanceResponse.from_credits(caller.user_id, balance)
    return success_response(data.model_dump(), request)


@router.get("/users/{user_id}/balance")
async def get_user_balance(
    user_id: str,
    request: Request,
    caller: Annotated[Caller, Depends(get_caller)],
    services: Annotated[Services, Depends(get_services)],
) -> ApiResponse:
    balance = (await services.ledger.get_balance(user_id)).unwrap()
    data = BalanceResponse.from_credits(user_id, balance)
    return success_response(data.model_dump(), request)
