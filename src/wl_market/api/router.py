"""wl_market REST endpoints.

POST /markets                       — create a market with the caller's opening stake
GET  /markets                       — open markets with their stakes
GET  /markets/{market_id}           — full detail
POST /markets/{market_id}/stakes    — stake on an option
GET  /stakes/open                   — the caller's stakes on open markets
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from src.container import Services, get_services
from src.wl_common.errors import MarketNotFoundError
from src.wl_common.response import ApiResponse, success_response
from src.wl_gateway.auth.dependencies import Caller, get_caller
from src.wl_market.application.schemas import (
    CreateMarketRequest,
    CreateMarketResponse,
    MarketDetail,
    MarketListResponse,
    PlaceStakeRequest,
    StakeOut,
    UserOpenStakeListResponse,
    UserOpenStakeOut,
)

router = APIRouter(tags=["markets"])


@router.post("/markets")
async def create_market(
    body: CreateMarketRequest,
    request: Request,
    caller: Annotated[Caller, Depends(get_caller)],
    services: Annotated[Services, Depends(get_services)],
) -> ApiResponse:
    result = await services.markets.create_market(
        caller.user_id, body.question, body.options, body.choice, body.amount
    )
    data = CreateMarketResponse(market_id=result.unwrap())
    return success_response(data.model_dump(), request)


@router.get("/markets")
async def list_open_markets(
    request: Request,
    caller: Annotated[Caller, Depends(get_caller)],
    services: Annotated[Services, Depends(get_services)],
) -> ApiResponse:
    markets = (await services.markets.list_open_markets()).unwrap()
    data = MarketListResponse(items=[MarketDetail.from_domain(m) for m in markets])
    return success_response(data.model_dump(), request)


@router.get("/markets/{market_id}")
async def get_market(
    market_id: int,
    request: Request,
    caller: Annotated[Caller, Depends(get_caller)],
    services: Annotated[Services, Depends(get_services)],
) -> ApiResponse:
    market = (await services.markets.get_market(market_id)).unwrap()
    if market is None:
        raise MarketNotFoundError(market_id)
    return success_response(MarketDetail.from_domain(market).model_dump(), request)


@router.post("/markets/{market_id}/stakes")
async def place_stake(
    market_id: int,
    body: PlaceStakeRequest,
    request: Request,
    caller: Annotated[Caller, Depends(get_caller)],
    services: Annotated[Services, Depends(get_services)],
) -> ApiResponse:
    result = await services.markets.place_stake(
        market_id, caller.user_id, body.option, body.amount
    )
    return success_response(StakeOut.from_domain(result.unwrap()).model_dump(), request)


@router.get("/stakes/open")
async def list_my_open_stakes(
    request: Request,
    caller: Annotated[Caller, Depends(get_caller)],
    services: Annotated[Services, Depends(get_services)],
) -> ApiResponse:
    stakes = (await services.markets.list_user_open_stakes(caller.user_id)).unwrap()
    data = UserOpenStakeListResponse(items=[UserOpenStakeOut.from_domain(s) for s in stakes])
    return success_response(data.model_dump(), request)
