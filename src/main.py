"""FastAPI application entry point.

Run with: uvicorn src.main:app --reload --port 8000
"""

# ruff: noqa: E402  -- uvloop.install() must run before other imports

import uvloop

uvloop.install()

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from config.settings import Settings, settings as default_settings
from src.container import build_services
from src.wl_admin.api.router import router as admin_router
from src.wl_common.database import Database
from src.wl_common.errors import AppError, InvalidAmountError, InvalidRequestError
from src.wl_common.response import error_response
from src.wl_gateway.middleware.request_log import RequestLogMiddleware
from src.wl_ledger.api.router import router as ledger_router
from src.wl_market.api.router import router as market_router
from src.wl_reporting.api.router import router as reporting_router


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: verify the store connection. Shutdown: dispose the pool."""
    logging.basicConfig(
        level=app.state.settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    await app.state.database.ping()
    yield
    await app.state.database.dispose()


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    resp = error_response(exc)
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return JSONResponse(
        status_code=exc.http_status,
        content=resp.model_dump(),
    )


# Body fields whose bad values are business failures, not malformed requests
_AMOUNT_FIELDS = {"amount"}


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render pydantic failures in the ApiResponse envelope.

    A non-integer or negative amount is reported as InvalidAmount, exactly as
    the core would report it.
    """
    errors = exc.errors()
    for err in errors:
        if err["loc"] and err["loc"][-1] in _AMOUNT_FIELDS:
            amount = None if err["type"] == "missing" else err.get("input")
            return await app_error_handler(request, InvalidAmountError(amount))
    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ()))
    detail = f"{field}: {first.get('msg', 'invalid')}" if field else "malformed body"
    return await app_error_handler(request, InvalidRequestError(detail))


def create_app(
    database: Database | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    """Build the app around one explicitly constructed store handle."""
    settings = settings or default_settings
    database = database or Database.from_settings(settings)

    app = FastAPI(
        title=settings.APP_NAME,
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.database = database
    app.state.services = build_services(database, settings)

    app.add_middleware(RequestLogMiddleware)
    app.add_exception_handler(AppError, app_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_error_handler)  # type: ignore[arg-type]

    app.include_router(ledger_router, prefix="/api/v1")
    app.include_router(market_router, prefix="/api/v1")
    app.include_router(reporting_router, prefix="/api/v1")
    app.include_router(admin_router, prefix="/api/v1")

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok", "version": "0.1.0"}

    return app


app = create_app()
