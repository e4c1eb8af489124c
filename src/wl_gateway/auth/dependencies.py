"""FastAPI dependency: get_caller.

The presentation adapter authenticates the platform user and forwards the
opaque handle in the X-User-Id header. Admin status is a flag derived from
settings.ADMIN_USER_IDS and passed into core operations; the core decides.

Usage in any router:
    from src.wl_gateway.auth.dependencies import Caller, get_caller

    @router.post("/resolve")
    async def resolve(caller: Annotated[Caller, Depends(get_caller)]):
        await services.settlement.resolve_market(..., is_admin=caller.is_admin)
"""

from dataclasses import dataclass
from typing import Annotated

from fastapi import Header, HTTPException, Request, status

_MISSING_IDENTITY_EXCEPTION = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Missing caller identity (X-User-Id header)",
)


@dataclass(frozen=True)
class Caller:
    user_id: str
    is_admin: bool = False


async def get_caller(
    request: Request,
    x_user_id: Annotated[str | None, Header()] = None,
) -> Caller:
    """Build the Caller from the forwarded handle. Raises HTTP 401 if absent."""
    user_id = (x_user_id or "").strip()
    if not user_id:
        raise _MISSING_IDENTITY_EXCEPTION
    admin_ids = request.app.state.settings.ADMIN_USER_IDS
    return Caller(user_id=user_id, is_admin=user_id in admin_ids)
