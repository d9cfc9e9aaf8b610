"""Auth Routes — password login issuing bearer access tokens."""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from tradedesk.core.api_context import with_logger
from tradedesk.core.endpoint_metadata import EndpointMetadata, register_endpoint
from tradedesk.infrastructure.database import get_db
from tradedesk.infrastructure.security import create_access_token
from tradedesk.schemas.crm import LoginRequest, TokenResponse
from tradedesk.services.crm import authenticate

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/auth", tags=["auth"])

LOGIN = register_endpoint(EndpointMetadata(
    summary="Log in with email and password",
    operation_id="login",
    tags=("auth",),
    requires_auth=False,
    log_module="auth",
    responses={
        401: {"description": "Invalid email or password"},
        403: {"description": "Account blocked or banned"},
    },
))


@router.post("/login", response_model=TokenResponse, **LOGIN.route_kwargs())
async def login(body: LoginRequest, db: AsyncSession = Depends(get_db)):
    async with with_logger(LOGIN.log_module, LOGIN.title):
        user = await authenticate(db, body.email, body.password)
        token = create_access_token(str(user.id), user.role.name if user.role else None)
    logger.info(f"User {user.id} logged in", extra={"user_id": str(user.id)})
    return TokenResponse(access_token=token)
