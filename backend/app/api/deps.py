"""
FastAPI dependencies shared by the route modules.

`get_current_user` is the authentication gate for every protected route:

  1. Extract   - Authorization header must be present
  2. Parse     - it must read "Bearer <token>"; a bare token is rejected
  3. Validate  - signature, HMAC algorithm and expiry via TokenService
  4. Resolve   - the user must still exist (one uncached lookup per request,
                 so a deleted account is locked out immediately)
  5. Attach    - the resolved identity is handed to the handler as an
                 explicit AuthenticatedUser parameter

Every failure is a 401. Step 4's "lookup failed" and "no such user" share
one message so the response never reveals whether an account exists.
"""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from app.core.config import Settings
from app.core.errors import InfrastructureError, Unauthenticated
from app.core.logging import get_logger
from app.core.metrics import record_auth_attempt
from app.core.security import CredentialStore, TokenService, TokenValidationError
from app.db.session import get_db
from app.repositories.users import UserRepository
from app.services.authorization import AuthenticatedUser

logger = get_logger(__name__)

BEARER_PREFIX = "Bearer "


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_credential_store(request: Request) -> CredentialStore:
    return request.app.state.credential_store


def _reject(reason: str, detail: str, metric: str) -> Unauthenticated:
    record_auth_attempt(metric)
    logger.warning("authentication_failed", reason=reason)
    return Unauthenticated(detail)


async def get_current_user(
    request: Request,
    db: AsyncSession = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
) -> AuthenticatedUser:
    header = request.headers.get("Authorization")
    if not header:
        raise _reject("missing_header", "Authorization header is required", "token_rejected")

    if not header.startswith(BEARER_PREFIX):
        raise _reject("missing_bearer_prefix", "Bearer token is required", "token_rejected")
    token = header[len(BEARER_PREFIX):].strip()
    if not token:
        raise _reject("empty_token", "Bearer token is required", "token_rejected")

    try:
        user_id = tokens.validate(token)
    except TokenValidationError as e:
        logger.info("token_validation_error", error=str(e))
        raise _reject("invalid_token", "Invalid token", "token_rejected") from e

    try:
        user = await UserRepository(db).get_by_id(user_id)
    except InfrastructureError as e:
        raise _reject("user_lookup_failed", "Unauthorized access", "lookup_failed") from e
    if user is None:
        raise _reject("user_not_found", "Unauthorized access", "user_unresolved")

    structlog.contextvars.bind_contextvars(user_id=user.id)
    return AuthenticatedUser.from_model(user)
