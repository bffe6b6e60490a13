"""Authentication for the Cortex backend.

The client sends its Supabase session JWT (``access_token``) as a bearer
credential; Supabase Auth is the identity verifier.
"""

from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from supabase import Client

from .database import get_db, run_store_call
from .errors import StoreTimeout, Unauthorized
from .logging_config import get_logger, log_auth_event

logger = get_logger("cortex.auth")

# Missing credentials are reported by us (as {"error": ...}), not by FastAPI
security = HTTPBearer(auto_error=False)


class AuthContext:
    """Identity resolved from a verified bearer credential."""

    def __init__(self, user_id: str, email: str | None = None):
        self.user_id = user_id
        self.email = email


async def verify_token(db: Client, token: str) -> AuthContext:
    """Validate a session token against Supabase Auth.

    Raises:
        Unauthorized: if the token is invalid, expired, or the check fails.
    """
    try:
        response = await run_store_call(lambda: db.auth.get_user(token))
    except StoreTimeout:
        log_auth_event("verify", False, "timeout")
        raise Unauthorized("Unauthorized: Identity check timed out")
    except Exception as e:
        logger.debug(f"Token verification error: {type(e).__name__}: {e}")
        log_auth_event("verify", False, "invalid token")
        raise Unauthorized("Unauthorized: Invalid token or user session expired")

    user = getattr(response, "user", None)
    if user is None or not getattr(user, "id", None):
        log_auth_event("verify", False, "no user")
        raise Unauthorized("Unauthorized: Invalid token or user session expired")

    log_auth_event("verify", True)
    return AuthContext(user_id=str(user.id), email=getattr(user, "email", None))


async def get_current_user(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[Client, Depends(get_db)],
) -> AuthContext:
    """FastAPI dependency: resolve the calling user or fail with 401."""
    if credentials is None or not credentials.credentials:
        log_auth_event("verify", False, "missing token")
        raise Unauthorized("Unauthorized: Missing JWT")
    auth = await verify_token(db, credentials.credentials)
    # Rate limits are counted per user
    request.state.user_id = auth.user_id
    return auth


# Type alias for dependency injection
CurrentUser = Annotated[AuthContext, Depends(get_current_user)]
