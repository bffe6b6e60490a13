"""Rate limiting for the Cortex backend.

Limits are counted per authenticated user. The auth dependency records the
verified user id on ``request.state``; requests that never got that far are
counted against the peer address.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address
from starlette.requests import Request

USER_KEY_PREFIX = "user:"


def rate_limit_key(request: Request) -> str:
    """``user:<id>`` for verified callers, else the client address."""
    user_id = getattr(request.state, "user_id", None)
    if user_id:
        return f"{USER_KEY_PREFIX}{user_id}"
    return get_remote_address(request)


limiter = Limiter(key_func=rate_limit_key)
