"""
Rate Limiting
Bounds how often a caller can fan out sync calls against the ingestion webhook

RATE LIMITS:
- Global: 100 requests/minute (default)
- Inline / background folder sync: 30/hour per user
- Folder selection: 60/hour per user

Authenticated requests are keyed on user_id (set during JWT validation),
everything else on the client IP.
"""
import logging
from slowapi import Limiter
from slowapi.util import get_remote_address
from fastapi import Request

logger = logging.getLogger(__name__)


def rate_limit_key_func(request: Request) -> str:
    """Rate limit key: user_id when authenticated, otherwise client IP."""
    user_id = getattr(request.state, "user_id", None)
    if user_id:
        logger.debug(f"Rate limit key: user_id={user_id[:8]}...")
        return f"user:{user_id}"

    ip = get_remote_address(request)
    logger.debug(f"Rate limit key: ip={ip}")
    return f"ip:{ip}"


limiter = Limiter(
    key_func=rate_limit_key_func,
    default_limits=["100/minute"],
    storage_uri="memory://",  # single instance
)
