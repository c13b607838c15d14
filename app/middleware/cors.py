"""
CORS Configuration
Cross-Origin Resource Sharing settings for frontend access

SECURITY:
- Production: explicit origin whitelist from CORS_ALLOWED_ORIGINS
- Development: all origins, no credentials
- NO "null" origin (prevents file:// attacks)
"""
import logging
from fastapi.middleware.cors import CORSMiddleware as FastAPICORSMiddleware
from app.core.config import settings

logger = logging.getLogger(__name__)


def get_allowed_origins() -> list:
    """Parse the comma-separated origin whitelist."""
    origins = [o.strip() for o in settings.cors_allowed_origins.split(",") if o.strip()]
    return [o for o in origins if o != "null"]


def get_cors_middleware():
    """
    Returns configured CORS middleware with environment-based settings.
    """
    if settings.environment == "development":
        logger.warning("⚠️  DEV MODE: CORS allowing ALL origins (*)")
        return FastAPICORSMiddleware, {
            "allow_origins": ["*"],
            "allow_credentials": False,  # Must be False when using "*"
            "allow_methods": ["GET", "POST", "PUT", "OPTIONS"],
            "allow_headers": ["*"],
            "max_age": 600,
        }

    allowed_origins = get_allowed_origins()
    logger.info(f"🌐 CORS allowed origins: {allowed_origins}")

    return FastAPICORSMiddleware, {
        "allow_origins": allowed_origins,
        "allow_credentials": True,
        "allow_methods": ["GET", "POST", "PUT", "OPTIONS"],
        "allow_headers": [
            "Content-Type",
            "Authorization",
            "X-Client-Info",
            "Apikey",
        ],
        "max_age": 600,  # Cache preflight requests for 10 minutes
    }
