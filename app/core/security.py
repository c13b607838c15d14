"""
Security and Authentication
Handles Supabase JWT validation

SECURITY FEATURES:
- JWT validation via Supabase Auth
- team_id read from the user's metadata (no extra query)
- The validated bearer is kept as the session credential that authenticates
  Drive token refreshes on the user's behalf
"""
import logging
from typing import Dict
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from supabase import Client

from app.core.dependencies import get_supabase

logger = logging.getLogger(__name__)

# Security schemes
bearer_scheme = HTTPBearer(auto_error=False)


# ============================================================================
# JWT AUTHENTICATION (Supabase)
# ============================================================================

async def get_current_user_context(
    request: Request,
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    supabase: Client = Depends(get_supabase)
) -> Dict[str, str]:
    """
    Get full user context (user_id + team_id) for the folder sync routes.

    Flow:
    1. Validate JWT with Supabase Auth
    2. Extract user_id from JWT sub claim
    3. Extract team_id from user_metadata (falls back to app_metadata)
    4. Keep the raw bearer as session_token (used to refresh Drive tokens)

    Returns:
        dict with:
        - user_id: User ID from JWT
        - team_id: Team ID from JWT metadata
        - email: User email
        - session_token: The validated bearer token
    """
    if not credentials:
        logger.warning("No authorization credentials provided")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authorization header required"
        )

    token = credentials.credentials

    try:
        response = supabase.auth.get_user(token)

        if not response or not response.user:
            logger.warning("JWT validation failed: no user returned")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid authentication token"
            )

        user = response.user
        user_metadata = user.user_metadata or {}
        app_metadata = user.app_metadata or {}
        team_id = user_metadata.get("team_id") or app_metadata.get("team_id")

        if not team_id:
            logger.error(f"User {user.id} has no team_id in JWT metadata")
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="No team ID found"
            )

        # Rate limiter keys on this
        request.state.user_id = user.id

        logger.info(f"✅ User authenticated: {sanitize_for_logging(user.email or '')} (team_id: {team_id[:8]}...)")

        return {
            "user_id": user.id,
            "team_id": team_id,
            "email": user.email,
            "session_token": token
        }

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"JWT validation error: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication failed"
        )


async def get_current_user_id(
    user_context: Dict[str, str] = Depends(get_current_user_context)
) -> str:
    """Extract just the user_id from the user context."""
    return user_context["user_id"]


# ============================================================================
# HELPER FUNCTIONS
# ============================================================================

def sanitize_for_logging(text: str, max_length: int = 50) -> str:
    """
    Sanitize sensitive data for logging (prevent PII leakage).

    Truncates long strings and masks email addresses.

    Example:
        "user@example.com" -> "u***@example.com"
        "very long text..." -> "very long te..."
    """
    if not text:
        return ""

    if len(text) > max_length:
        text = text[:max_length] + "..."

    if "@" in text:
        parts = text.split("@")
        if len(parts) == 2:
            local, domain = parts
            masked_local = local[0] + "***" if len(local) > 1 else local
            text = f"{masked_local}@{domain}"

    return text
