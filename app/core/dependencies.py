"""
Dependency Injection
Provides reusable dependencies for FastAPI routes

DEPENDENCIES:
- Supabase client (database + auth)
- HTTP client (token refresh + ingestion webhook)
"""
import logging
from typing import AsyncGenerator
import httpx
from supabase import create_client, Client

from app.core.config import settings

logger = logging.getLogger(__name__)

# ============================================================================
# GLOBAL CLIENTS (initialized once, reused across requests)
# ============================================================================

# Supabase client (singleton)
_supabase_client: Client = None


# ============================================================================
# INITIALIZATION (called on app startup)
# ============================================================================

async def initialize_clients():
    """
    Initialize all global clients on app startup.

    Called from main.py lifespan event.
    """
    global _supabase_client

    logger.info("Initializing global clients...")

    try:
        _supabase_client = create_client(
            settings.supabase_url,
            settings.supabase_service_key  # Backend uses service role
        )
        logger.info("✅ Supabase client initialized")
    except Exception as e:
        logger.error(f"❌ Failed to initialize Supabase: {e}")
        raise

    logger.info("✅ All clients initialized successfully")


async def shutdown_clients():
    """
    Shutdown all global clients on app shutdown.

    Called from main.py lifespan event.
    """
    global _supabase_client

    logger.info("Shutting down global clients...")

    # Supabase doesn't need explicit cleanup
    _supabase_client = None

    logger.info("✅ All clients shutdown complete")


# ============================================================================
# DEPENDENCY FUNCTIONS (injected into routes)
# ============================================================================

def get_supabase() -> Client:
    """
    Get Supabase client for dependency injection.

    Usage:
        @router.get("/example")
        async def example(supabase: Client = Depends(get_supabase)):
            result = supabase.table("user_drive_connections").select("*").execute()
            return result.data

    Returns:
        Supabase client (service role)
    """
    if _supabase_client is None:
        logger.error("Supabase client not initialized")
        raise RuntimeError("Supabase client not initialized. Call initialize_clients() first.")

    return _supabase_client


def create_http_client() -> httpx.AsyncClient:
    """HTTP client for the refresh endpoint and the ingestion webhook."""
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.sync_request_timeout),
        limits=httpx.Limits(max_keepalive_connections=5, max_connections=10)
    )


async def get_http_client() -> AsyncGenerator[httpx.AsyncClient, None]:
    """
    Get HTTP client for external API calls.

    Usage:
        @router.post("/sync/folders")
        async def sync(http: httpx.AsyncClient = Depends(get_http_client)):
            ...

    Yields:
        httpx.AsyncClient (auto-closed after request)
    """
    client = create_http_client()
    try:
        yield client
    finally:
        await client.aclose()
