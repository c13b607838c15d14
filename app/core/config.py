"""
Unified Configuration
All environment variables and settings in one place

ARCHITECTURE:
- Supabase holds auth + user_drive_connections + documents + sync_jobs
- Google Drive tokens are refreshed by a Supabase edge function
- Folder ingestion is performed by an external webhook (one call per folder type)

SECURITY:
- All secrets loaded from environment variables
- No hardcoded credentials
"""
from typing import Optional
import logging
from pydantic_settings import BaseSettings
from pydantic import Field, model_validator

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """
    Unified application settings.
    Validates all environment variables at startup.
    """

    # ============================================================================
    # SERVER
    # ============================================================================

    environment: str = Field(default="production", description="Environment: development/staging/production")
    port: int = Field(default=8080, description="Server port")
    debug: bool = Field(default=False, description="Debug mode")

    # ============================================================================
    # DATABASE (Supabase)
    # ============================================================================

    supabase_url: str = Field(description="Supabase project URL")
    supabase_anon_key: str = Field(description="Supabase anonymous key")
    supabase_service_key: str = Field(description="Supabase service key (backend uses this)")

    drive_connections_table: str = Field(default="user_drive_connections", description="Table holding Google Drive connections")
    documents_table: str = Field(default="documents", description="Table holding ingested documents (has folder_type)")

    # ============================================================================
    # GOOGLE DRIVE TOKENS
    # ============================================================================

    token_refresh_url: Optional[str] = Field(
        default=None,
        description="Token refresh endpoint (defaults to the google-drive-refresh-token edge function)"
    )
    token_refresh_buffer_seconds: int = Field(default=300, description="Refresh the access token if it expires within this many seconds")
    token_refresh_timeout: float = Field(default=30.0, description="Timeout for the token refresh call (seconds)")

    # ============================================================================
    # FOLDER SYNC (ingestion webhook)
    # ============================================================================

    manual_sync_webhook_url: str = Field(description="Ingestion webhook called once per folder type")
    sync_request_timeout: float = Field(default=120.0, description="Timeout for a single folder sync call (seconds)")

    # Redis (job queue)
    redis_url: Optional[str] = Field(default=None, description="Redis connection URL (background sync jobs)")

    # ============================================================================
    # PRODUCTION INFRASTRUCTURE
    # ============================================================================

    # Error tracking (Sentry)
    sentry_dsn: Optional[str] = Field(default=None, description="Sentry DSN for error tracking")

    # ============================================================================
    # CORS
    # ============================================================================

    cors_allowed_origins: str = Field(default="http://localhost:3000", description="Comma-separated list of allowed CORS origins")

    @property
    def resolved_token_refresh_url(self) -> str:
        """Token refresh endpoint, falling back to the Supabase edge function."""
        if self.token_refresh_url:
            return self.token_refresh_url
        return f"{self.supabase_url.rstrip('/')}/functions/v1/google-drive-refresh-token"

    @model_validator(mode='after')
    def validate_settings(self):
        """
        Validate critical settings at startup.

        SECURITY CHECKS:
        - Warn if running in production without Sentry
        - Warn if debug mode enabled in production
        """
        if self.environment == "production":
            if self.debug:
                logger.warning("⚠️  DEBUG MODE ENABLED IN PRODUCTION! This is insecure.")

            if not self.sentry_dsn:
                logger.warning("⚠️  Sentry not configured in production. Error tracking disabled.")

        if self.token_refresh_buffer_seconds < 0:
            raise ValueError("token_refresh_buffer_seconds must be >= 0")

        if not self.redis_url:
            logger.warning("⚠️  REDIS_URL not set. Background folder sync jobs will not run.")

        logger.info("=" * 80)
        logger.info("Drive Folder Sync Configuration Loaded")
        logger.info("=" * 80)
        logger.info(f"Environment: {self.environment}")
        logger.info(f"Debug: {self.debug}")
        logger.info(f"Supabase URL: {self.supabase_url}")
        logger.info(f"Token refresh: {self.resolved_token_refresh_url} (buffer {self.token_refresh_buffer_seconds}s)")
        logger.info(f"Sync webhook: {'✅ Configured' if self.manual_sync_webhook_url else '❌ Not configured'}")
        logger.info(f"Redis: {'✅ Configured' if self.redis_url else '❌ Not configured'}")
        logger.info(f"Sentry: {'✅ Configured' if self.sentry_dsn else '❌ Not configured'}")
        logger.info("=" * 80)

        return self

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


# Global settings instance
settings = Settings()
