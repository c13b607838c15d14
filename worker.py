"""
Dramatiq Background Worker
Processes Drive folder sync jobs asynchronously

Usage:
    dramatiq worker -p 2 -t 2

Deployment:
    - Type: Background Worker
    - Start Command: dramatiq worker -p 2 -t 2
    - Environment: Same as main app (REDIS_URL, SUPABASE_URL, MANUAL_SYNC_WEBHOOK_URL, etc.)
    - Token refresh runs with the Supabase service key, so the refresh
      endpoint must accept service-role callers
"""
import logging
import os

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

sentry_dsn = os.getenv("SENTRY_DSN")
if sentry_dsn:
    try:
        import sentry_sdk
        from sentry_sdk.integrations.logging import LoggingIntegration

        sentry_sdk.init(
            dsn=sentry_dsn,
            environment=os.getenv("ENVIRONMENT", "production"),
            traces_sample_rate=0.1,
            profiles_sample_rate=0.1,
            integrations=[
                LoggingIntegration(level=logging.INFO, event_level=logging.ERROR)
            ]
        )
        logger.info("✅ Sentry initialized in worker")
    except Exception as e:
        logger.warning(f"⚠️  Failed to initialize Sentry in worker: {e}")
else:
    logger.info("ℹ️  Sentry not configured (SENTRY_DSN not set)")

# Import tasks (this registers them with Dramatiq)
try:
    from app.services.jobs.broker import broker
    from app.services.jobs.tasks import sync_folders_task

    logger.info("✅ Folder sync worker initialized")
    logger.info("📋 Registered tasks: sync_folders_task")

except Exception as e:
    logger.error(f"❌ Failed to initialize worker: {e}", exc_info=True)
    raise
