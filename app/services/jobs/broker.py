"""
Dramatiq Redis Broker Configuration
Handles background job queue for folder sync runs
"""
import logging
import dramatiq
from dramatiq.brokers.redis import RedisBroker
from dramatiq.brokers.stub import StubBroker
from dramatiq.middleware import (
    AgeLimit, Callbacks, Pipelines,
    Retries, ShutdownNotifications
)

from app.core.config import settings

logger = logging.getLogger(__name__)

if not settings.redis_url:
    # Local dev / tests: messages stay in memory until a StubBroker worker drains them
    logger.warning("⚠️  REDIS_URL not set - using in-memory stub broker, background jobs will not be processed")
    redis_broker = StubBroker()
else:
    # Explicit middleware (TimeLimit excluded for Python 3.13 compatibility)
    redis_broker = RedisBroker(
        url=settings.redis_url,
        middleware=[
            AgeLimit(),
            Retries(max_retries=3),
            Callbacks(),
            Pipelines(),
            ShutdownNotifications(),
        ]
    )
    logger.info(f"✅ Redis broker initialized: {settings.redis_url[:20]}...")

dramatiq.set_broker(redis_broker)
broker = redis_broker
