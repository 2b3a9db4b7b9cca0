"""
Upstash Redis integration (optional backing for the session store).

`client` stays None until `initialize()` runs inside the FastAPI lifespan,
and stays None when no credentials are configured. Consumers read
`redis_client.client` at call time instead of importing the variable.
"""

import logging
from typing import Optional

from upstash_redis import Redis

from media_verify.config import settings

logger = logging.getLogger(__name__)

client: Optional[Redis] = None


def initialize() -> None:
    global client

    if not (settings.upstash_redis_host and settings.upstash_redis_password):
        logger.warning("[STARTUP] Redis credentials not found. Session store will use memory.")
        return

    try:
        client = Redis(url=settings.upstash_redis_host, token=settings.upstash_redis_password)
        logger.info("[STARTUP] Upstash Redis client initialized")
    except Exception as e:
        client = None
        logger.error(f"[STARTUP] Failed to initialize Upstash Redis client: {e}")


def reset() -> None:
    """Drop the client reference (shutdown / tests). Upstash REST clients hold no sockets."""
    global client
    client = None
