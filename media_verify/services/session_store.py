"""
Most-recent-result session store: Redis (preferred) → Local Memory (fallback).

Lets a client that reloads mid-upload pick up the last finished verification
for its device. The verification workflow never touches this module; only
the HTTP layer does, after the workflow has returned.

The Redis client is accessed at call-time via the integration module so that
it picks up the instance initialized during the FastAPI lifespan.
"""

import json
import logging
import time
from collections import OrderedDict
from typing import Optional

from media_verify.config import settings
from media_verify.integrations import redis_client as redis_module
from media_verify.schemas.verification import VerificationResult

logger = logging.getLogger(__name__)

local_sessions: OrderedDict = OrderedDict()


def _key(device_id: str) -> str:
    return f"session:{device_id}"


def save_latest_result(device_id: str, result: VerificationResult) -> None:
    """Store the result as this device's latest (TTL session_ttl_sec)."""
    payload = result.model_dump(mode="json")
    rc = redis_module.client
    if rc:
        try:
            rc.set(_key(device_id), json.dumps(payload), ex=settings.session_ttl_sec)
            return
        except Exception as e:
            logger.warning(f"[SESSION] Redis set failed: {e}. Falling back to memory.")

    if device_id in local_sessions:
        local_sessions.move_to_end(device_id)
    local_sessions[device_id] = (payload, time.time())
    if len(local_sessions) > settings.session_memory_limit:
        local_sessions.popitem(last=False)


def load_latest_result(device_id: str) -> Optional[VerificationResult]:
    rc = redis_module.client
    if rc:
        try:
            data = rc.get(_key(device_id))
            if data:
                logger.info(f"[SESSION] Redis HIT for device: {device_id}")
                return VerificationResult.model_validate(json.loads(data))
            logger.info(f"[SESSION] Redis MISS for device: {device_id}")
        except Exception as e:
            logger.warning(f"[SESSION] Redis get failed: {e}")

    entry = local_sessions.get(device_id)
    if not entry:
        return None

    payload, timestamp = entry
    if time.time() - timestamp >= settings.session_ttl_sec:
        logger.info(f"[SESSION] Local Memory EXPIRED for device: {device_id}")
        del local_sessions[device_id]
        return None

    local_sessions.move_to_end(device_id)
    return VerificationResult.model_validate(payload)


def clear_latest_result(device_id: str) -> None:
    rc = redis_module.client
    if rc:
        try:
            rc.delete(_key(device_id))
        except Exception as e:
            logger.warning(f"[SESSION] Redis delete failed: {e}")
    local_sessions.pop(device_id, None)
