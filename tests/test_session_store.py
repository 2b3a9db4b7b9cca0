"""
Unit tests for media_verify/services/session_store.py.

Redis is provided by the MockRedis fixture; the memory path runs with the
client set to None.
"""

import json
import time
from unittest.mock import patch

from media_verify.detection.normalizer import normalize_report
from media_verify.detection.policy import NormalizationPolicy
from media_verify.services import session_store

from tests.conftest import IMAGE_REPORT

RESULT = normalize_report(IMAGE_REPORT, "image", 1.0, policy=NormalizationPolicy())


# ---------------------------------------------------------------------------
# Redis backend
# ---------------------------------------------------------------------------


def test_save_and_load_via_redis(mock_redis):
    session_store.save_latest_result("dev-1", RESULT)

    raw = mock_redis.get("session:dev-1")
    assert json.loads(raw)["status"] == "fake"
    assert mock_redis.ttl("session:dev-1") > 0

    loaded = session_store.load_latest_result("dev-1")
    assert loaded.model_dump() == RESULT.model_dump()


def test_load_miss_returns_none(mock_redis):
    assert session_store.load_latest_result("nobody") is None


def test_clear_removes_entry(mock_redis):
    session_store.save_latest_result("dev-2", RESULT)
    session_store.clear_latest_result("dev-2")
    assert session_store.load_latest_result("dev-2") is None


def test_redis_failure_falls_back_to_memory(mock_redis, monkeypatch):
    session_store.local_sessions.clear()
    mock_redis.fail = True

    session_store.save_latest_result("dev-3", RESULT)

    assert "dev-3" in session_store.local_sessions
    assert session_store.load_latest_result("dev-3").model_dump() == RESULT.model_dump()
    session_store.local_sessions.clear()


# ---------------------------------------------------------------------------
# Memory backend
# ---------------------------------------------------------------------------


def test_memory_round_trip(null_redis):
    session_store.save_latest_result("dev-4", RESULT)
    assert session_store.load_latest_result("dev-4").model_dump() == RESULT.model_dump()


def test_memory_entry_expires(null_redis):
    from media_verify.config import settings

    session_store.save_latest_result("dev-5", RESULT)
    later = time.time() + settings.session_ttl_sec + 1
    with patch("media_verify.services.session_store.time.time", return_value=later):
        assert session_store.load_latest_result("dev-5") is None
    assert "dev-5" not in session_store.local_sessions


def test_memory_store_is_bounded(null_redis, monkeypatch):
    from media_verify.config import settings

    monkeypatch.setattr(settings, "session_memory_limit", 2)
    for device in ("a", "b", "c"):
        session_store.save_latest_result(device, RESULT)

    assert list(session_store.local_sessions) == ["b", "c"]
