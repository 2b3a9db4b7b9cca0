"""
Shared pytest fixtures for all test modules.

No test touches the real provider: the aiohttp session is replaced by
`FakeSession` (below) and the Poller gets a no-op sleep.
"""

import os

# A non-empty stub so the route has a credential; real calls never happen.
os.environ.setdefault("AIORNOT_API_KEY", "stub-key-for-tests")

from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from tests.mocks.redis_mock import MockRedis

from media_verify.main import app  # noqa: E402


# ---------------------------------------------------------------------------
# Core infrastructure fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_redis(monkeypatch):
    """Replace redis_client.client with an in-memory MockRedis."""
    from media_verify.integrations import redis_client as rc

    mock_rc = MockRedis()
    monkeypatch.setattr(rc, "client", mock_rc)
    return mock_rc


@pytest.fixture
def null_redis(monkeypatch):
    """Force the session store onto its memory fallback."""
    from media_verify.integrations import redis_client as rc
    from media_verify.services import session_store

    monkeypatch.setattr(rc, "client", None)
    session_store.local_sessions.clear()
    yield
    session_store.local_sessions.clear()


@pytest.fixture
def client(mock_redis):
    """
    FastAPI TestClient with mocked Redis.

    redis_client.initialize/reset are patched to no-ops so the lifespan can't
    overwrite the mock.
    """
    with (
        patch("media_verify.integrations.redis_client.initialize"),
        patch("media_verify.integrations.redis_client.reset"),
    ):
        with TestClient(app, raise_server_exceptions=False) as c:
            yield c


async def no_sleep(_seconds: float) -> None:
    return None


# ---------------------------------------------------------------------------
# aiohttp session fakes
# ---------------------------------------------------------------------------


def make_response(status=200, json_body=None, text="", json_error=None):
    """Mock aiohttp response usable as `async with sess.post(...) as response`."""
    resp = MagicMock()
    resp.__aenter__ = AsyncMock(return_value=resp)
    resp.__aexit__ = AsyncMock(return_value=None)
    resp.status = status
    resp.text = AsyncMock(return_value=text)
    if json_error is not None:
        resp.json = AsyncMock(side_effect=json_error)
    else:
        resp.json = AsyncMock(return_value=json_body)
    return resp


def patch_session(mock_session):
    """
    Patch http_client.request_session to yield mock_session directly,
    bypassing aiohttp.ClientSession construction entirely.
    """
    @asynccontextmanager
    async def _fake_request_session():
        yield mock_session

    return patch(
        "media_verify.integrations.http_client.request_session",
        side_effect=_fake_request_session,
    )


def make_session(post=None, get=None):
    """`post`/`get` are a response, a list of responses, or an exception."""
    session = MagicMock()
    for name, value in (("post", post), ("get", get)):
        if value is None:
            continue
        if isinstance(value, list):
            setattr(session, name, MagicMock(side_effect=value))
        elif isinstance(value, BaseException):
            setattr(session, name, MagicMock(side_effect=value))
        else:
            setattr(session, name, MagicMock(return_value=value))
    return session


# ---------------------------------------------------------------------------
# Shared test data
# ---------------------------------------------------------------------------

TINY_JPEG = b"\xff\xd8\xff\xe0" + b"\x00" * 64 + b"\xff\xd9"
TINY_MP4 = b"\x00\x00\x00\x18ftypmp42" + b"\x00" * 64

IMAGE_REPORT = {
    "id": "img-report-1",
    "ai_probability": 0.82,
    "human_probability": 0.18,
    "report": {
        "verdict": "ai",
        "ai": {"is_detected": True, "confidence": 0.82},
        "human": {"is_detected": False, "confidence": 0.18},
        "generator": {"midjourney": {"is_detected": True, "confidence": 0.71}},
        "media_info": {"width": 1024, "height": 768},
    },
    "facets": {
        "quality": {"is_detected": True, "score": 0.634},
        "metadata": {"score": 0.2},
    },
}

VIDEO_COMPLETED = {
    "id": "r1",
    "status": "completed",
    "report": {"ai_video": {"is_detected": True, "confidence": 0.95}},
}
