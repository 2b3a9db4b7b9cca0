"""
Unit tests for media_verify/integrations/aiornot.py.

aiohttp is mocked through http_client.request_session so no real network
calls are made; call counts on the fake session prove when none happen.
"""

import asyncio
from unittest.mock import AsyncMock, patch

import aiohttp
import pytest

from media_verify.config import settings
from media_verify.core.errors import (
    AccessForbidden,
    AuthenticationFailed,
    InvalidCredential,
    MalformedResponse,
    NetworkError,
    PayloadTooLarge,
    ProviderRequestFailed,
    ProviderServerError,
    RateLimited,
    RequestTimeout,
)
from media_verify.integrations.aiornot import AIOrNotClient, needs_polling, upload_target
from media_verify.schemas.verification import MediaUpload

from tests.conftest import TINY_JPEG, TINY_MP4, make_response, make_session, no_sleep, patch_session

IMAGE = MediaUpload(content=TINY_JPEG, filename="photo.jpg", mime_type="image/jpeg")
VIDEO = MediaUpload(content=TINY_MP4, filename="clip.mp4", mime_type="video/mp4")


# ---------------------------------------------------------------------------
# Routing decisions
# ---------------------------------------------------------------------------


def test_image_target():
    target = upload_target("image")
    assert target.endpoint == settings.provider_image_endpoint
    assert target.field_name == "object"
    assert target.timeout_sec == settings.image_upload_timeout_sec


def test_video_target():
    target = upload_target("video")
    assert target.endpoint == settings.provider_video_endpoint
    assert target.field_name == "video"
    assert target.timeout_sec > upload_target("image").timeout_sec


def test_needs_polling_only_for_video_acknowledgements():
    assert needs_polling("video", {"report_id": "r1"}) is True
    assert needs_polling("video", {"report_id": "r1", "report": {"ai_video": {}}}) is False
    assert needs_polling("image", {"report_id": "r1"}) is False
    assert needs_polling("video", {"id": "r1"}) is False


def test_missing_api_key_rejected():
    with pytest.raises(InvalidCredential):
        AIOrNotClient("")


# ---------------------------------------------------------------------------
# submit
# ---------------------------------------------------------------------------


async def test_submit_image_posts_object_field_with_bearer():
    session = make_session(post=make_response(200, {"id": "i1", "report": {}}))

    with patch_session(session), patch("aiohttp.FormData") as form_cls:
        payload = await AIOrNotClient("key-123").submit(IMAGE, "image")

    assert payload["id"] == "i1"
    url = session.post.call_args.args[0]
    kwargs = session.post.call_args.kwargs
    assert url == settings.provider_image_endpoint
    assert kwargs["headers"] == {"Authorization": "Bearer key-123"}
    assert kwargs["timeout"].total == settings.image_upload_timeout_sec

    field_name, content = form_cls.return_value.add_field.call_args.args[:2]
    assert field_name == "object"
    assert content == TINY_JPEG


async def test_submit_video_posts_video_field():
    session = make_session(post=make_response(200, {"report_id": "r1"}))

    with patch_session(session), patch("aiohttp.FormData") as form_cls:
        await AIOrNotClient("key").submit(VIDEO, "video")

    assert session.post.call_args.args[0] == settings.provider_video_endpoint
    assert session.post.call_args.kwargs["timeout"].total == settings.video_upload_timeout_sec
    assert form_cls.return_value.add_field.call_args.args[0] == "video"


@pytest.mark.parametrize(
    "status,error_cls",
    [
        (401, AuthenticationFailed),
        (403, AccessForbidden),
        (413, PayloadTooLarge),
        (429, RateLimited),
        (500, ProviderServerError),
        (503, ProviderServerError),
        (400, ProviderRequestFailed),
        (422, ProviderRequestFailed),
    ],
)
async def test_submit_maps_http_errors(status, error_cls):
    session = make_session(post=make_response(status, text="nope"))

    with patch_session(session):
        with pytest.raises(error_cls) as exc:
            await AIOrNotClient("key").submit(IMAGE, "image")

    assert exc.value.status_code == status
    assert session.post.call_count == 1


async def test_submit_network_error():
    session = make_session(post=aiohttp.ClientConnectionError("refused"))
    with patch_session(session):
        with pytest.raises(NetworkError):
            await AIOrNotClient("key").submit(IMAGE, "image")


async def test_submit_timeout():
    session = make_session(post=asyncio.TimeoutError())
    with patch_session(session):
        with pytest.raises(RequestTimeout):
            await AIOrNotClient("key").submit(VIDEO, "video")


async def test_submit_invalid_json():
    session = make_session(post=make_response(200, json_error=ValueError("Expecting value")))
    with patch_session(session):
        with pytest.raises(MalformedResponse):
            await AIOrNotClient("key").submit(IMAGE, "image")


async def test_submit_non_object_json():
    session = make_session(post=make_response(200, ["not", "an", "object"]))
    with patch_session(session):
        with pytest.raises(MalformedResponse):
            await AIOrNotClient("key").submit(IMAGE, "image")


# ---------------------------------------------------------------------------
# fetch_report
# ---------------------------------------------------------------------------


async def test_fetch_report_success():
    session = make_session(get=make_response(200, {"status": "processing"}))

    with patch_session(session):
        response = await AIOrNotClient("key", report_endpoint="https://provider.test/v1/reports/").fetch_report("r1")

    assert response.status_code == 200
    assert response.body == {"status": "processing"}
    assert session.get.call_args.args[0] == "https://provider.test/v1/reports/r1"
    assert session.get.call_args.kwargs["timeout"].total == settings.poll_request_timeout_sec


async def test_fetch_report_returns_error_status_without_raising():
    session = make_session(get=make_response(404))
    with patch_session(session):
        response = await AIOrNotClient("key").fetch_report("missing")
    assert response.status_code == 404
    assert response.body is None


async def test_fetch_report_translates_transport_errors():
    session = make_session(get=[aiohttp.ServerDisconnectedError(), asyncio.TimeoutError()])
    client = AIOrNotClient("key")
    with patch_session(session):
        with pytest.raises(NetworkError):
            await client.fetch_report("r1")
        with pytest.raises(RequestTimeout):
            await client.fetch_report("r1")


# ---------------------------------------------------------------------------
# analyze (submit + optional poll)
# ---------------------------------------------------------------------------


async def test_analyze_image_never_polls():
    session = make_session(post=make_response(200, {"id": "i1", "ai_probability": 0.1}))
    with patch_session(session):
        payload = await AIOrNotClient("key").analyze(IMAGE, "image", sleep=no_sleep)
    assert payload["id"] == "i1"
    session.get.assert_not_called()


async def test_analyze_video_hands_off_to_poller():
    client = AIOrNotClient("key")
    client.submit = AsyncMock(return_value={"report_id": "r9"})
    completed = {"status": "completed", "report": {"ai_video": {"confidence": 0.2}}}

    with patch("media_verify.integrations.poller.ReportPoller.poll", new_callable=AsyncMock, return_value=completed) as poll:
        payload = await client.analyze(VIDEO, "video", sleep=no_sleep)

    assert payload is completed
    poll.assert_awaited_once_with("r9")
