"""
System / health routes.
"""

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from media_verify.config import settings
from media_verify.integrations import redis_client

router = APIRouter(tags=["System"])


@router.get("/health")
async def health():
    return {
        "status": "healthy",
        "provider_configured": bool(settings.aiornot_api_key),
        "session_backend": "redis" if redis_client.client else "memory",
    }


@router.get("/robots.txt", response_class=PlainTextResponse)
def robots():
    return "User-agent: *\nDisallow: /"
