"""
FastAPI application: lifespan wiring, CORS and routers.

    uvicorn media_verify.main:app --port 8000
"""

import logging
import os
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

load_dotenv()

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

from media_verify.api import system, verify  # noqa: E402
from media_verify.integrations import http_client, redis_client  # noqa: E402


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    await http_client.initialize()
    redis_client.initialize()
    logger.info("[STARTUP] Media verification API ready")

    yield

    await http_client.close()
    redis_client.reset()
    logger.info("[SHUTDOWN] Media verification API stopped")


app = FastAPI(title="Media Authenticity Verification API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(system.router)
app.include_router(verify.router)


if __name__ == "__main__":
    import uvicorn

    port = int(os.getenv("PORT", "8000"))
    uvicorn.run("media_verify.main:app", host="0.0.0.0", port=port, log_level="info")
