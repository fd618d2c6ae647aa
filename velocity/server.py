"""FastAPI server for the Velocity sales copilot.

Run with:
    uvicorn velocity.server:app --reload --host 0.0.0.0 --port 8000
"""

from __future__ import annotations

import logging
import uuid
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from velocity.api.routes import router
from velocity.config import CORS_ORIGINS, SERVER_HOST, SERVER_PORT
from velocity.data.crm import CrmDataSource
from velocity.orchestrator import create_orchestrator
from velocity.services.artifact_generator import ArtifactGenerator, build_generation_llm
from velocity.services.artifact_store import InMemoryArtifactRepository
from velocity.services.media_client import MediaClient

# ── Logging ──────────────────────────────────────────────────────────
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)-8s %(name)s — %(message)s",
)
logger = logging.getLogger(__name__)


# ── Lifespan: initialise / tear-down shared resources ────────────────
@asynccontextmanager
async def lifespan(application: FastAPI):
    """Build the orchestrator, drafting model and artifact store once.

    The generator is shared between the generation tools and the
    refine/email endpoints; the media client is closed on shutdown.
    """
    logger.info("Building Velocity orchestrator…")
    generator = ArtifactGenerator(build_generation_llm())
    media = MediaClient()
    application.state.generator = generator
    application.state.artifacts = InMemoryArtifactRepository()
    application.state.orchestrator = create_orchestrator(
        data=CrmDataSource(),
        generator=generator,
        media=media,
    )
    logger.info("Orchestrator ready (drafting model %s).", "online" if generator.online else "offline")
    yield
    await media.aclose()


# ── FastAPI application ──────────────────────────────────────────────
app = FastAPI(
    title="Velocity Sales Copilot",
    description=(
        "Tool-calling sales assistant — research accounts, draft proposals, "
        "handoffs, meeting briefs and follow-ups."
    ),
    version="1.0.0",
    lifespan=lifespan,
)

# ── CORS (needed for the web frontend) ──────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── Request-ID middleware ────────────────────────────────────────────
@app.middleware("http")
async def add_request_id(request: Request, call_next) -> Response:
    """Attach a unique request ID to every request for log correlation.

    The ID is echoed in the ``X-Request-ID`` response header.
    """
    request_id = request.headers.get("X-Request-ID", str(uuid.uuid4()))
    request.state.request_id = request_id
    logger.info("[%s] %s %s", request_id, request.method, request.url.path)
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


# ── Register routes ──────────────────────────────────────────────────
app.include_router(router, prefix="/api")


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "service": "Velocity Copilot",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/api/health",
    }


if __name__ == "__main__":
    logger.info("Starting Velocity API server on %s:%d", SERVER_HOST, SERVER_PORT)
    uvicorn.run(
        "velocity.server:app",
        host=SERVER_HOST,
        port=SERVER_PORT,
        reload=True,
    )
