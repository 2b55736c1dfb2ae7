"""
FastAPI REST API server for the graph model builder.

Usage:
    # Run standalone
    python -m botflow.api.server

    # Or via factory
    from botflow.api import create_app
    app = create_app()
    uvicorn.run(app, port=5001)

API Structure:
    /api/graph/  - Graph model endpoints (from routes/graph.py)
    /api/health  - Health check
"""

from __future__ import annotations

import logging
import os
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from botflow import __version__

from .routes import graph_router
from .schema import HealthResponse

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def create_app(enable_cors: bool = True) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        enable_cors: Whether to enable CORS middleware (the renderer is
            usually served from a different origin).

    Returns:
        Configured FastAPI application.
    """
    app = FastAPI(
        title="botflow",
        description="Conversation step timeline and mini-app dependency graphs",
        version=__version__,
    )

    if enable_cors:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=False,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.include_router(graph_router, prefix="/api")

    @app.get("/api/health", response_model=HealthResponse)
    async def health_check():
        """Health check endpoint."""
        return HealthResponse(
            status="ok",
            version=__version__,
            timestamp=datetime.now(timezone.utc).isoformat(),
        )

    logger.debug("botflow API configured (cors=%s)", enable_cors)
    return app


# Default app instance
app = create_app()


def main() -> None:
    import uvicorn

    host = os.environ.get("BOTFLOW_API_HOST", "127.0.0.1")
    port = int(os.environ.get("BOTFLOW_API_PORT", "5001"))
    logger.info("Starting botflow API on %s:%d", host, port)
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    main()
