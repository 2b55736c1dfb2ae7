"""
botflow API - FastAPI REST API for the graph model builder.

Endpoints:
    GET    /api/health          - Health check
    POST   /api/graph           - Build a graph model from source payloads
    GET    /api/graph/demo      - Build the packaged demo graph model
    POST   /api/graph/view      - Build and return one decorated view
"""

from .routes import graph_router
from .server import app, create_app

__all__ = ["create_app", "app", "graph_router"]
