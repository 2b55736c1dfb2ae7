"""
Routes package for the botflow API.

This package contains the FastAPI routers for:
- graph: Graph model building and decorated views
"""

from .graph import router as graph_router

__all__ = ["graph_router"]
