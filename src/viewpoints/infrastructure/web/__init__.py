"""FastAPI web layer: routes, request identity, and error mapping."""

from viewpoints.infrastructure.web.app import create_app

__all__ = ["create_app"]
