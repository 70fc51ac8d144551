"""
ASGI entrypoint: `uvicorn audit_ingest.main:app`.
"""

from .api.main import app

__all__ = ["app"]
