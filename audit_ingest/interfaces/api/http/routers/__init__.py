"""
Routers HTTP por feature. Este archivo NO define endpoints.
"""

from .audit_events import router as audit_events_router

__all__ = ["audit_events_router"]
