"""API routers for all endpoints."""

from storepulse.routers import dashboard, reports

__all__ = [
    "dashboard",
    "reports",
]
