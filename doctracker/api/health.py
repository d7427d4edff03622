"""Health-check endpoint.

Process supervisors and load balancers hit this endpoint to verify the
application is running.  It requires no credential.
"""

from __future__ import annotations

from fastapi import APIRouter

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check() -> dict[str, str]:
    """Return 200 with ``{"status": "healthy"}`` if the API is responding."""
    return {"status": "healthy"}
