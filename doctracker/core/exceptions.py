"""Domain-specific exceptions for Doc Tracker.

Each exception maps to exactly one HTTP response, registered in
``doctracker.main.create_app``.  Database failures are not wrapped:
``sqlalchemy.exc.SQLAlchemyError`` is handled directly.
"""

from __future__ import annotations


# =============================================================================
# Auth
# =============================================================================


class UnauthorizedError(Exception):
    """Missing or incorrect shared-secret credential on a protected route."""

    def __init__(self, message: str = "Unauthorized") -> None:
        self.message = message
        super().__init__(message)
