"""Request and response bodies for the tracker API.

Request fields are all optional: required columns are enforced by the
database's NOT NULL constraints, not by the API layer.  Numbers sent for
text columns are stored as their string form, and a missing body counts
as an empty one.  Unknown fields (including a client-supplied ``status``
on create) are ignored.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class RequestBody(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)


# =============================================================================
#  Reviews
# =============================================================================


class ReviewCreate(RequestBody):
    doc_slug: str | None = None
    doc_title: str | None = None
    notes: str | None = None


class ReviewOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    doc_slug: str
    doc_title: str | None
    notes: str | None
    reviewed_at: datetime | None


# =============================================================================
#  Issues
# =============================================================================


class IssueCreate(RequestBody):
    doc_slug: str | None = None
    doc_title: str | None = None
    issue_type: str | None = None
    description: str | None = None
    suggested_fix: str | None = None


class IssueStatusUpdate(RequestBody):
    status: str | None = None
    resolution_notes: str | None = None


class IssueOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    doc_slug: str | None
    doc_title: str | None
    issue_type: str
    description: str
    suggested_fix: str | None
    status: str | None
    resolution_notes: str | None
    created_at: datetime | None
    resolved_at: datetime | None


# =============================================================================
#  Gaps
# =============================================================================


class GapCreate(RequestBody):
    ticket_id: str | None = None
    ticket_subject: str | None = None
    description: str | None = None
    suggested_doc: str | None = None


class GapStatusUpdate(RequestBody):
    status: str | None = None
    doc_created_slug: str | None = None


class GapOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    ticket_id: str | None
    ticket_subject: str | None
    description: str
    suggested_doc: str | None
    status: str | None
    doc_created_slug: str | None
    created_at: datetime | None


# =============================================================================
#  Stats
# =============================================================================


class ReviewStats(BaseModel):
    total: int
    last_review: datetime | None


class StatsOut(BaseModel):
    """Row counts per status plus review activity."""

    issues: dict[str, int]
    gaps: dict[str, int]
    reviews: ReviewStats
