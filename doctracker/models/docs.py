"""Documentation tracking models: reviews, issues, and gaps.

Three independent tables with SERIAL primary keys and no foreign keys.
The column definitions and server defaults are read directly by other
tools querying the database, so treat them as a public contract.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from doctracker.models.database import Base

# Issue statuses that stamp ``resolved_at``.
TERMINAL_ISSUE_STATUSES: frozenset[str] = frozenset({"resolved", "dismissed"})


class Review(Base):
    """One record per "someone checked this document" event."""

    __tablename__ = "docs_reviews"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    doc_slug: Mapped[str] = mapped_column(String(255), nullable=False)
    doc_title: Mapped[str | None] = mapped_column(String(500), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    reviewed_at: Mapped[datetime | None] = mapped_column(
        DateTime, server_default=func.now(), nullable=True
    )

    def __repr__(self) -> str:
        return f"<Review id={self.id} slug={self.doc_slug!r} at={self.reviewed_at}>"


class Issue(Base):
    """A problem found in an existing document."""

    __tablename__ = "docs_issues"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    doc_slug: Mapped[str | None] = mapped_column(String(255), nullable=True)
    doc_title: Mapped[str | None] = mapped_column(String(500), nullable=True)
    issue_type: Mapped[str] = mapped_column(String(50), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    suggested_fix: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str | None] = mapped_column(
        String(20), server_default="open", nullable=True
    )  # open|resolved|dismissed|... (free text)
    resolution_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime | None] = mapped_column(
        DateTime, server_default=func.now(), nullable=True
    )
    resolved_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    def __repr__(self) -> str:
        return (
            f"<Issue id={self.id} slug={self.doc_slug!r} "
            f"type={self.issue_type!r} status={self.status!r}>"
        )


class Gap(Base):
    """Missing documentation surfaced by a support ticket."""

    __tablename__ = "docs_gaps"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    ticket_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    ticket_subject: Mapped[str | None] = mapped_column(String(500), nullable=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    suggested_doc: Mapped[str | None] = mapped_column(String(255), nullable=True)
    status: Mapped[str | None] = mapped_column(
        String(20), server_default="open", nullable=True
    )
    doc_created_slug: Mapped[str | None] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime | None] = mapped_column(
        DateTime, server_default=func.now(), nullable=True
    )

    def __repr__(self) -> str:
        return (
            f"<Gap id={self.id} ticket={self.ticket_id!r} status={self.status!r}>"
        )
