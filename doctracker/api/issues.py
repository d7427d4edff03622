"""Documentation issues.

GET   /api/issues?status=  issues with that status (default "open", "all" = every issue)
POST  /api/issues          open a new issue
PATCH /api/issues/{id}     change status; "resolved"/"dismissed" stamp resolved_at
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy import func, insert, null, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from doctracker.models.database import get_db
from doctracker.models.docs import TERMINAL_ISSUE_STATUSES, Issue
from doctracker.models.schemas import IssueCreate, IssueOut, IssueStatusUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/issues", tags=["issues"])

ALL_STATUSES = "all"


@router.get("", response_model=list[IssueOut])
async def list_issues(
    status: str = Query(default="open", description='Exact status to match, or "all"'),
    db: AsyncSession = Depends(get_db),
) -> list[Issue]:
    stmt = select(Issue).order_by(Issue.created_at.desc(), Issue.id.desc())
    if status != ALL_STATUSES:
        stmt = stmt.where(Issue.status == status)
    return list(await db.scalars(stmt))


@router.post("", response_model=IssueOut)
async def create_issue(
    payload: IssueCreate | None = None,
    db: AsyncSession = Depends(get_db),
) -> Issue:
    """Insert an issue.  Status is always "open" regardless of the request."""
    issue = await db.scalar(
        insert(Issue)
        .values(**(payload or IssueCreate()).model_dump(), status="open", created_at=func.now())
        .returning(Issue)
    )
    await db.commit()
    logger.info(
        "Issue opened",
        extra={"issue_id": issue.id, "doc_slug": issue.doc_slug, "issue_type": issue.issue_type},
    )
    return issue


@router.patch("/{issue_id}", response_model=IssueOut | None)
async def update_issue_status(
    issue_id: int,
    payload: IssueStatusUpdate | None = None,
    db: AsyncSession = Depends(get_db),
) -> Issue | None:
    """Set status and resolution notes.

    ``resolved_at`` is recomputed on every call: the current time when the
    new status is "resolved" or "dismissed", NULL otherwise.  Returns
    ``null`` when the issue does not exist.
    """
    payload = payload or IssueStatusUpdate()
    resolved_at = func.now() if payload.status in TERMINAL_ISSUE_STATUSES else null()
    issue = await db.scalar(
        update(Issue)
        .where(Issue.id == issue_id)
        .values(
            status=payload.status,
            resolution_notes=payload.resolution_notes,
            resolved_at=resolved_at,
        )
        .returning(Issue)
        .execution_options(synchronize_session=False)
    )
    await db.commit()
    logger.info(
        "Issue status updated",
        extra={"issue_id": issue_id, "status": payload.status, "found": issue is not None},
    )
    return issue
