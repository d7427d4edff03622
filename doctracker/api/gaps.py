"""Documentation gaps reported through support tickets.

GET   /api/gaps?status=  gaps with that status (default "open", "all" = every gap)
POST  /api/gaps          log a new gap
PATCH /api/gaps/{id}     change status and record the doc written for it
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy import func, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from doctracker.api.issues import ALL_STATUSES
from doctracker.models.database import get_db
from doctracker.models.docs import Gap
from doctracker.models.schemas import GapCreate, GapOut, GapStatusUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/gaps", tags=["gaps"])


@router.get("", response_model=list[GapOut])
async def list_gaps(
    status: str = Query(default="open", description='Exact status to match, or "all"'),
    db: AsyncSession = Depends(get_db),
) -> list[Gap]:
    stmt = select(Gap).order_by(Gap.created_at.desc(), Gap.id.desc())
    if status != ALL_STATUSES:
        stmt = stmt.where(Gap.status == status)
    return list(await db.scalars(stmt))


@router.post("", response_model=GapOut)
async def create_gap(
    payload: GapCreate | None = None,
    db: AsyncSession = Depends(get_db),
) -> Gap:
    gap = await db.scalar(
        insert(Gap)
        .values(**(payload or GapCreate()).model_dump(), status="open", created_at=func.now())
        .returning(Gap)
    )
    await db.commit()
    logger.info("Gap logged", extra={"gap_id": gap.id, "ticket_id": gap.ticket_id})
    return gap


@router.patch("/{gap_id}", response_model=GapOut | None)
async def update_gap_status(
    gap_id: int,
    payload: GapStatusUpdate | None = None,
    db: AsyncSession = Depends(get_db),
) -> Gap | None:
    payload = payload or GapStatusUpdate()
    gap = await db.scalar(
        update(Gap)
        .where(Gap.id == gap_id)
        .values(status=payload.status, doc_created_slug=payload.doc_created_slug)
        .returning(Gap)
        .execution_options(synchronize_session=False)
    )
    await db.commit()
    logger.info(
        "Gap status updated",
        extra={"gap_id": gap_id, "status": payload.status, "found": gap is not None},
    )
    return gap
