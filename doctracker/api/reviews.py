"""Document review log.

GET  /api/reviews         every review, newest first
POST /api/reviews         record that a document was reviewed now
GET  /api/reviews/{slug}  most recent review of one document, or null
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from sqlalchemy import func, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from doctracker.models.database import get_db
from doctracker.models.docs import Review
from doctracker.models.schemas import ReviewCreate, ReviewOut

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/reviews", tags=["reviews"])


@router.get("", response_model=list[ReviewOut])
async def list_reviews(db: AsyncSession = Depends(get_db)) -> list[Review]:
    result = await db.scalars(
        select(Review).order_by(Review.reviewed_at.desc(), Review.id.desc())
    )
    return list(result)


@router.post("", response_model=ReviewOut)
async def create_review(
    payload: ReviewCreate | None = None,
    db: AsyncSession = Depends(get_db),
) -> Review:
    """Insert a review stamped with the database's current time."""
    review = await db.scalar(
        insert(Review)
        .values(**(payload or ReviewCreate()).model_dump(), reviewed_at=func.now())
        .returning(Review)
    )
    await db.commit()
    logger.info(
        "Review logged",
        extra={"review_id": review.id, "doc_slug": review.doc_slug},
    )
    return review


@router.get("/{slug}", response_model=ReviewOut | None)
async def latest_review(slug: str, db: AsyncSession = Depends(get_db)) -> Review | None:
    """Return the latest review for ``slug``; ``null`` if it was never reviewed."""
    return await db.scalar(
        select(Review)
        .where(Review.doc_slug == slug)
        .order_by(Review.reviewed_at.desc(), Review.id.desc())
        .limit(1)
    )
