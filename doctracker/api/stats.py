"""Dashboard statistics.

GET /api/stats  issue and gap counts per status plus review activity.

The three reads are independent, so they run concurrently, each on its
own pooled connection.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy import Row, Select, func, select
from sqlalchemy.ext.asyncio import AsyncEngine

from doctracker.models.database import get_engine
from doctracker.models.docs import Gap, Issue, Review
from doctracker.models.schemas import StatsOut

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/stats", tags=["stats"])


async def _fetch_all(engine: AsyncEngine, stmt: Select[Any]) -> Sequence[Row[Any]]:
    async with engine.connect() as conn:
        result = await conn.execute(stmt)
        return result.all()


def _counts_by_status(rows: Sequence[Row[Any]]) -> dict[str, int]:
    # A NULL status is reported under the "null" key.
    return {
        (status if status is not None else "null"): int(count)
        for status, count in rows
    }


@router.get("", response_model=StatsOut)
async def get_stats(engine: AsyncEngine = Depends(get_engine)) -> dict[str, Any]:
    """Summarize the tracker.

    Statuses without rows are absent rather than zero.  With no reviews,
    ``total`` is 0 and ``last_review`` is null.
    """
    issue_rows, gap_rows, review_rows = await asyncio.gather(
        _fetch_all(engine, select(Issue.status, func.count()).group_by(Issue.status)),
        _fetch_all(engine, select(Gap.status, func.count()).group_by(Gap.status)),
        _fetch_all(engine, select(func.count(), func.max(Review.reviewed_at))),
    )

    total, last_review = review_rows[0] if review_rows else (0, None)
    return {
        "issues": _counts_by_status(issue_rows),
        "gaps": _counts_by_status(gap_rows),
        "reviews": {"total": int(total or 0), "last_review": last_review},
    }
