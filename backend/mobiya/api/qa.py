"""
Curated Q&A API Endpoint
========================
List and create the curated pairs the chat endpoint matches against
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from mobiya.middleware.auth import get_audience
from mobiya.models.database import get_db, QAPair
from mobiya.models.schemas import QAPairCreate, QAPairOut, QAPairList
from mobiya.services.chroma_service import AUDIENCE_SCOPES

logger = logging.getLogger(__name__)

router = APIRouter()


def to_schema(pair: QAPair) -> QAPairOut:
    return QAPairOut(
        id=pair.id,
        question=pair.question,
        answer=pair.answer,
        audience=pair.audience,
        category=pair.category,
        tags=pair.tag_list,
        source_id=pair.source_id,
        created_at=pair.created_at
    )


@router.get("/qa", response_model=QAPairList)
async def list_qa_pairs(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    category: Optional[str] = None,
    audience: str = Depends(get_audience),
    db: AsyncSession = Depends(get_db)
):
    """
    List curated pairs visible to the caller, oldest first
    """
    scopes = AUDIENCE_SCOPES.get(audience, AUDIENCE_SCOPES["public"])
    filters = [QAPair.audience.in_(scopes)]
    if category:
        filters.append(QAPair.category == category)

    count_result = await db.execute(select(func.count(QAPair.id)).where(*filters))
    total = count_result.scalar()

    offset = (page - 1) * page_size
    result = await db.execute(
        select(QAPair)
        .where(*filters)
        .order_by(QAPair.created_at)
        .offset(offset)
        .limit(page_size)
    )
    pairs = result.scalars().all()

    return QAPairList(
        items=[to_schema(p) for p in pairs],
        total=total,
        page=page,
        page_size=page_size
    )


@router.post("/qa", response_model=QAPairOut, status_code=status.HTTP_201_CREATED)
async def create_qa_pair(
    request: QAPairCreate,
    audience: str = Depends(get_audience),
    db: AsyncSession = Depends(get_db)
):
    """
    Create a curated pair

    Only employee callers may create employee pairs. A question that already
    exists for the same audience is rejected with 409.
    """
    if request.audience not in AUDIENCE_SCOPES.get(audience, AUDIENCE_SCOPES["public"]):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Audience '{audience}' cannot create '{request.audience}' pairs"
        )

    pair = QAPair.build(
        question=request.question,
        answer=request.answer,
        audience=request.audience,
        category=request.category,
        tags=request.tags,
        source_id=request.source_id,
        language=request.language
    )

    existing = await db.execute(
        select(QAPair.id).where(
            QAPair.question_hash == pair.question_hash,
            QAPair.audience == pair.audience
        )
    )
    if existing.scalar() is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="A curated pair with this question already exists"
        )

    db.add(pair)
    await db.commit()
    await db.refresh(pair)

    logger.info(f"Created curated pair {pair.id} ({pair.audience}): '{pair.question[:50]}'")
    return to_schema(pair)
