"""
Classify API Endpoint
=====================
Exposes classify_and_prepare over HTTP with caller-supplied candidates
"""

import logging

from fastapi import APIRouter

from mobiya.logger import truncate
from mobiya.models.schemas import ClassifyRequest, ClassificationResponse
from mobiya.services.orchestrator import orchestrator

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/classify", response_model=ClassificationResponse)
async def classify(request: ClassifyRequest):
    """
    Gate, expand and match one message

    Nothing is persisted and no retrieval runs; the caller decides what to
    do with the expanded query.
    """
    candidates = [c.model_dump() for c in request.candidates]
    result = await orchestrator.classify_and_prepare(request.message, candidates)

    logger.info(
        f"Classified '{truncate(request.message)}': reason={result.reason.value}, "
        f"language={result.language}, curated={result.curated_answer is not None}"
    )
    return ClassificationResponse(**result.to_dict())
