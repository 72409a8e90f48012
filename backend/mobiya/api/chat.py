"""
Chat API Endpoint
=================
Single-turn chat over curated answers and document retrieval

Flow per message:
1. Classify - admission gate, query expansion, curated Q&A matching
2. Refuse - fixed text per rejection reason
3. Small talk - greetings, thanks, acknowledgements, goodbyes
4. Scope - fixed text for topics outside the company, unless a curated
   question covers the topic
5. Curated answer - served as stored, no LLM call
6. Retrieval - vector search with the expanded query, graded by score
7. Transcript - every outcome is written to chat_logs
"""

import asyncio
import logging
import time
import uuid
from typing import Any, Dict, List, Tuple

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from mobiya.config import settings
from mobiya.logger import truncate
from mobiya.middleware.auth import get_audience
from mobiya.models.database import get_db, QAPair
from mobiya.models.domain import AdmissionReason, ClassificationResult
from mobiya.models.schemas import ChatRequest, ChatResponse
from mobiya.services.chroma_service import AUDIENCE_SCOPES
from mobiya.services.conversational_handler import (
    detect_conversational_intent,
    get_conversational_response,
)
from mobiya.services.llm_service import llm_service
from mobiya.services.orchestrator import orchestrator
from mobiya.services.overlap_scorer import has_meaningful_overlap, normalize_text
from mobiya.services.rag_service import rag_service
from mobiya.services.scope_filter import is_out_of_scope
from mobiya.services.transcript_store import transcript_store

logger = logging.getLogger(__name__)

router = APIRouter()

REJECTION_RESPONSES = {
    AdmissionReason.GIBBERISH: (
        "gibberish",
        "I'm sorry, I couldn't understand that. Please ask a clear question about our services or company."
    ),
    AdmissionReason.PROFANITY: (
        "profanity_detected",
        "I'm here to assist you with professional questions about {brand}'s services, solutions, "
        "and company information. Please use respectful and appropriate language so I can help you better."
    ),
    AdmissionReason.UNSUPPORTED_LANGUAGE: (
        "unsupported_language",
        "Sorry, I can't answer in that language yet. Please ask your question in English "
        "or in Hinglish (Hindi written in Latin letters)."
    ),
}

OUT_OF_SCOPE_RESPONSE = (
    "I'm focused on helping with questions about {brand}'s services, AI solutions, company "
    "information, and processes. Could you please ask something related to our company?"
)

CLARIFY_RESPONSE = (
    "I couldn't find the exact information for this query. Could you please provide a bit more "
    "detail, such as the service, department, or topic?"
)

NO_DATA_RESPONSE = (
    "I don't have sufficient verified information to answer this question. "
    "Please ask about a specific service or topic."
)

ERROR_RESPONSE = "I encountered an error processing your request. Please try again."


async def load_candidates(db: AsyncSession, audience: str) -> List[QAPair]:
    """Curated pairs visible to `audience`, oldest first"""
    scopes = AUDIENCE_SCOPES.get(audience, AUDIENCE_SCOPES["public"])
    result = await db.execute(
        select(QAPair)
        .where(QAPair.audience.in_(scopes))
        .order_by(QAPair.created_at)
        .limit(settings.qa_candidate_limit)
    )
    return list(result.scalars().all())


def relates_to_curated(message: str, candidates: List[QAPair]) -> bool:
    """True when any curated question shares a concept with the message"""
    return any(has_meaningful_overlap(message, pair.question) for pair in candidates)


async def answer_from_documents(
    result: ClassificationResult,
    audience: str
) -> Tuple[str, Dict[str, Any], List[str]]:
    """
    Vector search with the expanded query and grade the result

    Returns:
        (response text, context dict, sources)
    """
    chunks = await asyncio.to_thread(
        rag_service.search_documents,
        result.expanded_query,
        audience,
        settings.rag_top_k
    )
    grade = rag_service.grade(chunks)

    if grade == "answer":
        good_chunks = rag_service.filter_chunks(chunks)
        response = await llm_service.generate_answer(
            result.expanded_query,
            good_chunks,
            language=result.language
        )
        context = {"type": "document", "chunks": len(good_chunks), "top_score": round(chunks[0]["score"], 4)}
        return response, context, rag_service.get_sources(good_chunks)

    if grade == "clarify":
        context = {"type": "clarify", "reason": "low_confidence", "top_score": round(chunks[0]["score"], 4)}
        return CLARIFY_RESPONSE, context, []

    return NO_DATA_RESPONSE, {"type": "no_data_found"}, []


@router.post("/chat", response_model=ChatResponse)
async def chat(
    request: ChatRequest,
    audience: str = Depends(get_audience),
    db: AsyncSession = Depends(get_db)
):
    """
    Answer one message

    The response context always carries 'type', 'reason', 'language' and
    'expanded_query' so clients can tell which branch produced the text.
    """
    started = time.perf_counter()
    session_id = request.session_id or str(uuid.uuid4())
    message = request.message
    brand = settings.brand_name
    sources: List[str] = []

    logger.info(f"Chat message from audience={audience}: '{truncate(message)}'")

    candidates = await load_candidates(db, audience)
    result = await orchestrator.classify_and_prepare(message, candidates)

    intent = detect_conversational_intent(message) if result.admitted else None

    if not result.admitted:
        context_type, template = REJECTION_RESPONSES[result.reason]
        response = template.format(brand=brand)
        context: Dict[str, Any] = {"type": context_type}
        logger.info(f"Message rejected ({result.reason.value}): '{truncate(message)}'")

    elif intent is not None:
        response = get_conversational_response(intent)
        context = {"type": "conversational", "intent": intent}

    elif is_out_of_scope(normalize_text(message)) and not relates_to_curated(message, candidates):
        response = OUT_OF_SCOPE_RESPONSE.format(brand=brand)
        context = {"type": "out_of_scope"}

    elif result.curated_answer is not None:
        response = result.curated_answer
        context = {"type": "qa", "matched_question": result.matched_question}

    else:
        try:
            response, context, sources = await answer_from_documents(result, audience)
        except Exception:
            logger.exception(f"Document retrieval failed for '{truncate(message)}'")
            response = ERROR_RESPONSE
            context = {"type": "error"}

    context.update({
        "reason": result.reason.value,
        "language": result.language,
        "expanded_query": result.expanded_query,
    })

    latency_ms = int((time.perf_counter() - started) * 1000)
    await transcript_store.record(
        db,
        message=message,
        result=result,
        context_type=context["type"],
        audience=audience,
        session_id=session_id,
        latency_ms=latency_ms
    )

    return ChatResponse(
        response=response,
        session_id=session_id,
        context=context,
        sources=sources
    )
