"""
Pydantic Schemas for API Request/Response
==========================================
"""

from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field


# ============================================
# Chat Schemas
# ============================================

class ChatRequest(BaseModel):
    """Request for chat endpoint
    - message: user prompt
    - session_id: optional client session, echoed back and stored with the transcript
    """
    message: str = Field(..., min_length=1, max_length=4000)
    session_id: Optional[str] = Field(default=None, max_length=64)


class ChatResponse(BaseModel):
    """Response from chat endpoint
    context: outcome metadata (type, reason, language, expanded_query ...)
    """
    response: str
    session_id: Optional[str] = None
    context: Dict[str, Any] = {}
    sources: List[str] = []


# ============================================
# Classification Schemas
# ============================================

class QACandidateIn(BaseModel):
    """Curated pair supplied by the caller"""
    question: str = Field(..., min_length=1)
    answer: str = Field(..., min_length=1)


class ClassifyRequest(BaseModel):
    """Classify a message against caller-supplied curated pairs"""
    message: str = Field(..., min_length=1, max_length=4000)
    candidates: List[QACandidateIn] = []


class ClassificationResponse(BaseModel):
    admitted: bool
    reason: str = Field(..., pattern="^(ok|gibberish|profanity|unsupported_language)$")
    language: str
    expanded_query: str
    curated_answer: Optional[str] = None
    matched_question: Optional[str] = None


# ============================================
# Curated Q&A Schemas
# ============================================

class QAPairCreate(BaseModel):
    """Create a curated pair
    audience: public|employee
    tags: free-form labels, stored comma-separated
    """
    question: str = Field(..., min_length=1, max_length=1000)
    answer: str = Field(..., min_length=1)
    audience: str = Field(default="public", pattern="^(public|employee)$")
    category: Optional[str] = None
    tags: List[str] = []
    source_id: str = "manual"
    language: str = "en"


class QAPairOut(BaseModel):
    id: str
    question: str
    answer: str
    audience: str
    category: Optional[str] = None
    tags: List[str] = []
    source_id: str
    created_at: datetime


class QAPairList(BaseModel):
    """Paginated list of curated pairs"""
    items: List[QAPairOut]
    total: int
    page: int
    page_size: int
