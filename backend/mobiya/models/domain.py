"""
Domain Types
============
Values passed between the admission gate, the query expander, the overlap
scorer and the orchestrator. All of them are immutable.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional


class AdmissionReason(Enum):
    """Why a message was admitted or rejected"""
    OK = "ok"
    GIBBERISH = "gibberish"
    PROFANITY = "profanity"
    UNSUPPORTED_LANGUAGE = "unsupported_language"


@dataclass(frozen=True)
class Message:
    """Raw user input as received by the API"""
    text: str
    session_id: Optional[str] = None
    received_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass(frozen=True)
class AdmissionDecision:
    admitted: bool
    reason: AdmissionReason
    detected_language: Optional[str] = None


@dataclass(frozen=True)
class ExpandedQuery:
    """
    Query rewritten for matching.

    Attributes:
        original: Text as typed by the user
        expanded: Original text, possibly with the brand appended
        was_expanded: True when something was appended
    """
    original: str
    expanded: str
    was_expanded: bool


@dataclass(frozen=True)
class OverlapResult:
    matched: bool
    query: str
    candidate: str


@dataclass(frozen=True)
class QACandidate:
    """Curated question/answer pair offered for short-circuit matching"""
    question: str
    answer: str

    @classmethod
    def coerce(cls, item: Any) -> Optional["QACandidate"]:
        """
        Build a candidate from a dict, an object with question/answer
        attributes, or an existing candidate.

        Returns None for anything without a non-empty question and answer.
        """
        if isinstance(item, cls):
            return item
        if isinstance(item, dict):
            question, answer = item.get("question"), item.get("answer")
        else:
            question = getattr(item, "question", None)
            answer = getattr(item, "answer", None)
        if not isinstance(question, str) or not isinstance(answer, str):
            return None
        if not question.strip() or not answer.strip():
            return None
        return cls(question=question, answer=answer)


@dataclass(frozen=True)
class ClassificationResult:
    """
    Outcome of one classify-and-prepare call.

    Attributes:
        admitted: Whether the message passed the admission gate
        reason: First triggered admission reason (OK when admitted)
        language: Detected language code, 'und' when unknown
        expanded_query: Query for downstream matching, empty when rejected
        curated_answer: Pre-written answer when a candidate matched strongly
        matched_question: Question of the matched candidate
    """
    admitted: bool
    reason: AdmissionReason
    language: str
    expanded_query: str
    curated_answer: Optional[str] = None
    matched_question: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "admitted": self.admitted,
            "reason": self.reason.value,
            "language": self.language,
            "expanded_query": self.expanded_query,
            "curated_answer": self.curated_answer,
            "matched_question": self.matched_question,
        }
