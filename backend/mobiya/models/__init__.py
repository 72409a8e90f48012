"""Models package"""
from mobiya.models.database import Base, QAPair, ChatLog, get_db, init_db
from mobiya.models.domain import (
    AdmissionReason, AdmissionDecision, ClassificationResult,
    ExpandedQuery, Message, OverlapResult, QACandidate
)
from mobiya.models.schemas import (
    ChatRequest, ChatResponse,
    QACandidateIn, ClassifyRequest, ClassificationResponse,
    QAPairCreate, QAPairOut, QAPairList
)
