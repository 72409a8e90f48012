"""
Unit Tests for Models
=====================
Tests for Pydantic schemas, domain types and database models
"""

import pytest
from pydantic import ValidationError
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))


class TestPydanticSchemas:
    """Tests for Pydantic request/response schemas"""

    def test_chat_request_valid(self):
        from mobiya.models.schemas import ChatRequest

        request = ChatRequest(message="What does Mobiloitte do?")
        assert request.message == "What does Mobiloitte do?"
        assert request.session_id is None

    def test_chat_request_validation_min_length(self):
        from mobiya.models.schemas import ChatRequest

        with pytest.raises(ValidationError):
            ChatRequest(message="")

    def test_chat_request_validation_max_length(self):
        from mobiya.models.schemas import ChatRequest

        with pytest.raises(ValidationError):
            ChatRequest(message="a" * 4001)

    def test_classify_request_candidates(self):
        """Candidates need both fields"""
        from mobiya.models.schemas import ClassifyRequest

        request = ClassifyRequest(message="hi", candidates=[{"question": "q?", "answer": "a"}])
        assert request.candidates[0].question == "q?"

        with pytest.raises(ValidationError):
            ClassifyRequest(message="hi", candidates=[{"question": "q?"}])

    def test_qa_pair_create_audience(self):
        from mobiya.models.schemas import QAPairCreate

        assert QAPairCreate(question="q", answer="a").audience == "public"
        with pytest.raises(ValidationError):
            QAPairCreate(question="q", answer="a", audience="admin")

    def test_classification_response_reason(self):
        from mobiya.models.schemas import ClassificationResponse

        with pytest.raises(ValidationError):
            ClassificationResponse(admitted=True, reason="maybe", language="en", expanded_query="x")


class TestDomainTypes:
    """Tests for the domain dataclasses"""

    def test_candidate_coerce(self):
        from mobiya.models.domain import QACandidate

        assert QACandidate.coerce({"question": "q", "answer": "a"}) == QACandidate("q", "a")
        assert QACandidate.coerce({"question": "  ", "answer": "a"}) is None
        assert QACandidate.coerce(["q", "a"]) is None
        assert QACandidate.coerce(None) is None

    def test_classification_result_to_dict(self):
        from mobiya.models.domain import AdmissionReason, ClassificationResult

        result = ClassificationResult(
            admitted=False,
            reason=AdmissionReason.UNSUPPORTED_LANGUAGE,
            language="fr",
            expanded_query=""
        )
        assert result.to_dict() == {
            "admitted": False,
            "reason": "unsupported_language",
            "language": "fr",
            "expanded_query": "",
            "curated_answer": None,
            "matched_question": None,
        }

    def test_results_are_immutable(self):
        from dataclasses import FrozenInstanceError
        from mobiya.models.domain import ExpandedQuery

        expanded = ExpandedQuery(original="a", expanded="a", was_expanded=False)
        with pytest.raises(FrozenInstanceError):
            expanded.expanded = "b"


class TestDatabaseModels:
    """Tests for SQLAlchemy models"""

    def test_qa_pair_build(self):
        """Normalized question, hash and tags are derived"""
        from mobiya.models.database import QAPair, question_hash

        pair = QAPair.build(
            question="  What is Mobiloitte?  ",
            answer="A technology company.",
            tags=["company", " about ", ""]
        )

        assert pair.question == "What is Mobiloitte?"
        assert pair.normalized_question == "what is mobiloitte"
        assert pair.question_hash == question_hash("what is mobiloitte")
        assert pair.tags == "company,about"
        assert pair.tag_list == ["company", "about"]
        assert pair.audience == "public"

    def test_normalize_question(self):
        from mobiya.models.database import normalize_question

        assert normalize_question("What  is\tMobiloitte ?!") == "what is mobiloitte"

    def test_qa_pair_repr(self):
        from mobiya.models.database import QAPair

        pair = QAPair.build(question="Who founded Mobiloitte?", answer="x")
        assert "Who founded Mobiloitte?" in repr(pair)

    def test_chat_log_repr(self):
        from mobiya.models.database import ChatLog

        log = ChatLog(id="log-1", message="hi", admitted=True, reason="ok", context_type="conversational")
        assert "conversational" in repr(log)
