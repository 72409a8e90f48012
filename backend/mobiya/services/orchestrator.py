"""
Retrieval Orchestrator
======================
Sequence Admission Gate -> Query Expander -> Overlap Scorer for one message.

A rejected message stops at the gate: it is neither expanded nor scored, and
nothing about it travels further downstream. An admitted message is always
expanded; the first curated candidate whose question overlaps strongly with
the expanded query short-circuits retrieval. Otherwise the expanded query is
handed back for vector search and answer synthesis by the caller.
"""

import logging
from typing import Any, Iterable, Optional, Union

from mobiya.models.domain import ClassificationResult, Message, QACandidate
from mobiya.services.admission_gate import AdmissionGate
from mobiya.services.provider_chain import UNDETERMINED, ProviderChain
from mobiya.services.query_expander import QueryExpander, query_expander
from mobiya.services.overlap_scorer import OverlapScorer, overlap_scorer

logger = logging.getLogger(__name__)


def _iter_candidates(candidates: Any) -> Iterable[Any]:
    """Candidates as an iterable; anything that is not a list-like collection yields nothing"""
    if candidates is None or isinstance(candidates, (str, bytes, dict)):
        return ()
    try:
        return iter(candidates)
    except TypeError:
        logger.debug(f"Ignoring non-iterable candidates: {type(candidates).__name__}")
        return ()


class RetrievalOrchestrator:
    """
    Thin coordination layer over the gate, expander and scorer.

    Collaborators are injected so tests can swap the provider chain; the
    module-level instance is wired from settings.
    """

    def __init__(
        self,
        gate: AdmissionGate,
        expander: Optional[QueryExpander] = None,
        scorer: Optional[OverlapScorer] = None
    ):
        self.gate = gate
        self.expander = expander or query_expander
        self.scorer = scorer or overlap_scorer

    async def classify_and_prepare(
        self,
        message: Union[str, Message],
        candidates: Optional[Iterable[Any]] = None
    ) -> ClassificationResult:
        """
        Classify one message and prepare it for retrieval.

        Args:
            message: Raw text or a Message
            candidates: Curated Q&A pairs as dicts or objects with
                `question`/`answer`; None or empty means no short-circuit

        Returns:
            ClassificationResult
        """
        text = message.text if isinstance(message, Message) else message
        text = text or ""

        decision = await self.gate.evaluate(text)
        if not decision.admitted:
            return ClassificationResult(
                admitted=False,
                reason=decision.reason,
                language=decision.detected_language or UNDETERMINED,
                expanded_query=""
            )

        expanded = self.expander.expand(text)
        language = decision.detected_language or UNDETERMINED

        for item in _iter_candidates(candidates):
            candidate = QACandidate.coerce(item)
            if candidate is None:
                logger.debug(f"Skipping malformed Q&A candidate: {item!r}"[:120])
                continue
            if self.scorer.score(expanded.expanded, candidate.question).matched:
                logger.info(f"Curated answer matched: '{candidate.question[:60]}...'")
                return ClassificationResult(
                    admitted=True,
                    reason=decision.reason,
                    language=language,
                    expanded_query=expanded.expanded,
                    curated_answer=candidate.answer,
                    matched_question=candidate.question
                )

        return ClassificationResult(
            admitted=True,
            reason=decision.reason,
            language=language,
            expanded_query=expanded.expanded
        )


# Singleton instance
orchestrator = RetrievalOrchestrator(gate=AdmissionGate(ProviderChain.from_settings()))


async def classify_and_prepare(
    message: Union[str, Message],
    candidates: Optional[Iterable[Any]] = None
) -> ClassificationResult:
    return await orchestrator.classify_and_prepare(message, candidates)
