"""
RAG Service
===========
Retrieval side of the chat pipeline.
Searches the vector store with the expanded query and grades the chunks
against the confidence thresholds.
"""

import logging
from typing import List, Dict, Any, Optional

from mobiya.config import settings
from mobiya.services.chroma_service import chroma_service, AUDIENCE_SCOPES

logger = logging.getLogger(__name__)


class RAGService:
    """
    Service for the retrieval half of RAG
    """

    def search_documents(
        self,
        expanded_query: str,
        audience: str = "public",
        limit: Optional[int] = None
    ) -> List[Dict[str, Any]]:
        """
        Retrieve chunks visible to `audience`

        Args:
            expanded_query: Query after brand expansion
            audience: 'public' or 'employee'
            limit: Number of results (default from settings)

        Returns:
            Chunks as dicts with 'text', 'source', 'score' and 'metadata',
            best first
        """
        if limit is None:
            limit = settings.rag_top_k

        results = chroma_service.query(expanded_query, audience=audience, n_results=limit)

        allowed = AUDIENCE_SCOPES.get(audience, AUDIENCE_SCOPES["public"])
        chunks = []
        for doc in results:
            metadata = doc["metadata"]
            # Second guard in case the collection holds untagged chunks
            if metadata.get("audience", "public") not in allowed:
                continue
            chunks.append({
                "text": doc["text"],
                "source": metadata.get("source", ""),
                "score": doc["score"],
                "metadata": metadata
            })

        chunks.sort(key=lambda c: c["score"], reverse=True)
        logger.debug(f"Vector search returned {len(chunks)} chunks for audience={audience}")
        return chunks

    def grade(self, chunks: List[Dict[str, Any]]) -> str:
        """
        Classify a result set by its top score

        Returns:
            'answer' when the best chunk clears rag_score_threshold,
            'clarify' when it only clears rag_clarify_threshold,
            'no_data' otherwise
        """
        if not chunks:
            return "no_data"
        top = chunks[0]["score"]
        if top > settings.rag_score_threshold:
            return "answer"
        if top >= settings.rag_clarify_threshold:
            return "clarify"
        return "no_data"

    def filter_chunks(self, chunks: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Chunks strictly above the answer threshold"""
        return [c for c in chunks if c["score"] > settings.rag_score_threshold]

    def build_context(self, chunks: List[Dict[str, Any]]) -> str:
        """
        Build context string from retrieved chunks

        Returns:
            Numbered sources joined for the LLM prompt
        """
        if not chunks:
            return "No relevant information found in the knowledge base."

        context_parts = []
        for i, chunk in enumerate(chunks, 1):
            source = chunk.get("source") or "unknown"
            context_parts.append(f"[Source {i}] (source={source}, score={chunk['score']:.2f})\n{chunk['text']}")

        return "\n\n".join(context_parts)

    def get_sources(self, chunks: List[Dict[str, Any]]) -> List[str]:
        """Unique sources in rank order"""
        sources = []
        for chunk in chunks:
            source = chunk.get("source", "")
            if source and source not in sources:
                sources.append(source)
        return sources


# Singleton instance
rag_service = RAGService()
