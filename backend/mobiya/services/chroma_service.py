"""
ChromaDB Service
================
Vector search over document chunks, filtered by audience
"""

from typing import List, Dict, Any, Optional
import chromadb
from chromadb.config import Settings as ChromaSettings

from mobiya.config import settings
from mobiya.services.embedding_service import embedding_service

AUDIENCE_SCOPES = {
    "public": ["public"],
    "employee": ["public", "employee"],
}


def audience_filter(audience: str) -> Dict[str, Any]:
    """Chroma `where` clause for the documents `audience` may read"""
    scopes = AUDIENCE_SCOPES.get(audience, AUDIENCE_SCOPES["public"])
    if len(scopes) == 1:
        return {"audience": scopes[0]}
    return {"audience": {"$in": scopes}}


class ChromaService:
    """
    Read side of the document vector store.

    The collection is built by a separate ingestion process; this service only
    opens it and queries it.
    """

    _instance: Optional['ChromaService'] = None
    _client: Optional[chromadb.PersistentClient] = None
    _collection = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def initialize(self):
        """Open the persistent client and collection"""
        if self._client is None:
            self._client = chromadb.PersistentClient(
                path=settings.chroma_persist_dir,
                settings=ChromaSettings(anonymized_telemetry=False)
            )
            self._collection = self._client.get_or_create_collection(
                name=settings.chroma_collection_name,
                metadata={"hnsw:space": "cosine"}
            )

    @property
    def collection(self):
        """Get the ChromaDB collection"""
        if self._collection is None:
            self.initialize()
        return self._collection

    def query(
        self,
        query_text: str,
        audience: str = "public",
        n_results: int = 10
    ) -> List[Dict[str, Any]]:
        """
        Return the chunks closest to `query_text` that `audience` may read.

        Returns:
            List of dicts with 'id', 'text', 'metadata' and 'score'
            (1 - cosine distance), best first
        """
        query_embedding = embedding_service.embed_text(query_text)

        results = self.collection.query(
            query_embeddings=[query_embedding],
            n_results=n_results,
            where=audience_filter(audience),
            include=["documents", "metadatas", "distances"]
        )

        documents = results["documents"][0] if results["documents"] else []
        metadatas = results["metadatas"][0] if results["metadatas"] else []
        distances = results["distances"][0] if results["distances"] else []
        ids = results["ids"][0] if results["ids"] else []

        return [
            {
                "id": ids[i],
                "text": documents[i],
                "metadata": metadatas[i] or {},
                "score": 1.0 - distances[i],
            }
            for i in range(len(documents))
        ]

    def get_count(self) -> int:
        """Get total number of chunks in collection"""
        return self.collection.count()


# Singleton instance
chroma_service = ChromaService()
