"""
Embedding Service
=================
Sentence-transformers embeddings for the document vector store
"""

from typing import List, Optional
from sentence_transformers import SentenceTransformer
import logging
import os

from mobiya.config import settings

logger = logging.getLogger(__name__)


class EmbeddingService:
    """
    Singleton service for generating text embeddings.

    Loads the SentenceTransformer model lazily from settings.embedding_model
    and returns normalized vectors so cosine distance in Chroma is comparable
    across queries.
    """

    _instance: Optional['EmbeddingService'] = None
    _model: Optional[SentenceTransformer] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def initialize(self):
        """Load the embedding model, preferring a cached copy"""
        if self._model is not None:
            return

        cache_dir = os.environ.get("HF_HOME") or os.path.join("data", "hf_cache")
        os.makedirs(cache_dir, exist_ok=True)

        logger.info(f"Loading embedding model: {settings.embedding_model} (cache: {cache_dir})")
        try:
            self._model = SentenceTransformer(settings.embedding_model, cache_folder=cache_dir)
        except Exception as e:
            logger.error(f"Failed to load embedding model '{settings.embedding_model}': {e}")
            raise
        logger.info(f"Embedding model loaded: {settings.embedding_model}")

    @property
    def model(self) -> SentenceTransformer:
        """Get the loaded model"""
        if self._model is None:
            self.initialize()
        return self._model

    def embed_text(self, text: str) -> List[float]:
        """Embed a single query or passage"""
        embedding = self.model.encode(
            text,
            show_progress_bar=False,
            normalize_embeddings=True
        )
        return embedding.tolist()


# Singleton instance
embedding_service = EmbeddingService()
