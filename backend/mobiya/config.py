from typing import List

from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    # ════════════════════════════════════════
    # Brand and Query Expansion
    # ════════════════════════════════════════
    brand_name: str = Field(
        default="Mobiloitte",
        description="Canonical company name appended to ambiguous queries"
    )
    brand_extra_typos: List[str] = Field(
        default=["mobiloite", "mobiloittee"],
        description="Known misspellings on top of the generated single-character-drop variants"
    )

    # ════════════════════════════════════════
    # Detection Providers
    # ════════════════════════════════════════
    profanity_providers: List[str] = Field(
        default=["better_profanity", "glin_profanity", "profanity_hindi"],
        description="Profanity provider modules, consulted in this order"
    )
    language_provider: str = Field(
        default="langdetect",
        description="Language identification provider module"
    )
    provider_timeout_seconds: float = Field(
        default=2.0,
        description="Upper bound for a single provider call before it counts as unavailable"
    )

    # ════════════════════════════════════════
    # Admission Policy
    # ════════════════════════════════════════
    reject_unsupported_languages: bool = Field(
        default=False,
        description="Reject admitted text whose detected language is not supported"
    )
    supported_languages: List[str] = Field(
        default=["en", "hi"],
        description="Language codes accepted when reject_unsupported_languages is on"
    )

    # ════════════════════════════════════════
    # LLM and Models
    # ════════════════════════════════════════
    llm_model: str = Field(
        default="llama-3.1-8b-instant",
        description="Groq model used for answer synthesis"
    )
    llm_temperature: float = Field(
        default=0.3,
        description="Sampling temperature for answer synthesis"
    )
    llm_max_tokens: int = Field(
        default=1000,
        description="Maximum tokens in a synthesized answer"
    )
    embedding_model: str = Field(
        default="paraphrase-multilingual-MiniLM-L12-v2",
        description="SentenceTransformer embedding model"
    )

    # ════════════════════════════════════════
    # API Configuration
    # ════════════════════════════════════════
    groq_api_key: str = Field(
        default="",
        description="Groq API key for LLM access"
    )
    api_secret_key: str = Field(
        default="",
        description="Key for public (client) callers"
    )
    employee_api_key: str = Field(
        default="",
        description="Key for employee callers; empty disables employee access"
    )
    cors_origins: str = Field(
        default="http://localhost:3000",
        description="CORS origins"
    )

    # ════════════════════════════════════════
    # Database and Storage
    # ════════════════════════════════════════
    database_url: str = Field(
        default="sqlite+aiosqlite:///./data/mobiya.db",
        description="Database connection URL"
    )
    chroma_persist_dir: str = Field(
        default="./data/chroma_db",
        description="ChromaDB persistence directory"
    )
    chroma_collection_name: str = Field(
        default="mobiloitte_docs",
        description="ChromaDB collection name"
    )

    # ════════════════════════════════════════
    # Retrieval Settings
    # ════════════════════════════════════════
    qa_candidate_limit: int = Field(
        default=200,
        description="Maximum curated Q&A pairs scored per message"
    )
    rag_top_k: int = Field(
        default=10,
        description="Number of chunks requested from the vector store"
    )
    rag_score_threshold: float = Field(
        default=0.6,
        description="Minimum similarity for a chunk to ground an answer"
    )
    rag_clarify_threshold: float = Field(
        default=0.35,
        description="Top score above which a weak result asks for clarification instead of refusing"
    )

    # ════════════════════════════════════════
    # Debug and Logging
    # ════════════════════════════════════════
    debug_mode: bool = Field(
        default=False,
        description="Enable debug logging"
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)"
    )
    log_dir: str = Field(
        default="",
        description="Directory for log files; empty logs to console only"
    )

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

    @property
    def cors_origins_list(self) -> list:
        """Convert comma-separated CORS origins to list"""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


settings = Settings()
