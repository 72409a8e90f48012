"""
Database Models and Session Management
======================================
SQLite with async support using SQLAlchemy 2.0
"""

import hashlib
import re
import uuid
from datetime import datetime
from pathlib import Path
from typing import AsyncGenerator, List, Optional

from sqlalchemy import Column, String, Text, DateTime, Integer, Boolean, Index
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase

from mobiya.config import settings


# ============================================
# Base Model
# ============================================

class Base(DeclarativeBase):
    """SQLAlchemy declarative base"""
    pass


def normalize_question(question: str) -> str:
    """Lowercase, collapse whitespace and drop trailing punctuation"""
    return re.sub(r"\s+", " ", question.strip().lower()).rstrip("?.! ")


def question_hash(normalized_question: str) -> str:
    """Stable hash used to deduplicate curated questions"""
    return hashlib.sha1(normalized_question.encode("utf-8")).hexdigest()


# ============================================
# Models
# ============================================

class QAPair(Base):
    """Curated question/answer pair served without retrieval"""
    __tablename__ = "qa_pairs"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    question = Column(Text, nullable=False)
    answer = Column(Text, nullable=False)
    normalized_question = Column(Text, nullable=False)
    question_hash = Column(String(40), nullable=False)
    audience = Column(String(20), nullable=False, default="public")  # 'public', 'employee'
    category = Column(String(100), nullable=True)
    tags = Column(String(255), nullable=True)  # comma-separated
    source_id = Column(String(255), nullable=False, default="manual")
    language = Column(String(10), nullable=False, default="en")
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        Index("idx_qa_audience", "audience"),
        Index("idx_qa_hash", "question_hash"),
    )

    @classmethod
    def build(
        cls,
        question: str,
        answer: str,
        audience: str = "public",
        category: Optional[str] = None,
        tags: Optional[List[str]] = None,
        source_id: str = "manual",
        language: str = "en"
    ) -> "QAPair":
        """Create a pair with its normalized question and hash filled in"""
        normalized = normalize_question(question)
        return cls(
            question=question.strip(),
            answer=answer.strip(),
            normalized_question=normalized,
            question_hash=question_hash(normalized),
            audience=audience,
            category=category,
            tags=",".join(t.strip() for t in tags if t.strip()) if tags else None,
            source_id=source_id,
            language=language
        )

    @property
    def tag_list(self) -> List[str]:
        return [t for t in (self.tags or "").split(",") if t]

    def __repr__(self):
        return f"<QAPair(id={self.id}, question={self.question[:40]!r})>"


class ChatLog(Base):
    """One handled chat message and its outcome, kept for audit"""
    __tablename__ = "chat_logs"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    session_id = Column(String(64), nullable=True)
    audience = Column(String(20), nullable=False, default="public")
    message = Column(Text, nullable=False)
    admitted = Column(Boolean, nullable=False)
    reason = Column(String(32), nullable=False)
    language = Column(String(10), nullable=False, default="und")
    expanded_query = Column(Text, nullable=True)
    context_type = Column(String(32), nullable=False)
    matched_question = Column(Text, nullable=True)
    latency_ms = Column(Integer, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    __table_args__ = (
        Index("idx_chat_logs_session", "session_id"),
        Index("idx_chat_logs_created", "created_at"),
    )

    def __repr__(self):
        return f"<ChatLog(id={self.id}, context_type={self.context_type})>"


# ============================================
# Database Engine & Session
# ============================================

# Create async engine
engine = create_async_engine(
    settings.database_url,
    echo=False,  # Set to True for SQL debugging
    future=True
)

# Create async session factory
async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency to get database session
    Usage in FastAPI routes:
        async def my_route(db: AsyncSession = Depends(get_db)):
    Commits on success, rolls back on exceptions.
    """
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def init_db():
    """Initialize database tables if they do not exist"""
    database = engine.url.database
    if engine.url.get_backend_name() == "sqlite" and database and database != ":memory:":
        Path(database).parent.mkdir(parents=True, exist_ok=True)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
