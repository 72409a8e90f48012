"""
Transcript Store
================
Fire-and-forget audit trail of handled chat messages.

A failed write is logged and dropped; it never changes the chat response.
"""

import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from mobiya.models.database import ChatLog
from mobiya.models.domain import ClassificationResult

logger = logging.getLogger(__name__)


class TranscriptStore:
    """Writes one ChatLog row per handled message"""

    async def record(
        self,
        db: AsyncSession,
        message: str,
        result: ClassificationResult,
        context_type: str,
        audience: str = "public",
        session_id: Optional[str] = None,
        latency_ms: Optional[int] = None
    ) -> bool:
        """
        Persist the outcome of one chat turn.

        Returns:
            True if the row was committed, False if the write failed
        """
        entry = ChatLog(
            session_id=session_id,
            audience=audience,
            message=message,
            admitted=result.admitted,
            reason=result.reason.value,
            language=result.language,
            expanded_query=result.expanded_query or None,
            context_type=context_type,
            matched_question=result.matched_question,
            latency_ms=latency_ms
        )

        try:
            db.add(entry)
            await db.commit()
        except SQLAlchemyError as e:
            logger.warning(f"Failed to persist chat log: {e}")
            await db.rollback()
            return False

        logger.info(
            f"[chat_trace] session={session_id} audience={audience} "
            f"type={context_type} reason={result.reason.value} latency_ms={latency_ms}"
        )
        return True


# Singleton instance
transcript_store = TranscriptStore()
