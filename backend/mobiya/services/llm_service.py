"""
LLM Service
===========
Groq API integration for grounded answer synthesis
"""

import logging
from typing import List, Dict, Any, Optional
from groq import AsyncGroq

from mobiya.config import settings
from mobiya.services.rag_service import rag_service

logger = logging.getLogger(__name__)

NO_DATA_RESPONSE = (
    "I couldn't find this information in our knowledge base. Could you rephrase your "
    "question or ask about {brand}'s services, AI solutions, or company information?"
)

INSUFFICIENT_INFO_RESPONSE = (
    "I don't have enough verified information from the provided sources to answer this question."
)


class LLMService:
    """
    Service for interacting with Groq LLM API
    """

    _instance: Optional['LLMService'] = None
    _async_client: Optional[AsyncGroq] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    @property
    def is_configured(self) -> bool:
        return bool(settings.groq_api_key)

    @property
    def async_client(self) -> AsyncGroq:
        """Get async Groq client"""
        if self._async_client is None:
            self._async_client = AsyncGroq(api_key=settings.groq_api_key)
        return self._async_client

    def build_system_prompt(self, language: str = "en") -> str:
        """
        Build the system prompt for document-grounded answers.

        Args:
            language: Detected language code of the user's message
        """
        if language == "hi":
            lang_instruction = (
                "Respond in Hinglish (a natural mix of Hindi and English) "
                "with a professional but accessible tone."
            )
        else:
            lang_instruction = "Respond ONLY in clear, professional English."

        return f"""You are {settings.brand_name} AI, a helpful assistant for {settings.brand_name} Group.
Answer questions using ONLY the retrieved document chunks you are given.

LANGUAGE RULE:
- {lang_instruction}

RESPONSE RULES:
1. Keep responses short and readable (3-5 lines per section)
2. Use bullet points (•) for lists, 3-6 items at most
3. Answer ONLY from the provided chunks and never make up information
4. If the chunks do not contain the answer, reply exactly: "{INSUFFICIENT_INFO_RESPONSE}"
5. Add inline citations [S1], [S2] referring to the numbered sources"""

    def build_user_prompt(self, question: str, chunks: List[Dict[str, Any]]) -> str:
        context = rag_service.build_context(chunks)
        return f"""Question: {question}

Retrieved Document Chunks:
{context}

Answer using ONLY the information from the chunks above:"""

    def fallback_response(self, chunks: List[Dict[str, Any]]) -> str:
        """Answer used when Groq is not configured or the call fails"""
        if chunks and chunks[0].get("text"):
            return f"Based on the information available: {chunks[0]['text'][:500]}..."
        return NO_DATA_RESPONSE.format(brand=settings.brand_name)

    async def generate_answer(
        self,
        question: str,
        chunks: List[Dict[str, Any]],
        language: str = "en"
    ) -> str:
        """
        Generate a grounded answer from retrieved chunks

        Args:
            question: Expanded user query
            chunks: Chunks that cleared the answer threshold
            language: Detected language of the user's message

        Returns:
            Answer text; the fallback text if the LLM is unavailable
        """
        if not self.is_configured:
            logger.warning("GROQ_API_KEY not set, using fallback response")
            return self.fallback_response(chunks)

        messages = [
            {"role": "system", "content": self.build_system_prompt(language)},
            {"role": "user", "content": self.build_user_prompt(question, chunks)}
        ]

        try:
            response = await self.async_client.chat.completions.create(
                model=settings.llm_model,
                messages=messages,
                max_tokens=settings.llm_max_tokens,
                temperature=settings.llm_temperature
            )
        except Exception as e:
            logger.error(f"Groq API error, using fallback: {e}")
            return self.fallback_response(chunks)

        content = response.choices[0].message.content or ""
        return content.strip() or self.fallback_response(chunks)


# Singleton instance
llm_service = LLMService()
