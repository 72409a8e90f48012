"""
Admission Gate
==============
Decide whether a message may enter the retrieval pipeline.

Checks:
1. Gibberish heuristic (pure, no provider)
2. Profanity provider chain
3. Optional language policy

The gibberish whitelist is evaluated before any ratio heuristic and returns
immediately on a hit, so domain vocabulary with odd consonant clusters is
never rejected.
"""

import re
import logging
from typing import Optional

from mobiya.config import settings
from mobiya.models.domain import AdmissionDecision, AdmissionReason
from mobiya.services.provider_chain import UNDETERMINED, ProviderChain

logger = logging.getLogger(__name__)

COMMON_SHORT_WORDS = {"hi", "ok", "no", "yes", "a", "i"}

LEGITIMATE_QUESTION_PATTERNS = [
    re.compile(
        r"^(how|what|when|where|why|who|which|whom|can|could|should|would|do|does|did|"
        r"is|are|was|were|will|tell|explain|describe|share|show)\s+",
        re.IGNORECASE
    ),
    re.compile(r"^(what\s+is|what\s+are|how\s+does|how\s+do|how\s+can|how\s+to|tell\s+me|explain|describe)", re.IGNORECASE),
    re.compile(r"^(who|what|which|whom)\s+(is|are|was|were|did|does|do)", re.IGNORECASE),
]

# Matched as substrings of the lowercased text
PROFESSIONAL_KEYWORDS = [
    # HR
    "leave", "attendance", "payroll", "salary", "holiday", "hr", "employee", "benefits",
    "policy", "procedure", "process", "appraisal", "onboarding", "resignation", "exit",
    "casual", "sick", "earned", "privilege", "maternity", "paternity", "compensatory",
    "working hours", "shift", "work from home", "wfh", "hybrid", "flexible",
    "payslip", "ctc", "pf", "esi", "tds", "deduction", "allowance", "hra",
    "holiday calendar", "weekly off", "helpdesk", "people partner",
    # Company
    "service", "solution", "company", "mobiloitte", "client", "project", "team",
    "technology", "ai", "blockchain", "development", "integration",
    # Leadership
    "founder", "founders", "director", "directors", "ceo", "chairman", "leadership",
    "started", "founded", "established", "created", "began", "incorporated",
]

VOWELS = set("aeiou")
CONSONANTS = set("bcdfghjklmnpqrstvwxyz")


def _alpha_ratio(text: str) -> float:
    return sum(1 for ch in text if ch.isascii() and ch.isalpha()) / len(text)


def _is_whitelisted(text: str) -> bool:
    """True for interrogative openers or any professional keyword"""
    if any(pattern.search(text) for pattern in LEGITIMATE_QUESTION_PATTERNS):
        return True
    lowered = text.lower()
    return any(keyword in lowered for keyword in PROFESSIONAL_KEYWORDS)


def is_gibberish(text: Optional[str]) -> bool:
    """
    Heuristic gibberish check.

    Order matters: the whitelist is consulted before the character-ratio and
    vowel heuristics and short-circuits them.

    Args:
        text: Raw user message

    Returns:
        True when the text should be rejected as gibberish
    """
    if not text:
        return True

    trimmed = text.strip()
    if not trimmed:
        return True

    if len(trimmed) < 3:
        if trimmed.lower() in COMMON_SHORT_WORDS:
            return False
        if _alpha_ratio(trimmed) < 0.5:
            return True
        # Too short to carry meaning unless it is domain vocabulary ("hr", "pf")
        return not _is_whitelisted(trimmed)

    if _is_whitelisted(trimmed):
        return False

    if _alpha_ratio(trimmed) < 0.5:
        return True

    if not re.search(r"\s", trimmed) and len(trimmed) > 5:
        lowered = trimmed.lower()
        vowels = sum(1 for ch in lowered if ch in VOWELS)
        consonants = sum(1 for ch in lowered if ch in CONSONANTS)
        if vowels == 0 or consonants / vowels > 5:
            return True

    return False


class AdmissionGate:
    """
    Combine the gibberish heuristic, the profanity chain and the language
    policy into one decision.

    Reason priority is fixed: GIBBERISH, then PROFANITY, then
    UNSUPPORTED_LANGUAGE. Profanity is checked on gibberish text too, so a
    profane-gibberish message shows up in the logs even though GIBBERISH is
    the reported reason.
    """

    def __init__(
        self,
        providers: ProviderChain,
        reject_unsupported_languages: Optional[bool] = None,
        supported_languages: Optional[list] = None
    ):
        self.providers = providers
        self.reject_unsupported_languages = (
            settings.reject_unsupported_languages
            if reject_unsupported_languages is None
            else reject_unsupported_languages
        )
        self.supported_languages = set(
            settings.supported_languages if supported_languages is None else supported_languages
        )

    async def evaluate(self, text: str) -> AdmissionDecision:
        """
        Classify `text` as admissible or not.

        Returns:
            AdmissionDecision with the first triggered reason
        """
        gibberish = is_gibberish(text)
        profane = await self.providers.contains_profanity(text or "")

        if gibberish:
            if profane:
                logger.info(f"Gibberish message also flagged as profane: '{text[:50]}...'")
            logger.info(f"Gibberish detected: '{(text or '')[:50]}'")
            return AdmissionDecision(False, AdmissionReason.GIBBERISH, UNDETERMINED)

        if profane:
            logger.info(f"Profanity detected: '{text[:50]}...'")
            return AdmissionDecision(False, AdmissionReason.PROFANITY, UNDETERMINED)

        language = await self.providers.detect_language(text)

        if (
            self.reject_unsupported_languages
            and language != UNDETERMINED
            and language not in self.supported_languages
        ):
            logger.info(f"Unsupported language '{language}' for message: '{text[:50]}'")
            return AdmissionDecision(False, AdmissionReason.UNSUPPORTED_LANGUAGE, language)

        return AdmissionDecision(True, AdmissionReason.OK, language)
