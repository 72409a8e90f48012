"""
Query Expander
==============
Append the canonical company name to queries that refer to the company
generically ("this company", "your organization") or through a misspelling
("mobiloite"), so lexical matching sees the brand token.

The expanded text is used for matching and retrieval only; the user never
sees it.
"""

import logging
from typing import Iterable, List, Optional, Set

from mobiya.config import settings
from mobiya.models.domain import ExpandedQuery

logger = logging.getLogger(__name__)

GENERIC_COMPANY_CONTEXTS = [
    "this company", "the company", "your company",
    "this organization", "your organization",
    "is company", "of company", "about company",
]


def single_drop_variants(word: str) -> Set[str]:
    """All strings obtained by removing exactly one character from `word`"""
    word = word.lower()
    return {word[:i] + word[i + 1:] for i in range(len(word))} - {word}


class QueryExpander:
    """
    Deterministic brand expansion.

    Signals (matched on the lowercased message):
    (a) official brand name present
    (b) a known typo of the brand present
    (c) a generic company referent present

    When (a) is absent and (b) or (c) holds, " (<Brand>)" is appended.
    Running the expander on its own output is a no-op because (a) then holds.
    """

    def __init__(
        self,
        brand_name: Optional[str] = None,
        extra_typos: Optional[Iterable[str]] = None,
        generic_contexts: Optional[List[str]] = None
    ):
        self.brand_name = brand_name or settings.brand_name
        self.brand_lower = self.brand_name.lower()
        self.typos = single_drop_variants(self.brand_name)
        self.typos.update(
            t.lower() for t in (settings.brand_extra_typos if extra_typos is None else extra_typos)
        )
        self.typos.discard(self.brand_lower)
        self.generic_contexts = generic_contexts or GENERIC_COMPANY_CONTEXTS

    def has_official_name(self, text: str) -> bool:
        return self.brand_lower in text.lower()

    def has_typo(self, text: str) -> bool:
        lowered = text.lower()
        return any(typo in lowered for typo in self.typos)

    def has_generic_reference(self, text: str) -> bool:
        lowered = text.lower()
        return any(context in lowered for context in self.generic_contexts)

    def expand(self, message: str) -> ExpandedQuery:
        """
        Expand `message` if it refers to the company without naming it.

        Args:
            message: Admitted user message

        Returns:
            ExpandedQuery; `expanded` keeps the original casing and only
            ever appends text
        """
        if not self.has_official_name(message) and (
            self.has_typo(message) or self.has_generic_reference(message)
        ):
            expanded = f"{message} ({self.brand_name})"
            logger.debug(f"Query expanded: '{message[:50]}' -> '{expanded[:70]}'")
            return ExpandedQuery(original=message, expanded=expanded, was_expanded=True)

        return ExpandedQuery(original=message, expanded=message, was_expanded=False)


# Singleton instance
query_expander = QueryExpander()


def expand_query(message: str) -> str:
    """Expanded text for `message` using the configured brand"""
    return query_expander.expand(message).expanded
