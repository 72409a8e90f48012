"""
Lexical Overlap Scorer
======================
Decide whether a (possibly expanded) query and a curated question share
enough vocabulary to serve the curated answer without retrieval.

Tokens are normalized (case, punctuation, possessives, stopwords) and then
mapped to concepts: words of one synonym group ("hq", "headquarters",
"office") share a concept, and every spelling of the brand ("Mobiloitte's",
"mobiloite", "mobilo") is one brand concept. Overlap counts shared concepts,
so a large synonym group or a brand mention cannot inflate the score alone.
"""

import re
import logging
from typing import Dict, List, Optional, Set

from mobiya.config import settings
from mobiya.models.domain import OverlapResult
from mobiya.services.query_expander import single_drop_variants

logger = logging.getLogger(__name__)

STOPWORDS = {
    "what", "is", "are", "the", "a", "an", "of", "for", "in", "on",
    "and", "or", "to", "about", "this", "that", "does", "do", "you",
    "me", "my", "your", "please", "tell", "explain", "describe",
    "how", "can", "could", "would", "should", "when", "where", "why", "who",
}

# If the query uses one of these, the candidate must share its concept
CORE_KEYWORDS = {
    "cin", "number", "corporate", "identification",
    "registered", "address", "office", "location",
    "contact", "phone", "email",
    "founder", "founders", "director", "directors",
    "services", "core", "strengths", "key",
    "industries", "sectors", "clients",
}

SYNONYM_GROUPS: Dict[str, List[str]] = {
    "service": ["service", "services", "provide", "offering", "offerings"],
    "information": ["information", "info", "details", "detail", "data"],
    "company": ["company", "organization", "organisation", "firm", "business"],
    "job": ["job", "jobs", "work", "career", "careers", "opening", "openings"],
    "hq": ["hq", "headquarters", "location", "office", "address"],
    "founder": ["founder", "founders", "director", "directors"],
}

PUNCTUATION = re.compile(r"[^\w\s']")
CURLY_APOSTROPHES = str.maketrans({"\u2019": "'", "\u2018": "'"})
POSSESSIVE = re.compile(r"'s\b")


def normalize_text(text: Optional[str]) -> str:
    """Trim, collapse whitespace, lowercase and fold curly apostrophes"""
    if not text:
        return ""
    return re.sub(r"\s+", " ", text.strip()).lower().translate(CURLY_APOSTROPHES)


class OverlapScorer:
    """
    Concept-set overlap with synonym and brand normalization.

    A candidate matches when it shares at least `min_overlap` concepts with
    the query. If the query carries a core keyword (contact, address,
    founder ...), the candidate must also share that keyword's concept and
    one more concept than usual is required.
    """

    def __init__(self, brand_name: Optional[str] = None, min_overlap: int = 2):
        brand_lower = (brand_name or settings.brand_name).lower()
        self.min_overlap = min_overlap
        self.brand_concept = f"brand:{brand_lower}"
        self.brand_prefix = brand_lower[:6]
        self.brand_forms = single_drop_variants(brand_lower)
        self.brand_forms.update(t.lower() for t in settings.brand_extra_typos)
        self.brand_forms.add(brand_lower)

        self.word_concepts: Dict[str, Set[str]] = {}
        for group_name, words in SYNONYM_GROUPS.items():
            for word in words:
                self.word_concepts.setdefault(word, set()).add(f"syn:{group_name}")

    def tokenize(self, text: Optional[str]) -> List[str]:
        """Normalized tokens without punctuation, possessives, stopwords or single characters"""
        cleaned = POSSESSIVE.sub("", normalize_text(text))
        cleaned = PUNCTUATION.sub(" ", cleaned).replace("'", "")
        return [t for t in cleaned.split() if len(t) > 1 and t not in STOPWORDS]

    def is_brand_token(self, token: str) -> bool:
        return token in self.brand_forms or token.startswith(self.brand_prefix)

    def token_concepts(self, token: str) -> Set[str]:
        if self.is_brand_token(token):
            return {self.brand_concept}
        return self.word_concepts.get(token, {token})

    def concepts(self, text: Optional[str]) -> Set[str]:
        """Concept set of `text`"""
        result: Set[str] = set()
        for token in self.tokenize(text):
            result.update(self.token_concepts(token))
        return result

    def score(self, query: Optional[str], candidate: Optional[str]) -> OverlapResult:
        """
        Judge whether `query` and `candidate` are about the same thing.

        Returns:
            OverlapResult with `matched` set accordingly
        """
        query = query or ""
        candidate = candidate or ""

        query_tokens = self.tokenize(query)
        query_concepts = self.concepts(query)
        candidate_concepts = self.concepts(candidate)
        if not query_concepts or not candidate_concepts:
            return OverlapResult(matched=False, query=query, candidate=candidate)

        core_concepts: Set[str] = set()
        for token in query_tokens:
            if token in CORE_KEYWORDS:
                core_concepts.update(self.token_concepts(token))
        if core_concepts and not core_concepts & candidate_concepts:
            logger.debug(
                f"Overlap rejected: core concepts {sorted(core_concepts)} "
                f"missing from candidate '{candidate[:60]}'"
            )
            return OverlapResult(matched=False, query=query, candidate=candidate)

        shared = query_concepts & candidate_concepts
        required = self.min_overlap + 1 if core_concepts else self.min_overlap
        return OverlapResult(matched=len(shared) >= required, query=query, candidate=candidate)

    def is_related(self, query: Optional[str], candidate: Optional[str]) -> bool:
        """Lenient check: at least one shared concept"""
        return bool(self.concepts(query) & self.concepts(candidate))


# Singleton instance
overlap_scorer = OverlapScorer()


def score_overlap(query: Optional[str], candidate: Optional[str]) -> OverlapResult:
    return overlap_scorer.score(query, candidate)


def has_strong_lexical_overlap(query: Optional[str], candidate: Optional[str]) -> bool:
    return overlap_scorer.score(query, candidate).matched


def has_meaningful_overlap(query: Optional[str], candidate: Optional[str]) -> bool:
    return overlap_scorer.is_related(query, candidate)
