"""
Scope Filter
============
Flag queries that are clearly unrelated to the company (weather, sports,
movies ...). Company vocabulary anywhere in the query keeps it in scope.
"""

import logging
import re

logger = logging.getLogger(__name__)

OUT_OF_SCOPE_KEYWORDS = [
    "weather", "temperature", "rain", "snow", "forecast",
    "recipe", "cooking", "how to cook",
    "joke", "funny", "humor",
    "sports", "football", "cricket",
    "movie", "film", "actor", "actress", "cinema",
    "music", "song", "singer", "album",
    "politics", "election",
    "stock market", "trading",
    "video game", "gaming",
]

# Leading word boundary only, so plurals ("movies", "songs") still match
OUT_OF_SCOPE_PATTERN = re.compile(r"\b(" + "|".join(re.escape(k) for k in OUT_OF_SCOPE_KEYWORDS) + ")")

IN_SCOPE_KEYWORDS = [
    "mobiloitte", "company", "service", "solution", "ai", "blockchain",
    "technology", "employee", "hr", "leave", "payroll",
]


def is_out_of_scope(normalized_message: str) -> bool:
    """
    True when the message has an off-topic keyword and no company keyword.

    Args:
        normalized_message: Lowercased, whitespace-collapsed message
    """
    if not normalized_message:
        return False

    text = normalized_message.lower()
    if not OUT_OF_SCOPE_PATTERN.search(text):
        return False

    words = set(re.findall(r"\w+", text))
    # Short keywords ("ai", "hr") must be whole words, longer ones may be substrings
    has_company_keyword = any(
        (keyword in words) if len(keyword) <= 2 else (keyword in text)
        for keyword in IN_SCOPE_KEYWORDS
    )
    if has_company_keyword:
        logger.debug(f"Off-topic keyword overridden by company vocabulary: '{text[:50]}'")
        return False

    return True
