"""
Conversational Handler
======================
Greetings, thanks, acknowledgements and farewells get a canned reply instead
of a retrieval round-trip.
"""

import re
import random
from typing import Optional

from mobiya.services.overlap_scorer import normalize_text

GREETING_PATTERNS = [
    r"^(hi|hello|hey|hii|hiii|hiiii|hiya|heya)$",
    r"^(howdy|hola|namaste)$",
    r"^(how\s+are\s+you\??)$",
    r"^(how\s+r\s+u\??)$",
    r"^(how\s+are\s+you\s+doing\??)$",
    r"^(how\s+do\s+you\s+do\??)$",
]

THANKS_PATTERNS = [
    r"\b(thanks?|thank\s*you|thankyou|thank\s*u|thanku|thx|ty|grateful|appreciate(d)?)\b",
    r"\b(thanks?\s*(a\s+lot|so\s+much|very\s+much))\b",
    r"\b(much\s+appreciated|i\s+appreciate)\b",
]

OK_PATTERNS = [
    r"^(ok|okay|okk+|oky|okie|okies|okayy)[.!]?$",
    r"^(sure|sounds\s+good|alright|all\s+right)[.!]?$",
    r"^(yeah|yup|yess*|fine|great|cool)[.!]?$",
]

GOODBYE_PATTERNS = [
    r"\b(bye|good\s*bye|goodbye|bye\s+bye|cya|see\s+ya|see\s+you|see\s+you\s+soon|farewell)\b",
    r"\b(have\s+a\s+(good|nice|great)\s+(day|evening|night))\b",
    r"\b(take\s+care|ttyl|talk\s+to\s+you\s+later|see\s+ya\s+later)\b",
]

RESPONSES = {
    "greeting": [
        "Hi! 👋 I am Mobiya. How can I help you today?",
        "Hello! 👋 I am Mobiya. Ask me anything about Mobiloitte's services, AI solutions, or company information.",
        "Hey there! 👋 I am Mobiya. What would you like to know about Mobiloitte?",
    ],
    "thanks": [
        "You're welcome! Feel free to ask if you need anything else.",
        "Happy to help! Let me know if you have more questions.",
        "Glad I could help! Feel free to reach out anytime.",
    ],
    "ok": [
        "Sure 👍",
        "Got it! Let me know if you need anything.",
        "Sounds good 👍",
    ],
    "goodbye": [
        "Goodbye! Have a great day! 👋",
        "See you later! Feel free to come back if you have more questions.",
        "Goodbye! Thanks for chatting with Mobiloitte AI.",
    ],
}


def detect_conversational_intent(message: str) -> Optional[str]:
    """
    Detect small talk.

    Returns:
        'greeting', 'thanks', 'ok', 'goodbye' or None
    """
    text = normalize_text(message)
    if not text:
        return None

    if any(re.search(p, text) for p in GREETING_PATTERNS):
        return "greeting"
    if any(re.search(p, text) for p in THANKS_PATTERNS):
        return "thanks"
    if any(re.search(p, text) for p in OK_PATTERNS):
        return "ok"
    if any(re.search(p, text) for p in GOODBYE_PATTERNS):
        return "goodbye"
    return None


def get_conversational_response(intent: str) -> str:
    """Pick one of the canned replies for `intent`"""
    options = RESPONSES.get(intent) or RESPONSES["greeting"]
    return random.choice(options)
