"""Keyword classification of social posts.

Every function here depends only on the post text, so live and mock posts
with the same content always classify the same way.
"""

from disaster_intel.models.social import Priority, ReportType

PRIORITY_KEYWORDS = [
    (Priority.CRITICAL, ("SOS", "urgent", "immediate", "trapped", "emergency")),
    (Priority.HIGH, ("need", "help", "assistance", "critical")),
    (Priority.MEDIUM, ("volunteer", "shelter", "food", "water")),
]

TYPE_KEYWORDS = [
    (ReportType.NEED, ("need", "help")),
    (ReportType.OFFER, ("shelter", "food", "water")),
    (ReportType.ALERT, ("SOS", "emergency")),
    (ReportType.REQUEST, ("volunteer", "assist")),
    (ReportType.UPDATE, ("restored", "recovery")),
]

KEYWORD_VOCABULARY = (
    "flood", "earthquake", "fire", "shelter", "food", "water", "medical", "rescue", "volunteer",
)


def _contains_any(lowered: str, words: tuple[str, ...]) -> bool:
    return any(word.lower() in lowered for word in words)


def analyze_priority(content: str) -> Priority:
    lowered = (content or "").lower()
    for priority, words in PRIORITY_KEYWORDS:
        if _contains_any(lowered, words):
            return priority
    return Priority.LOW


def classify_report_type(content: str) -> ReportType:
    lowered = (content or "").lower()
    for report_type, words in TYPE_KEYWORDS:
        if _contains_any(lowered, words):
            return report_type
    return ReportType.GENERAL


def extract_keywords(content: str) -> frozenset[str]:
    lowered = (content or "").lower()
    return frozenset(word for word in KEYWORD_VOCABULARY if word in lowered)
