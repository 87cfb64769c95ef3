import re
from typing import Optional

# Naive tag removal, entities are left as-is
TAG_PATTERN = re.compile(r'<[^>]*>')

ELLIPSIS = "…"


def strip_html(value: Optional[str]) -> str:
    """Remove every <...> span and trim"""
    if not value or not value.strip():
        return ""
    return TAG_PATTERN.sub("", value).strip()


def take_words(value: Optional[str], max_words: int) -> str:
    """
    Keep the first ``max_words`` space-separated words.

    Returns the input unchanged when it is short enough, otherwise the
    truncated words joined by single spaces with an ellipsis appended.
    """
    if not value or not value.strip():
        return ""
    words = [word for word in value.split(" ") if word]
    if len(words) <= max_words:
        return value
    return " ".join(words[:max_words]) + ELLIPSIS


def contains_ignore_case(haystack: Optional[str], needle: str) -> bool:
    if not haystack:
        return False
    return needle.casefold() in haystack.casefold()
