import logging
from typing import List, Optional

from ..core.content import ContentCache, ContentNode, POLICY_CARD, CATEGORY_CARD
from ..utils.text import strip_html, take_words, contains_ignore_case

logger = logging.getLogger("handbook.search")

MIN_QUERY_LENGTH = 2
DEFAULT_TAKE = 20
MAX_TAKE = 50
DESCRIPTION_WORDS = 40


def clamp_take(take: int) -> int:
    return max(1, min(take, MAX_TAKE))


def is_searchable(query: Optional[str]) -> bool:
    return bool(query) and len(query.strip()) >= MIN_QUERY_LENGTH


def _policy_title(node: ContentNode) -> str:
    return node.field("policyTitle") or node.name


def _category_title(node: ContentNode) -> str:
    return node.field("categoryTitle") or node.name


def _policy_matches(node: ContentNode, query: str) -> bool:
    return (
        contains_ignore_case(_policy_title(node), query)
        or contains_ignore_case(strip_html(node.field("summary")), query)
        or contains_ignore_case(strip_html(node.field("fullPolicyText")), query)
    )


def _category_matches(node: ContentNode, query: str) -> bool:
    return (
        contains_ignore_case(_category_title(node), query)
        or contains_ignore_case(node.field("categoryDescription"), query)
    )


def _policy_result(node: ContentNode) -> dict:
    summary = strip_html(node.field("summary"))
    description = summary or take_words(strip_html(node.field("fullPolicyText")), DESCRIPTION_WORDS)

    # Policies render inside their category page; link there and let the
    # client deep-link with a fragment
    parent = node.parent()
    category_url = parent.url() if parent is not None else None

    return {
        "id": node.id,
        "title": _policy_title(node),
        "description": description,
        "url": category_url or node.url(),
        "categoryUrl": category_url,
        "category": "Policy",
        "type": "policy"
    }


def _category_result(node: ContentNode) -> dict:
    return {
        "title": _category_title(node),
        "description": node.field("categoryDescription") or "",
        "url": node.url(),
        "category": "Category",
        "type": "category"
    }


def search_content(cache: Optional[ContentCache], query: str, take: int = DEFAULT_TAKE) -> List[dict]:
    """
    Substring search over published policy and category cards.

    No ranking: hits come back in tree order, policies before categories,
    at most ``take`` (clamped to 1..50) in total.
    """
    if not is_searchable(query) or cache is None:
        return []

    query = query.strip()
    limit = clamp_take(take)

    policies = []
    categories = []
    for node in cache.all_content():
        kind = node.kind()
        if kind == POLICY_CARD:
            if len(policies) < limit and _policy_matches(node, query):
                policies.append(_policy_result(node))
        elif kind == CATEGORY_CARD:
            if len(categories) < limit and _category_matches(node, query):
                categories.append(_category_result(node))

    results = (policies + categories)[:limit]
    logger.debug("Search %r returned %d results", query, len(results))
    return results
