"""
Read-only access to the published content tree.

The CMS owns the content; this service only ever sees a snapshot of it as a
JSON document, either on disk or served over HTTP. Each node looks like::

    {
        "id": 1234,
        "name": "Leave Policy",
        "contentType": "policyCard",
        "url": "/handbook/people/",
        "properties": {"policyTitle": "...", "summary": "<p>...</p>"},
        "children": [...]
    }

The document itself is either a list of root nodes or ``{"roots": [...]}``.
"""

import json
import logging
from pathlib import Path
from typing import Any, Iterator, List, Optional

import httpx

from ..config import settings
from .errors import ContentUnavailableError, ContentTreeError

logger = logging.getLogger("handbook.content")

POLICY_CARD = "policyCard"
CATEGORY_CARD = "HandbookCategoryCard"


class ContentNode:
    """A published content item"""

    def __init__(self, id: int, name: str, content_type: str, url: str,
                 properties: Optional[dict] = None,
                 parent: Optional["ContentNode"] = None):
        self.id = id
        self.name = name
        self._content_type = content_type
        self._url = url
        self._properties = properties or {}
        self._parent = parent
        self._children: List["ContentNode"] = []

    def kind(self) -> str:
        return self._content_type

    def field(self, name: str) -> Optional[str]:
        value = self._properties.get(name)
        if value is None:
            return None
        return value if isinstance(value, str) else str(value)

    def children(self) -> List["ContentNode"]:
        return list(self._children)

    def parent(self) -> Optional["ContentNode"]:
        return self._parent

    def url(self) -> str:
        return self._url

    def descendants_or_self(self) -> Iterator["ContentNode"]:
        """Pre-order walk, document order"""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node._children))

    def __repr__(self):
        return f"<ContentNode {self.id} {self._content_type}>"


class ContentCache:
    """Snapshot of the published tree"""

    def __init__(self, roots: List[ContentNode]):
        self._roots = roots

    def get_at_root(self) -> List[ContentNode]:
        return list(self._roots)

    def all_content(self) -> List[ContentNode]:
        return [node for root in self._roots for node in root.descendants_or_self()]


def _build_node(data: Any, parent: Optional[ContentNode]) -> ContentNode:
    if not isinstance(data, dict):
        raise ContentTreeError("Content node must be an object")

    try:
        node = ContentNode(
            id=int(data["id"]),
            name=str(data.get("name") or ""),
            content_type=str(data["contentType"]),
            url=str(data.get("url") or ""),
            properties=data.get("properties") or {},
            parent=parent,
        )
    except (KeyError, TypeError, ValueError) as e:
        raise ContentTreeError(f"Invalid content node: {e}") from e

    if not isinstance(node._properties, dict):
        raise ContentTreeError(f"Properties of node {node.id} must be an object")

    children = data.get("children") or []
    if not isinstance(children, list):
        raise ContentTreeError(f"Children of node {node.id} must be a list")
    node._children = [_build_node(child, node) for child in children]
    return node


def build_tree(document: Any) -> List[ContentNode]:
    """Build root nodes from a decoded content document"""
    if isinstance(document, dict):
        document = document.get("roots")
    if not isinstance(document, list):
        raise ContentTreeError("Content document must be a list of root nodes")
    return [_build_node(item, None) for item in document]


class FileContentSource:
    """Content snapshot exported to a JSON file"""

    def __init__(self, path: str):
        self.path = Path(path)

    def snapshot(self) -> ContentCache:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise ContentUnavailableError(f"Cannot read content tree at {self.path}") from e

        try:
            document = json.loads(raw)
        except ValueError as e:
            raise ContentTreeError(f"Content tree at {self.path} is not valid JSON") from e

        return ContentCache(build_tree(document))


class HttpContentSource:
    """Content snapshot served by the CMS delivery endpoint"""

    def __init__(self, url: str, timeout: float = 5.0,
                 transport: Optional[httpx.BaseTransport] = None):
        self.url = url
        self.timeout = timeout
        self.transport = transport

    def snapshot(self) -> ContentCache:
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.get(self.url, headers={"Accept": "application/json"})
                response.raise_for_status()
        except httpx.HTTPError as e:
            raise ContentUnavailableError(f"Cannot fetch content tree from {self.url}") from e

        try:
            document = response.json()
        except ValueError as e:
            raise ContentTreeError(f"Content tree from {self.url} is not valid JSON") from e

        return ContentCache(build_tree(document))


def get_content_source():
    """Dependency returning the configured content source, or None"""
    if settings.CONTENT_TREE_PATH:
        return FileContentSource(settings.CONTENT_TREE_PATH)
    if settings.CONTENT_TREE_URL:
        return HttpContentSource(settings.CONTENT_TREE_URL, timeout=settings.CONTENT_TREE_TIMEOUT)
    return None


def load_content_cache(source) -> Optional[ContentCache]:
    """
    Take a snapshot from ``source``.

    Returns None when no source is configured or it cannot be reached, so
    callers can degrade to empty output. Malformed content still raises.
    """
    if source is None:
        logger.error("No content source configured")
        return None

    try:
        return source.snapshot()
    except ContentUnavailableError:
        logger.error("Content cache unavailable", exc_info=True)
        return None
