from .click import PolicyClickRequest, PolicyClickCountResponse, MessageResponse
from .search import SearchResult

__all__ = ["PolicyClickRequest", "PolicyClickCountResponse", "MessageResponse", "SearchResult"]
