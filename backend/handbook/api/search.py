import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from ..core.content import get_content_source, load_content_cache
from ..core.errors import HandbookError
from ..schemas.search import SearchResult
from ..services.search import search_content, is_searchable, DEFAULT_TAKE

router = APIRouter(prefix="/HandbookSearch")
logger = logging.getLogger("handbook.search")


@router.get("/Search", response_model=List[SearchResult], response_model_exclude_none=True)
def search_handbook(
    q: Optional[str] = Query(None, description="Search text, at least 2 characters"),
    take: int = Query(DEFAULT_TAKE, description="Maximum results, clamped to 1..50"),
    source=Depends(get_content_source)
):
    """
    Search published policy and category cards.

    Returns an empty list for short queries or when the content cache is
    unavailable.
    """
    if not is_searchable(q):
        return []

    try:
        cache = load_content_cache(source)
        return search_content(cache, q, take)
    except HandbookError:
        logger.error("Error executing search for query: %s", q, exc_info=True)
        raise
