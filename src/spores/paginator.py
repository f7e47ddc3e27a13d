"""Draining of offset-paged collections."""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Generic, List, Optional, TypeVar

from .logging_config import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

# Largest page the Web API serves for most list endpoints
DEFAULT_PAGE_SIZE = 50


@dataclass
class Page(Generic[T]):
    """One slice of a collection. `cursor` is ignored when `has_more` is False."""

    items: List[T] = field(default_factory=list)
    has_more: bool = False
    cursor: Optional[str] = None


def page_from_response(payload: Dict[str, Any]) -> Page[Dict[str, Any]]:
    """Convert a Web API paging object into a Page.

    Args:
        payload: Paging object with `items` and `next`

    Returns:
        Page whose has_more reflects whether the service reported a next page
    """
    next_url = payload.get("next")
    return Page(
        items=list(payload.get("items") or []),
        has_more=next_url is not None,
        cursor=next_url,
    )


def drain(fetch_page: Callable[[int, int], Page[T]], page_size: int = DEFAULT_PAGE_SIZE) -> List[T]:
    """Fetch every page of a collection and concatenate the items.

    The offset advances by the number of items actually received, not by
    `page_size`. No deduplication is done: if the collection changes between
    requests the result may contain duplicates or gaps.

    Args:
        fetch_page: Callable taking (offset, limit) and returning a Page
        page_size: Number of items to request per page

    Returns:
        All items in service order

    Raises:
        ValueError: If page_size is less than 1
        Any error raised by fetch_page, in which case nothing is returned
    """
    if page_size < 1:
        raise ValueError(f"page_size must be at least 1, got {page_size}")

    items: List[T] = []
    offset = 0
    while True:
        page = fetch_page(offset, page_size)
        items.extend(page.items)
        logger.debug("Fetched %d items at offset %d", len(page.items), offset)

        if not page.has_more:
            break
        if not page.items:
            logger.warning("Empty page at offset %d claims more data, stopping", offset)
            break
        offset += len(page.items)

    return items
