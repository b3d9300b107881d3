"""Item Chunker

Orders item rows and splits them into page-sized chunks.

Chunk boundaries depend only on the ordered rows and the capacity, so the
same document always paginates the same way when it is reprinted.
"""
import logging
from typing import List, Sequence, Tuple, Union

from ..models import ItemRow, PageChunk
from .layout_config import PageCapacity

logger = logging.getLogger(__name__)


def order_items(items: Sequence[ItemRow]) -> List[ItemRow]:
    """
    Put item rows in print order.

    Rows are sorted by `sort_order` ascending. A row without a sort order uses
    its retrieval position as its sort key, and ties keep retrieval order.

    Args:
        items: Rows in retrieval order

    Returns:
        New list in print order
    """
    indexed = list(enumerate(items or ()))
    indexed.sort(
        key=lambda pair: (
            pair[1].sort_order if pair[1].sort_order is not None else pair[0],
            pair[0],
        )
    )
    return [item for _, item in indexed]


def page_bounds(count: int, capacity: PageCapacity) -> List[Tuple[int, int]]:
    """
    Compute [start, end) row bounds for every page.

    Args:
        count: Number of ordered rows
        capacity: Row limits by page position

    Returns:
        List of (start, end) pairs; always at least one (possibly empty) page
    """
    if count <= capacity.single:
        return [(0, count)]

    bounds = []

    # First page always leaves at least one row for the last page
    start = min(capacity.first, count - 1)
    bounds.append((0, start))

    # Middle pages while the remainder does not fit on a last page
    while count - start > capacity.last:
        take = min(capacity.middle, count - start - 1)
        bounds.append((start, start + take))
        start += take

    bounds.append((start, count))
    return bounds


def chunk_items(items: Sequence[ItemRow], capacity: Union[int, PageCapacity]) -> List[PageChunk]:
    """
    Split ordered rows into page chunks.

    Args:
        items: Rows already in print order (see `order_items`)
        capacity: Positive int for a uniform limit, or a PageCapacity

    Returns:
        Page chunks in order. An empty item list yields one empty chunk so the
        header and signature block still print.

    Raises:
        InvalidCapacityError: If capacity is not a positive integer
    """
    capacity = PageCapacity.coerce(capacity)
    rows = tuple(items or ())

    bounds = page_bounds(len(rows), capacity)
    last_index = len(bounds) - 1

    chunks = [
        PageChunk(
            items=rows[start:end],
            page_index=index,
            is_first_page=index == 0,
            is_last_page=index == last_index,
            start_number=start + 1,
        )
        for index, (start, end) in enumerate(bounds)
    ]

    logger.debug(
        "Chunked %d rows into %d pages: %s",
        len(rows), len(chunks), [len(chunk) for chunk in chunks],
    )
    return chunks
