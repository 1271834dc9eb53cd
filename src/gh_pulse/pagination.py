"""Page-number pagination over GitHub REST list endpoints."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

T = TypeVar("T")

logger = logging.getLogger(__name__)


async def fetch_all_pages(
    fetch_page: Callable[[int, int], Awaitable[list[T]]],
    per_page: int,
) -> list[T]:
    """Fetch pages 1, 2, ... until one comes back short.

    *fetch_page* is called as ``fetch_page(page, per_page)``.  A page with
    fewer than *per_page* items (including an empty page) is the last one.
    Items keep their page order.  Errors from any page propagate.
    """
    if per_page < 1:
        raise ValueError(f"per_page must be positive, got {per_page}")

    items: list[T] = []
    page = 1
    while True:
        batch = await fetch_page(page, per_page)
        items.extend(batch)
        logger.debug("Fetched page %d with %d items", page, len(batch))
        if len(batch) < per_page:
            break
        page += 1
    return items
