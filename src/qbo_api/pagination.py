"""Offset pagination over the query language.

QBO pages with `STARTPOSITION` (1-based) and `MAXRESULTS`. The cursor advances by a
fixed stride; a page shorter than the stride, or an empty one, ends the stream.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterator

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 1000


@dataclass(slots=True)
class PageCursor:
    position: int = 1
    page_size: int = DEFAULT_PAGE_SIZE

    def page_query(self, base_query: str) -> str:
        return f"{base_query} MAXRESULTS {self.page_size} STARTPOSITION {self.position}"

    def advance(self) -> None:
        self.position += self.page_size


def paginate(
    fetch_page: Callable[[str], list[Any] | None],
    base_query: str,
    *,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> Iterator[Any]:
    """Yield records from successive pages of `base_query`.

    `fetch_page` receives the full query text for one page and returns its records
    (or None for an empty result). Anything other than a list ends the stream.
    `page_size` is checked here, before the first page is requested.
    """

    if page_size < 1:
        raise ValueError("page_size must be >= 1")
    return _iter_pages(fetch_page, base_query, PageCursor(page_size=page_size))


def _iter_pages(
    fetch_page: Callable[[str], list[Any] | None], base_query: str, cursor: PageCursor
) -> Iterator[Any]:
    while True:
        results = fetch_page(cursor.page_query(base_query))
        if not isinstance(results, list):
            if results is not None:
                logger.warning(
                    f"QBO page at {cursor.position} is not a record list; stopping"
                )
            return
        logger.debug(f"QBO page at {cursor.position}: {len(results)} records")
        yield from results
        if len(results) < cursor.page_size:
            return
        cursor.advance()
