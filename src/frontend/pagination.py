"""Pagination for paged detail views."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, List, Mapping

from constants import Constants

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PaginationParams:
    """Requested page (1-based) and page size."""

    page: int = 1
    limit: int = Constants.IMPORTED_BY_PAGE_SIZE

    @property
    def offset(self) -> int:
        if self.page < 1:
            return 0
        return (self.page - 1) * self.limit

    @classmethod
    def from_query(cls, query: Mapping[str, Any], default_limit: int) -> "PaginationParams":
        """Read ``page`` and ``limit`` from query values.

        Missing, non-numeric and non-positive values fall back to defaults.
        """
        def positive(key: str, default: int) -> int:
            raw = query.get(key)
            if raw in (None, ""):
                return default
            try:
                value = int(raw)
            except (TypeError, ValueError):
                logger.info("Ignoring non-numeric %s=%r", key, raw)
                return default
            return value if value >= 1 else default

        return cls(page=positive("page", 1), limit=positive("limit", default_limit))


@dataclass(frozen=True)
class Pagination:
    """Navigation data for one page of results.

    ``prev_page`` and ``next_page`` are 0 when there is no such page.
    """

    total_count: int
    result_count: int
    offset: int
    limit: int
    prev_page: int
    next_page: int
    pages: List[int] = field(default_factory=list)

    @classmethod
    def create(cls, params: PaginationParams, result_count: int, total_count: int) -> "Pagination":
        offset = params.offset
        return cls(
            total_count=total_count,
            result_count=result_count,
            offset=offset,
            limit=params.limit,
            prev_page=params.page - 1 if params.page > 1 else 0,
            next_page=0 if offset + result_count >= total_count else params.page + 1,
            pages=pages_to_link(
                params.page,
                num_pages(params.limit, total_count),
                Constants.NUM_PAGES_TO_LINK,
            ),
        )


def num_pages(page_size: int, total_count: int) -> int:
    return (total_count + page_size - 1) // page_size


def pages_to_link(page: int, total_pages: int, num_to_link: int) -> List[int]:
    """Return up to ``num_to_link`` consecutive page numbers around ``page``."""
    start = max(page - num_to_link // 2, 1)
    end = min(start + num_to_link, total_pages + 1)
    start = max(end - num_to_link, 1)
    return list(range(start, end))
