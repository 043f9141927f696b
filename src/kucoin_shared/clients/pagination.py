# src/kucoin_shared/clients/pagination.py

# --- Built Ins  ---
from collections.abc import Awaitable, Callable
from typing import Any, Generic, Optional, TypeVar

# --- Installed  ---
from loguru import logger as log

# --- Local Application Imports ---
from ..core.enums import Side
from ..core.models import Page

T = TypeVar("T")

PageFetcher = Callable[[Optional[Side], int], Awaitable[Page[T]]]


def created_at_key(record: Any) -> int:
    return record.created_at


class PaginatedAggregator(Generic[T]):
    """
    Walks every page of a paged endpoint, per side when the endpoint is
    sided, and returns one list ordered newest first.

    There is no page cap: a walk either returns every record or raises.
    """

    def __init__(self, sort_key: Callable[[T], Any] = created_at_key, label: str = "records"):
        self._sort_key = sort_key
        self._label = label

    @staticmethod
    def resolve_sides(side: Optional[Side] = None, sided: bool = False) -> list[Optional[Side]]:
        if not sided:
            return [None]
        if side is not None:
            return [side]
        return [Side.BUY, Side.SELL]

    async def collect(
        self,
        fetch_page: PageFetcher,
        side: Optional[Side] = None,
        sided: bool = False,
    ) -> list[T]:
        """
        Args:
            fetch_page: Called as fetch_page(side, page_number); side is None for unsided endpoints.
            side: Restricts a sided walk to one side. Ignored when `sided` is False.
            sided: Whether the endpoint partitions its results by side.

        Any failure from `fetch_page` propagates and discards what was collected.
        """
        collected: list[T] = []

        for current_side in self.resolve_sides(side, sided):
            current_page, max_page = 1, 1
            while True:
                page = await fetch_page(current_side, current_page)
                collected.extend(page.items)
                max_page = page.total_pages
                log.debug(
                    f"[PAGINATION] {self._label} side={current_side.value if current_side else '-'} "
                    f"page {current_page}/{max_page}: {len(page.items)} items"
                )
                if current_page >= max_page:
                    break
                current_page += 1

        # sorted() is stable, so equal timestamps keep their fetch order.
        return sorted(collected, key=self._sort_key, reverse=True)
