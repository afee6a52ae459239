from __future__ import annotations

import math
from typing import Iterator, Sequence

from .config.settings import PAGE_SIZE
from .descriptors import IconDescriptor


# --------------------------------------------------
# Query / result containers
# --------------------------------------------------

class CatalogQuery:
    """What the user asked for: search text, sort direction, page."""

    def __init__(
        self,
        query: str = "",
        sort_ascending: bool = True,
        page: int = 1,
        page_size: int = PAGE_SIZE,
    ):
        self.query = query or ""
        self.sort_ascending = sort_ascending
        self.page = page
        self.page_size = page_size if page_size and page_size > 0 else PAGE_SIZE


class CatalogPage:
    """Derived view over one provider's descriptors. Never stored."""

    def __init__(
        self,
        filtered: list[IconDescriptor],
        paginated: list[IconDescriptor],
        page: int,
        page_size: int,
        total_pages: int,
        grouped_by_initial: list[tuple[str, list[IconDescriptor]]],
    ):
        self.filtered = filtered
        self.paginated = paginated
        self.page = page
        self.page_size = page_size
        self.total_pages = total_pages
        self.grouped_by_initial = grouped_by_initial

    @property
    def total_results(self) -> int:
        return len(self.filtered)

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    def to_dict(self) -> dict:
        return {
            "icons": [d.to_dict() for d in self.paginated],
            "page": self.page,
            "page_size": self.page_size,
            "total_pages": self.total_pages,
            "total_results": self.total_results,
            "has_previous": self.has_previous,
            "has_next": self.has_next,
            "groups": [
                {"initial": initial, "names": [d.name for d in group]}
                for initial, group in self.grouped_by_initial
            ],
        }


# --------------------------------------------------
# Search, sort, group, paginate
# --------------------------------------------------

def _needle(query: str | None) -> str:
    return (query or "").strip().casefold()


def _sort_key(descriptor: IconDescriptor) -> tuple[str, str]:
    # Case-insensitive order first; raw name keeps the order total.
    return (descriptor.name.casefold(), descriptor.name)


def filter_descriptors(descriptors: Sequence[IconDescriptor], query: str | None) -> list[IconDescriptor]:
    """Case-insensitive substring match on name. Empty query matches everything."""
    needle = _needle(query)
    if not needle:
        return list(descriptors)
    return [d for d in descriptors if needle in d.name.casefold()]


def sort_descriptors(descriptors: Sequence[IconDescriptor], ascending: bool = True) -> list[IconDescriptor]:
    return sorted(descriptors, key=_sort_key, reverse=not ascending)


def group_by_initial(descriptors: Sequence[IconDescriptor]) -> list[tuple[str, list[IconDescriptor]]]:
    """
    Partition by uppercase first character (for the A-Z quick-jump list).
    Groups come back in character order; members keep their input order.
    """
    groups: dict[str, list[IconDescriptor]] = {}
    for d in descriptors:
        initial = d.name[0].upper() if d.name else "#"
        groups.setdefault(initial, []).append(d)
    return sorted(groups.items(), key=lambda item: item[0])


def total_pages_for(count: int, page_size: int) -> int:
    return max(1, math.ceil(count / page_size))


def normalize_page(page: int, total_pages: int) -> int:
    """Out-of-range pages reset to 1 (e.g. a narrower search after paging)."""
    if page < 1 or page > total_pages:
        return 1
    return page


def paginate(items: Sequence, page: int, page_size: int) -> tuple[list, int, int]:
    """Return (page items, normalized page, total pages)."""
    total_pages = total_pages_for(len(items), page_size)
    page = normalize_page(page, total_pages)
    start = (page - 1) * page_size
    return list(items[start:start + page_size]), page, total_pages


def iter_pages(items: Sequence, page_size: int) -> Iterator[list]:
    """Yield every page in order; concatenating them reproduces `items`."""
    for start in range(0, len(items), page_size):
        yield list(items[start:start + page_size])


def index(descriptors: Sequence[IconDescriptor], query: CatalogQuery) -> CatalogPage:
    """
    Filter, sort, group and paginate one provider's descriptors.

    Pure and synchronous: runs on every keystroke and provider switch.
    """
    filtered = sort_descriptors(filter_descriptors(descriptors, query.query), query.sort_ascending)
    paginated, page, total_pages = paginate(filtered, query.page, query.page_size)
    return CatalogPage(
        filtered=filtered,
        paginated=paginated,
        page=page,
        page_size=query.page_size,
        total_pages=total_pages,
        grouped_by_initial=group_by_initial(filtered),
    )


def suggestions(descriptors: Sequence[IconDescriptor], query: str | None, limit: int = 100) -> list[str]:
    """Names for the search box dropdown, in ascending order."""
    matches = sort_descriptors(filter_descriptors(descriptors, query))
    return [d.name for d in matches[:max(0, limit)]]
