from __future__ import annotations

import math

from .models import PageWindow


def page_path(base: str, page: int) -> str:
    if page == 1:
        return base
    return f"{base.rstrip('/')}/page/{page}"


def paginate(total_items: int, page_size: int, base: str) -> list[PageWindow]:
    """Split a listing of ``total_items`` into windows of ``page_size``.

    Page 1 lives at ``base`` and page N at ``base/page/N``. An empty listing
    has no pages at all.
    """
    if page_size < 1:
        raise ValueError(f"page_size must be at least 1, got {page_size}")
    if total_items < 0:
        raise ValueError(f"total_items cannot be negative, got {total_items}")
    total_pages = math.ceil(total_items / page_size)
    windows = []
    for page in range(1, total_pages + 1):
        windows.append(
            PageWindow(
                page_number=page,
                total_pages=total_pages,
                skip=(page - 1) * page_size,
                limit=page_size,
                path=page_path(base, page),
                prev_path=page_path(base, page - 1) if page > 1 else None,
                next_path=page_path(base, page + 1) if page < total_pages else None,
            )
        )
    return windows
