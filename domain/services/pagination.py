from __future__ import annotations

import math

from domain.models import CoordinateWindow, PageWindow

# Digits kept when comparing content width with page width; absorbs float noise
# from unit conversions so an exact multiple does not spill onto an extra page.
_PAGE_RATIO_PRECISION = 9


def split_pages(window: CoordinateWindow, usable_width: float, scale: float) -> list[PageWindow]:
    if usable_width <= 0 or scale <= 0:
        msg = "usable_width and scale must be positive"
        raise ValueError(msg)
    content_width = window.width * scale
    ratio = round(content_width / usable_width, _PAGE_RATIO_PRECISION)
    total = max(1, math.ceil(ratio))
    days_per_page = usable_width / scale
    pages: list[PageWindow] = []
    for index in range(total):
        start = window.start + index * days_per_page
        pages.append(
            PageWindow(
                index=index,
                total=total,
                window=CoordinateWindow(start, start + days_per_page),
            )
        )
    return pages
