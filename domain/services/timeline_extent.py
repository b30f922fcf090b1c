from __future__ import annotations

from collections.abc import Iterable

from domain.models import CoordinateWindow

DEFAULT_WINDOW = CoordinateWindow(0.0, 100.0)
MIN_WINDOW_DAYS = 1.0
DEGENERATE_PADDING_DAYS = 50.0


def compute_extent(starts: Iterable[float], ends: Iterable[float] = ()) -> CoordinateWindow:
    start_values = list(starts)
    if not start_values:
        return DEFAULT_WINDOW
    min_days = min(start_values)
    max_days = max([*start_values, *ends])
    if max_days - min_days < MIN_WINDOW_DAYS:
        return CoordinateWindow(min_days - DEGENERATE_PADDING_DAYS, max_days + DEGENERATE_PADDING_DAYS)
    return CoordinateWindow(min_days, max_days)
