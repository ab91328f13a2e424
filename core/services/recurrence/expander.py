from __future__ import annotations

from datetime import date
from typing import List, Optional

from core.models import Recurrence


def expand_occurrences(
    anchor: date,
    recurrence: Optional[Recurrence],
    window_start: date,
    window_end: date,
) -> List[date]:
    """Occurrence dates of a commitment inside ``[window_start, window_end]``.

    A one-time commitment (``recurrence is None``) yields its anchor when the
    anchor is inside the window. A recurring one is walked forward from the
    anchor until it reaches the window, then every occurrence up to and
    including ``window_end`` is emitted in order.
    """
    if window_end < window_start:
        return []
    if recurrence is None:
        return [anchor] if window_start <= anchor <= window_end else []

    cursor = anchor
    while cursor < window_start:
        cursor = recurrence.advance(cursor)

    occurrences: List[date] = []
    while cursor <= window_end:
        occurrences.append(cursor)
        cursor = recurrence.advance(cursor)
    return occurrences


__all__ = ["expand_occurrences"]
