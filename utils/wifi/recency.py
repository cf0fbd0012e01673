"""Time-window filtering for client lists."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Iterable, Optional

from .constants import DEFAULT_RECENCY_MINUTES
from .models import Client


def parse_window_minutes(value: Any, default: int = DEFAULT_RECENCY_MINUTES) -> int:
    """
    Coerce a request parameter into a window size in minutes.

    Missing, non-numeric or negative values fall back to the default.
    """
    if value is None or isinstance(value, bool):
        return default
    try:
        minutes = int(str(value).strip())
    except ValueError:
        return default
    if minutes < 0:
        return default
    return minutes


def filter_recent_clients(
    clients: Iterable[Client],
    window_minutes: int,
    now: Optional[datetime] = None,
) -> list[Client]:
    """
    Keep clients last seen strictly within the window.

    Args:
        clients: Clients to filter.
        window_minutes: Window size in minutes.
        now: Reference time (defaults to the current local time).

    Returns:
        Clients whose last_seen is after now - window_minutes.
    """
    if now is None:
        now = datetime.now().astimezone()
    try:
        cutoff = now - timedelta(minutes=window_minutes)
    except OverflowError:
        # Window reaches past datetime.min, nothing can be older
        return list(clients)
    return [c for c in clients if c.last_seen > cutoff]
