"""Formatting helpers for displayed durations."""

import math


def format_clock(seconds: float) -> str:
    """Format whole elapsed/remaining seconds as ``MM:SS``.

    Minutes are not wrapped into hours, so a long round reads ``75:03``.
    """
    total = max(0, math.floor(seconds))
    minutes, secs = divmod(total, 60)
    return f"{minutes:02d}:{secs:02d}"
