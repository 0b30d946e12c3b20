"""Timestamp parsing and human-readable formatting."""

import re

TIMESTAMP_RE = re.compile(r"([0-9]{1,2}:)?([0-9]{1,2}:)?[0-9]{1,2}(\.[0-9]+)?")

TIMESTAMP_HELP = "HH:MM:SS, MM:SS, or SS"


def validate(timestamp: str) -> bool:
    """Return True for ``HH:MM:SS``, ``MM:SS`` or ``SS`` (1-2 digits per group).

    The last group may carry a fractional part, e.g. ``1:05.5``.
    """
    if not timestamp:
        return False
    return TIMESTAMP_RE.fullmatch(timestamp) is not None


def to_seconds(timestamp: str) -> int:
    """Convert a validated timestamp to whole seconds.

    Groups are read right to left as seconds, minutes, hours. Any fractional
    part is truncated.
    """
    if not validate(timestamp):
        raise ValueError(f"Invalid timestamp: {timestamp!r}")

    parts = timestamp.split(":")
    parts[-1] = parts[-1].split(".")[0]

    total = 0
    for multiplier, part in zip((1, 60, 3600), reversed(parts)):
        total += int(part, 10) * multiplier
    return total


def format_duration(seconds: float) -> str:
    """Render seconds as ``HH:MM:SS``, dropping any fractional part."""
    whole = max(int(seconds), 0)
    h = whole // 3600
    m = (whole % 3600) // 60
    s = whole % 60
    return f"{h:02d}:{m:02d}:{s:02d}"


def format_size(num_bytes: int) -> str:
    """Human-readable size in the style of ``du -h`` (``512B``, ``1.5K``, ``12M``)."""
    if num_bytes < 1024:
        return f"{num_bytes}B"

    size = num_bytes / 1024
    for unit in ("K", "M", "G"):
        if size < 1024:
            break
        size /= 1024
    else:
        unit = "T"

    if size < 10:
        return f"{size:.1f}{unit}"
    return f"{size:.0f}{unit}"
