"""
Utility functions for Model Sweep.

Contains helpers for size and timestamp formatting shared by the
scanners, the grouper and the CLI.
"""

from datetime import datetime, timezone
from typing import List


SIZE_UNITS: List[str] = ["B", "KB", "MB", "GB", "TB"]


def format_bytes(size_bytes: int) -> str:
    """
    Format byte size to human-readable string.

    Uses 1024 steps, at most two decimals and no trailing zeros.
    Sizes past the last unit stay in TB.

    Args:
        size_bytes: Size in bytes

    Returns:
        Human-readable size string (e.g., "1.5 KB", "10 MB")
    """
    if size_bytes == 0:
        return "0 B"

    # floor(log1024(size)) without float drift on exact powers
    i = 0
    while i < len(SIZE_UNITS) - 1 and size_bytes >= 1024 ** (i + 1):
        i += 1

    value = "%.2f" % (size_bytes / 1024 ** i)
    value = value.rstrip("0").rstrip(".")
    return f"{value} {SIZE_UNITS[i]}"


def format_timestamp(mtime: float) -> str:
    """
    Convert a POSIX mtime to an ISO-8601 UTC string.

    Args:
        mtime: Seconds since the epoch (as in ``os.stat_result.st_mtime``)

    Returns:
        Timestamp such as "2024-05-01T12:00:00.000Z"
    """
    dt = datetime.fromtimestamp(mtime, tz=timezone.utc)
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(value: str) -> datetime:
    """
    Parse a timestamp produced by :func:`format_timestamp`.

    Naive timestamps are taken as UTC so all values compare by instant.
    """
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    dt = datetime.fromisoformat(value)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt
