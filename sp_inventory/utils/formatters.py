"""Formatting utilities for inventory output."""

from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence


def timestamp(now: Optional[datetime] = None) -> str:
    """Build the prefix used on every execution log line.

    Args:
        now: Instant to format. Defaults to the current local time.

    Returns:
        String in the form ``[MM/DD/YY HH:MM:SS] -``.
    """
    now = now or datetime.now()
    return now.strftime('[%m/%d/%y %H:%M:%S] -')


def bytes_to_kb(size_bytes: Any) -> float:
    """Convert a raw byte count to kilobytes rounded to 2 decimals.

    Missing, unparsable or negative values count as zero.
    """
    try:
        size = float(size_bytes)
    except (TypeError, ValueError):
        return 0.0
    if size < 0:
        return 0.0
    return round(size / 1024, 2)


def format_size_kb(size_kb: float) -> str:
    """Format a kilobyte count in human readable format.

    Args:
        size_kb: Size in kilobytes.

    Returns:
        Human readable size string.
    """
    if size_kb < 1024:
        return f"{size_kb:.2f}KB"
    elif size_kb < 1024 * 1024:
        return f"{size_kb / 1024:.2f}MB"
    else:
        return f"{size_kb / (1024 * 1024):.2f}GB"


def format_date(dt: Optional[datetime], short: bool = False) -> str:
    """Format datetime for display.

    Args:
        dt: Datetime to format. ``None`` renders as an empty string.
        short: If True, use short format.

    Returns:
        Formatted date string.
    """
    if dt is None:
        return ''
    if short:
        return dt.strftime('%Y-%m-%d %H:%M')
    else:
        return dt.strftime('%Y-%m-%d %H:%M:%S')


def truncate_string(text: str, max_length: int, suffix: str = "...") -> str:
    """Truncate string to maximum length.

    Args:
        text: Text to truncate.
        max_length: Maximum length.
        suffix: Suffix to add when truncating.

    Returns:
        Truncated string.
    """
    if len(text) <= max_length:
        return text

    return text[:max_length - len(suffix)] + suffix


def format_table(rows: List[Dict[str, Any]], columns: Sequence[str],
                 max_width: int = 40) -> str:
    """Render rows as a fixed-width text table.

    Args:
        rows: Row mappings, keyed by column name.
        columns: Column names, in display order.
        max_width: Longest cell value shown before truncation.

    Returns:
        The table as a single string, header and separator included.
    """
    cells = [[truncate_string(str(row.get(col, '')), max_width) for col in columns]
             for row in rows]

    widths = [len(col) for col in columns]
    for line in cells:
        for i, value in enumerate(line):
            widths[i] = max(widths[i], len(value))

    header = "  ".join(col.ljust(widths[i]) for i, col in enumerate(columns))
    separator = "  ".join("-" * widths[i] for i in range(len(columns)))
    body = ["  ".join(value.ljust(widths[i]) for i, value in enumerate(line))
            for line in cells]

    return "\n".join([header, separator] + body)
