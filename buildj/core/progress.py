"""
Human-readable progress formatting.

Shared by the digest verifier and the registry downloader. Totals may be
unknown (no Content-Length, unreadable file size), in which case progress is
rendered as an open-ended counter.
"""

from typing import Callable, Optional

# (label, bytes_processed, total_bytes or None)
ProgressCallback = Callable[[str, int, Optional[int]], None]


def format_size(num_bytes: int) -> str:
    """
    Format a byte count with a binary unit.

    Example:
        >>> format_size(1536)
        '1.5 KiB'
    """
    size = float(num_bytes)
    for unit in ("B", "KiB", "MiB", "GiB"):
        if size < 1024 or unit == "GiB":
            if unit == "B":
                return f"{int(size)} B"
            return f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} GiB"


def format_status(label: str, processed: int, total: Optional[int]) -> str:
    """
    Format a single progress line.

    Args:
        label: What is being processed (e.g. "Calc SHA256", "Download")
        processed: Bytes processed so far
        total: Total bytes, or None/negative when unknown

    Returns:
        Status line without trailing newline

    Example:
        >>> format_status("Download", 512, 1024)
        'Download: 512 B/1.0 KiB (50.0%)'
        >>> format_status("Download", 512, None)
        'Download: 512 B'
    """
    if total is None or total <= 0:
        return f"{label}: {format_size(processed)}"

    percentage = processed / total * 100
    return f"{label}: {format_size(processed)}/{format_size(total)} ({percentage:.1f}%)"
