from __future__ import annotations

SIZE_UNITS = ("B", "KB", "MB", "GB")


def format_size(num_bytes: int) -> str:
    """Render a byte count with base-1024 units, e.g. ``1536 -> "1.5 KB"``."""
    if num_bytes < 0:
        raise ValueError(f"size must be non-negative, got {num_bytes}")
    value = float(num_bytes)
    for unit in SIZE_UNITS[:-1]:
        if value < 1024:
            return f"{_trim(value)} {unit}"
        value /= 1024
    return f"{_trim(value)} {SIZE_UNITS[-1]}"


def _trim(value: float) -> str:
    return f"{value:.2f}".rstrip("0").rstrip(".")
