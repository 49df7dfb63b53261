"""Presentation helpers for statistics and flush results."""

from typing import Optional

MEMORY_BAR_CRITICAL = 90.0
MEMORY_BAR_WARNING = 75.0


def format_number(number: int) -> str:
    return f"{number:,}"


def format_memory(mb: float) -> str:
    if mb >= 1024:
        return f"{mb / 1024:.2f} GB"
    return f"{mb:.2f} MB"


def format_percentage(percentage: Optional[float]) -> str:
    if percentage is None:
        return "n/a"
    return f"{percentage:.1f}%"


def memory_bar_width(percentage: Optional[float]) -> float:
    if percentage is None:
        return 0.0
    return min(100.0, max(0.0, percentage))


def memory_bar_class(percentage: Optional[float]) -> str:
    """CSS class for a memory usage bar."""
    if percentage is None:
        return "memory-bar-unknown"
    if percentage >= MEMORY_BAR_CRITICAL:
        return "memory-bar-critical"
    if percentage >= MEMORY_BAR_WARNING:
        return "memory-bar-warning"
    return "memory-bar-normal"
