"""Formatting of playback times for display."""

from __future__ import annotations


def format_hms(ns: int) -> str:
    """Format nanoseconds as ``HH:MM:SS.mmm``; negative values count as zero."""
    total = max(ns, 0) * 1e-9
    hours = int(total / 3600.0)
    total -= hours * 3600.0
    minutes = int(total / 60.0)
    total -= minutes * 60.0
    return f"{hours:02d}:{minutes:02d}:{total:06.3f}"


def format_mm_ss(total_seconds: float) -> str:
    """Format whole seconds as ``MM:SS``; fractions are truncated, negatives clamp to zero."""
    whole = int(max(total_seconds, 0))
    minutes, seconds = divmod(whole, 60)
    return f"{minutes:02d}:{seconds:02d}"