"""Utility functions for time handling and log redaction."""

from .masking import mask_email
from .timestamps import (
    ensure_utc,
    format_time_ago,
    format_timestamp,
    parse_iso_datetime,
    utc_now,
)

__all__ = [
    # Timestamps
    "utc_now",
    "ensure_utc",
    "parse_iso_datetime",
    "format_timestamp",
    "format_time_ago",
    # Redaction
    "mask_email",
]
