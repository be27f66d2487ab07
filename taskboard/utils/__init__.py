"""Utility helpers shared across layers."""

from .datetime import (
    ensure_app_timezone,
    format_deadline,
    from_storage_datetime,
    get_app_timezone,
    now_in_app_timezone,
    now_in_storage_datetime,
    reset_app_timezone_cache,
    resolve_timezone,
    to_storage_datetime,
)

__all__ = [
    "ensure_app_timezone",
    "format_deadline",
    "from_storage_datetime",
    "get_app_timezone",
    "now_in_app_timezone",
    "now_in_storage_datetime",
    "reset_app_timezone_cache",
    "resolve_timezone",
    "to_storage_datetime",
]
