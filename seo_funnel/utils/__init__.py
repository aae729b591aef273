"""Utility modules for the SEO lead funnel."""

from .config import Settings, get_settings
from .urls import format_url, is_valid_url

__all__ = [
    "Settings",
    "get_settings",
    # URL helpers
    "format_url",
    "is_valid_url",
]
