"""Shortcode registry and analytics store."""

from .base import UrlRegistryBase
from .memory import UrlRegistry
from .models import AnalyticsEntry, ClickRecord, Location, UrlRecord, UrlStats, UrlSummary

__all__ = [
    "UrlRegistryBase",
    "UrlRegistry",
    "AnalyticsEntry",
    "ClickRecord",
    "Location",
    "UrlRecord",
    "UrlStats",
    "UrlSummary",
]
