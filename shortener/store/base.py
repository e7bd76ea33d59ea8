"""Abstract base class for shortcode registry implementations."""

from abc import ABC, abstractmethod
from typing import Optional, List, Dict, Any
from datetime import datetime

from .models import Location, UrlRecord, UrlStats, UrlSummary


class UrlRegistryBase(ABC):
    """Abstract base class for shortcode registry operations.

    Expected conditions (missing or expired shortcodes) are reported through
    ``None``/``False`` return values, never by raising.
    """

    @abstractmethod
    def exists(self, shortcode: str) -> bool:
        """Check if a shortcode is present, expired or not.

        Args:
            shortcode: The shortcode to check

        Returns:
            True if a record is present
        """
        pass

    @abstractmethod
    def create(
        self,
        shortcode: str,
        original_url: str,
        expiry_date: datetime,
        created_at: Optional[datetime] = None,
    ) -> Optional[UrlRecord]:
        """Insert a record and an empty analytics entry if the code is free.

        Args:
            shortcode: The shortcode to claim
            original_url: The original long URL
            expiry_date: When the record stops resolving
            created_at: Optional creation timestamp (defaults to now)

        Returns:
            The new record, or None if the shortcode is already present
        """
        pass

    @abstractmethod
    def find_active(self, shortcode: str) -> Optional[UrlRecord]:
        """Get a record that is present and not expired.

        Args:
            shortcode: The shortcode to lookup

        Returns:
            The record, or None if missing or expired
        """
        pass

    @abstractmethod
    def record_click(
        self,
        shortcode: str,
        ip: str,
        user_agent: str,
        referrer: str,
        location: Location,
    ) -> bool:
        """Append a click to a shortcode's analytics.

        Returns:
            True if recorded, False if no analytics exist for the shortcode
        """
        pass

    @abstractmethod
    def get_analytics(self, shortcode: str) -> Optional[UrlStats]:
        """Get a snapshot of a record and its click history.

        Args:
            shortcode: The shortcode to lookup

        Returns:
            Snapshot with ``is_active`` computed now, or None if missing
        """
        pass

    @abstractmethod
    def cleanup_expired(self, now: Optional[datetime] = None) -> int:
        """Remove records whose expiry date is before ``now``.

        Returns:
            Number of records removed
        """
        pass

    @abstractmethod
    def list_urls(self) -> List[UrlSummary]:
        """List all present records with click totals."""
        pass

    @abstractmethod
    def get_statistics(self) -> Dict[str, Any]:
        """Get registry statistics (total_urls, active_urls, total_clicks)."""
        pass
