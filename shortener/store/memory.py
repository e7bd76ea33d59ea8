"""In-memory shortcode registry and analytics store."""

import logging
import threading
from datetime import datetime, timezone
from typing import Callable, Dict, Optional, List, Any, Tuple

from .base import UrlRegistryBase
from .models import AnalyticsEntry, ClickRecord, Location, UrlRecord, UrlStats, UrlSummary
from ..common.remote_log import RemoteLogger


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


class UrlRegistry(UrlRegistryBase):
    """Mutex-guarded map of shortcode -> (UrlRecord, AnalyticsEntry).

    A single lock covers the whole map, so create-if-absent, click
    append-and-increment, removal and snapshot reads are each atomic for
    both coroutines and threads. Nothing here blocks on I/O.
    """

    def __init__(
        self,
        logger: Optional[logging.Logger] = None,
        event_log: Optional[RemoteLogger] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """Initialize registry.

        Args:
            logger: Optional logger instance
            event_log: Optional remote sink for significant events
            clock: Optional time source (defaults to UTC now)
        """
        self.logger = logger or logging.getLogger(__name__)
        self.event_log = event_log
        self.clock = clock or utc_now
        self._entries: Dict[str, Tuple[UrlRecord, AnalyticsEntry]] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def exists(self, shortcode: str) -> bool:
        with self._lock:
            return shortcode in self._entries

    def create(
        self,
        shortcode: str,
        original_url: str,
        expiry_date: datetime,
        created_at: Optional[datetime] = None,
    ) -> Optional[UrlRecord]:
        record = UrlRecord(
            shortcode=shortcode,
            original_url=original_url,
            created_at=created_at or self.clock(),
            expiry_date=expiry_date,
        )

        with self._lock:
            if shortcode in self._entries:
                return None
            self._entries[shortcode] = (record, AnalyticsEntry())

        self.logger.info(
            f"Short URL created: {shortcode} -> {original_url} "
            f"(expires {expiry_date.isoformat()})"
        )
        self._emit("info", "handler", f"Short URL created: {shortcode}")
        return record

    def find_active(self, shortcode: str) -> Optional[UrlRecord]:
        with self._lock:
            entry = self._entries.get(shortcode)

        if entry is None:
            self.logger.warning(f"Short URL not found: {shortcode}")
            self._emit("warn", "handler", f"Short URL not found: {shortcode}")
            return None

        record = entry[0]
        if not record.is_active(self.clock()):
            self.logger.warning(
                f"Short URL has expired: {shortcode} "
                f"(expired {record.expiry_date.isoformat()})"
            )
            self._emit("warn", "handler", f"Short URL expired: {shortcode}")
            return None

        return record

    def record_click(
        self,
        shortcode: str,
        ip: str,
        user_agent: str,
        referrer: str,
        location: Location,
    ) -> bool:
        click = ClickRecord(
            timestamp=self.clock(),
            ip=ip,
            user_agent=user_agent,
            referrer=referrer,
            location=location,
        )

        with self._lock:
            entry = self._entries.get(shortcode)
            if entry is not None:
                analytics = entry[1]
                analytics.append(click)
                total = analytics.total_clicks

        if entry is None:
            self.logger.error(f"Analytics not found for shortcode: {shortcode}")
            self._emit("error", "handler", f"No analytics for shortcode: {shortcode}")
            return False

        self.logger.info(
            f"Click recorded: {shortcode} (total={total}, referrer={referrer}, "
            f"country={location.country})"
        )
        self._emit("info", "handler", f"Click recorded for shortcode: {shortcode}")
        return True

    def get_analytics(self, shortcode: str) -> Optional[UrlStats]:
        with self._lock:
            entry = self._entries.get(shortcode)
            if entry is not None:
                record, analytics = entry
                total = analytics.total_clicks
                clicks = tuple(analytics.clicks)

        if entry is None:
            self.logger.warning(f"Analytics or URL not found: {shortcode}")
            self._emit("warn", "handler", f"Analytics or URL not found for: {shortcode}")
            return None

        return UrlStats(
            shortcode=record.shortcode,
            original_url=record.original_url,
            created_at=record.created_at,
            expiry_date=record.expiry_date,
            is_active=record.is_active(self.clock()),
            total_clicks=total,
            clicks=clicks,
        )

    def cleanup_expired(self, now: Optional[datetime] = None) -> int:
        now = now or self.clock()

        with self._lock:
            expired = [
                code for code, (record, _) in self._entries.items()
                if record.expiry_date < now
            ]
            for code in expired:
                del self._entries[code]

        if expired:
            self.logger.info(f"Cleaned up {len(expired)} expired URLs")
            self._emit("info", "cron_job", f"Cleaned up {len(expired)} expired URLs")

        return len(expired)

    def list_urls(self) -> List[UrlSummary]:
        with self._lock:
            rows = [
                UrlSummary(
                    shortcode=record.shortcode,
                    original_url=record.original_url,
                    created_at=record.created_at,
                    expiry_date=record.expiry_date,
                    total_clicks=analytics.total_clicks,
                    last_clicked=analytics.clicks[-1].timestamp if analytics.clicks else None,
                )
                for record, analytics in self._entries.values()
            ]
        return sorted(rows, key=lambda row: row.created_at, reverse=True)

    def get_statistics(self) -> Dict[str, Any]:
        now = self.clock()
        with self._lock:
            total_urls = len(self._entries)
            active_urls = sum(1 for record, _ in self._entries.values() if record.is_active(now))
            total_clicks = sum(analytics.total_clicks for _, analytics in self._entries.values())

        return {
            "total_urls": total_urls,
            "active_urls": active_urls,
            "total_clicks": total_clicks,
        }

    def _emit(self, level: str, package: str, message: str) -> None:
        """Hand an event to the remote sink, if one is attached."""
        if self.event_log is not None:
            self.event_log.log("backend", level, package, message)
