"""Data models for the shortcode registry."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Tuple

UNKNOWN = "Unknown"


@dataclass(frozen=True)
class Location:
    """Approximate geolocation of a client address."""

    country: str = UNKNOWN
    region: str = UNKNOWN
    city: str = UNKNOWN
    timezone: str = UNKNOWN

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "country": self.country,
            "region": self.region,
            "city": self.city,
            "timezone": self.timezone,
        }


@dataclass(frozen=True)
class UrlRecord:
    """A shortcode mapping. Immutable once created."""

    shortcode: str
    original_url: str
    created_at: datetime
    expiry_date: datetime

    def is_active(self, now: datetime) -> bool:
        """True while ``now`` has not passed the expiry date."""
        return now <= self.expiry_date

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "shortcode": self.shortcode,
            "original_url": self.original_url,
            "created_at": self.created_at.isoformat(),
            "expiry_date": self.expiry_date.isoformat(),
        }


@dataclass(frozen=True)
class ClickRecord:
    """One redirect event against a shortcode."""

    timestamp: datetime
    ip: str
    user_agent: str = UNKNOWN
    referrer: str = "direct"
    location: Location = field(default_factory=Location)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "timestamp": self.timestamp.isoformat(),
            "ip": self.ip,
            "user_agent": self.user_agent,
            "referrer": self.referrer,
            "location": self.location.to_dict(),
        }


@dataclass
class AnalyticsEntry:
    """Click history owned by exactly one UrlRecord."""

    total_clicks: int = 0
    clicks: List[ClickRecord] = field(default_factory=list)

    def append(self, click: ClickRecord) -> None:
        """Append a click and bump the counter. Caller holds the registry lock."""
        self.clicks.append(click)
        self.total_clicks += 1


@dataclass(frozen=True)
class UrlStats:
    """Point-in-time snapshot of a record and its analytics."""

    shortcode: str
    original_url: str
    created_at: datetime
    expiry_date: datetime
    is_active: bool
    total_clicks: int
    clicks: Tuple[ClickRecord, ...] = ()


@dataclass(frozen=True)
class UrlSummary:
    """Listing row for a present record."""

    shortcode: str
    original_url: str
    created_at: datetime
    expiry_date: datetime
    total_clicks: int
    last_clicked: Optional[datetime] = None
