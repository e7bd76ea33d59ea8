"""Approximate geolocation of client IP addresses."""

import ipaddress
import logging
from typing import Optional

import geoip2.database
import geoip2.errors
from tzlocal import get_localzone_name

from ..store.models import Location

LOCAL = "Local"


def local_timezone_name() -> str:
    """IANA name of the server's timezone (e.g. 'Europe/Berlin'), as GeoIP reports it."""
    return get_localzone_name() or "Unknown"


class GeoLocator:
    """Resolve IP addresses to a coarse location.

    Loopback and private addresses resolve to ``Local``. Public addresses
    are looked up in a MaxMind City database when one is configured.
    ``lookup`` never raises; anything unresolved comes back as ``Unknown``.
    """

    def __init__(
        self,
        database_path: Optional[str] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize geolocator.

        Args:
            database_path: Path to a GeoLite2/GeoIP2 City .mmdb file
            logger: Optional logger instance
        """
        self.logger = logger or logging.getLogger(__name__)
        self.reader: Optional[geoip2.database.Reader] = None

        if database_path:
            try:
                self.reader = geoip2.database.Reader(database_path)
                self.logger.info(f"GeoIP database loaded from {database_path}")
            except Exception as e:
                self.logger.error(f"Failed to open GeoIP database {database_path}: {e}")
        else:
            self.logger.info("GeoIP lookups disabled (no database configured)")

    def lookup(self, ip: str) -> Location:
        """Resolve an address.

        Args:
            ip: Client IP address

        Returns:
            Location with Unknown fields for anything unresolved
        """
        try:
            address = ipaddress.ip_address((ip or "").strip())
        except ValueError:
            self.logger.debug(f"Unparseable client address: {ip!r}")
            return Location()

        if address.is_loopback or address.is_private:
            return Location(
                country=LOCAL,
                region=LOCAL,
                city=LOCAL,
                timezone=local_timezone_name(),
            )

        if self.reader is None:
            return Location()

        try:
            response = self.reader.city(str(address))
        except geoip2.errors.AddressNotFoundError:
            return Location()
        except Exception as e:
            self.logger.error(f"Error getting location from IP {ip}: {e}")
            return Location()

        return Location(
            country=response.country.iso_code or "Unknown",
            region=response.subdivisions.most_specific.iso_code or "Unknown",
            city=response.city.name or "Unknown",
            timezone=response.location.time_zone or "Unknown",
        )

    def close(self) -> None:
        """Close the database reader."""
        if self.reader:
            self.reader.close()
            self.reader = None
