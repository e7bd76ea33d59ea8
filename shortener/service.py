"""Business logic service for URL shortener."""

import asyncio
import logging
from typing import Optional, Dict, Any, Callable, List
from datetime import datetime, timedelta

from .shortcode import ShortCodeGenerator
from .store.base import UrlRegistryBase
from .store.memory import utc_now
from .store.models import UrlRecord, UrlStats, UrlSummary
from .common.geolocation import GeoLocator
from .common.remote_log import RemoteLogger
from .common.validators import (
    is_valid_url,
    is_internal_host,
    is_valid_short_code,
    is_valid_validity,
    MIN_VALIDITY_MINUTES,
    MAX_VALIDITY_MINUTES,
)
from .errors import ValidationError, ConflictError, NotFoundError, ExhaustionError

SHORT_CODE_RULE = "Shortcode must be 3-20 alphanumeric characters"


class URLShortenerService:
    """Service layer for URL shortening business logic.

    Validates input, raises typed errors, and drives the registry. The
    registry itself never raises for missing or expired codes.
    """

    def __init__(
        self,
        registry: UrlRegistryBase,
        short_code_generator: Optional[ShortCodeGenerator] = None,
        geolocator: Optional[GeoLocator] = None,
        event_log: Optional[RemoteLogger] = None,
        logger: Optional[logging.Logger] = None,
        default_validity_minutes: int = 30,
        max_generation_attempts: int = 10,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """Initialize URL shortener service.

        Args:
            registry: Shortcode registry
            short_code_generator: Optional short code generator
            geolocator: Optional IP geolocator
            event_log: Optional remote log sink
            logger: Optional logger
            default_validity_minutes: Validity used when none is given
            max_generation_attempts: Attempts before giving up on auto-generation
            clock: Optional time source (defaults to UTC now)
        """
        self.registry = registry
        self.generator = short_code_generator or ShortCodeGenerator()
        self.geolocator = geolocator or GeoLocator(logger=logger)
        self.event_log = event_log
        self.logger = logger or logging.getLogger(__name__)
        self.default_validity_minutes = default_validity_minutes
        self.max_generation_attempts = max_generation_attempts
        self.clock = clock or utc_now

    async def create_short_url(
        self,
        original_url: Optional[str],
        validity_minutes: Optional[int] = None,
        custom_code: Optional[str] = None,
    ) -> UrlRecord:
        """Create a new short URL.

        Args:
            original_url: The original long URL
            validity_minutes: Minutes until expiry (default if None)
            custom_code: Optional custom short code

        Returns:
            The created record

        Raises:
            ValidationError: If url, validity or custom code is invalid
            ConflictError: If the custom code is already present
            ExhaustionError: If no free code was generated
        """
        if not original_url:
            self.logger.warning("Missing required field: url")
            raise ValidationError("URL is required", ["url field is missing"])

        if not is_valid_url(original_url):
            self.logger.warning(f"Invalid URL format: {original_url}")
            raise ValidationError(
                "Invalid URL format", ["Please provide a valid HTTP/HTTPS URL"]
            )

        if is_internal_host(original_url):
            self.logger.warning(f"URL with internal/localhost domain detected: {original_url}")
            self._emit("warn", "utils", f"Internal/localhost domain detected: {original_url}")

        if validity_minutes is None:
            validity_minutes = self.default_validity_minutes

        if not is_valid_validity(validity_minutes):
            self.logger.warning(f"Invalid validity period: {validity_minutes}")
            raise ValidationError(
                "Invalid validity period",
                [
                    f"Validity must be between {MIN_VALIDITY_MINUTES} and "
                    f"{MAX_VALIDITY_MINUTES} minutes (1 year)"
                ],
            )

        created_at = self.clock()
        expiry_date = created_at + timedelta(minutes=validity_minutes)

        if custom_code:
            if not is_valid_short_code(custom_code):
                self.logger.warning(f"Invalid shortcode format: {custom_code}")
                raise ValidationError("Invalid shortcode format", [SHORT_CODE_RULE])

            record = self.registry.create(custom_code, original_url, expiry_date, created_at)
            if record is None:
                self.logger.warning(f"Shortcode already exists: {custom_code}")
                raise ConflictError(
                    f"Shortcode '{custom_code}' already exists",
                    ["The provided shortcode is already in use"],
                )
        else:
            record = self._create_with_generated_code(original_url, expiry_date, created_at)

        self.logger.info(
            f"Created short URL: {record.shortcode} -> {original_url} "
            f"(valid {validity_minutes} min)"
        )
        return record

    async def resolve(self, short_code: str) -> UrlRecord:
        """Get the active record for a short code.

        Raises:
            ValidationError: If the code format is invalid
            NotFoundError: If the code is missing or expired
        """
        self._check_format(short_code)

        record = self.registry.find_active(short_code)
        if record is None:
            raise NotFoundError(
                "Short URL not found or has expired",
                ["The requested shortcode does not exist or has expired"],
            )
        return record

    async def redirect(
        self,
        short_code: str,
        ip: str,
        user_agent: str = "Unknown",
        referrer: str = "direct",
    ) -> str:
        """Resolve a short code and record the visit.

        A click that cannot be recorded is logged as an internal error; the
        redirect target is still returned.

        Returns:
            The original URL to redirect to
        """
        record = await self.resolve(short_code)

        location = self.geolocator.lookup(ip)
        recorded = self.registry.record_click(
            short_code,
            ip=ip,
            user_agent=user_agent or "Unknown",
            referrer=referrer,
            location=location,
        )

        if not recorded:
            self.logger.error(f"Failed to record click analytics for {short_code} from {ip}")

        self.logger.info(
            f"Redirecting {short_code} -> {record.original_url} "
            f"(ip={ip}, location={location.city}, {location.country})"
        )
        return record.original_url

    async def get_url_stats(self, short_code: str) -> UrlStats:
        """Get analytics for a short code.

        Raises:
            ValidationError: If the code format is invalid
            NotFoundError: If the code is missing or expired
        """
        self._check_format(short_code)

        stats = self.registry.get_analytics(short_code)
        if stats is not None and not stats.is_active:
            self.logger.warning(
                f"Statistics requested for expired short URL: {short_code} "
                f"(expired {stats.expiry_date.isoformat()})"
            )
            self._emit("warn", "handler", f"Short URL expired: {short_code}")
        if stats is None or not stats.is_active:
            raise NotFoundError(
                "Short URL not found",
                ["The requested shortcode does not exist or has expired"],
            )

        self.logger.info(
            f"URL statistics retrieved: {short_code} "
            f"(clicks={stats.total_clicks}, active={stats.is_active})"
        )
        return stats

    async def list_urls(self) -> List[UrlSummary]:
        """List all present short URLs, newest first."""
        return self.registry.list_urls()

    async def cleanup_expired(self) -> int:
        """Purge expired records.

        Returns:
            Number of records removed
        """
        return self.registry.cleanup_expired(self.clock())

    async def get_statistics(self) -> Dict[str, Any]:
        """Get service statistics."""
        return self.registry.get_statistics()

    async def health_check(self) -> Dict[str, Any]:
        """Perform health check.

        The registry is in-process, so the service is healthy whenever it
        can answer. Remote log delivery is reported but never fails health.
        """
        return {
            "overall": True,
            "remote_log_enabled": bool(self.event_log and self.event_log.enabled),
        }

    async def close(self) -> None:
        """Release collaborators."""
        self.geolocator.close()
        if self.event_log:
            await asyncio.to_thread(self.event_log.close)

    def _create_with_generated_code(
        self,
        original_url: str,
        expiry_date: datetime,
        created_at: datetime,
    ) -> UrlRecord:
        """Claim a random code, retrying on collision.

        Each attempt is an atomic create-if-absent, so a code checked here
        cannot be claimed by a concurrent request in between.

        Raises:
            ExhaustionError: If every attempt collided
        """
        for attempt in range(1, self.max_generation_attempts + 1):
            code = self.generator.generate_random()
            record = self.registry.create(code, original_url, expiry_date, created_at)
            if record is not None:
                if attempt > 1:
                    self.logger.debug(f"Generated code after {attempt} attempts: {code}")
                return record

        self.logger.error(
            f"Failed to generate unique shortcode after {self.max_generation_attempts} attempts"
        )
        self._emit(
            "error",
            "handler",
            f"Shortcode generation exhausted after {self.max_generation_attempts} attempts",
        )
        raise ExhaustionError("Unable to generate unique shortcode", ["Please try again"])

    def _check_format(self, short_code: str) -> None:
        if not is_valid_short_code(short_code):
            self.logger.warning(f"Invalid shortcode format: {short_code}")
            raise ValidationError("Invalid shortcode format", [SHORT_CODE_RULE])

    def _emit(self, level: str, package: str, message: str) -> None:
        if self.event_log is not None:
            self.event_log.log("backend", level, package, message)
