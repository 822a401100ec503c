"""
Zoned Time Resolver.

Converts absolute instants into calendar parts in one configured IANA time
zone so that every component buckets events into the same local days and
hours, regardless of the zone the log store wrote them in.

The zone is resolved once, at construction. An unknown or empty zone is a
configuration error and raises immediately; it is never a per-call failure.
"""

from datetime import datetime, timedelta, timezone
from typing import NamedTuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


class ConfigurationError(ValueError):
    """Raised when an engine component is constructed with invalid settings."""


class ZonedDateParts(NamedTuple):
    """Calendar parts of an instant in the configured zone."""

    year: int
    month: int
    day: int
    hour: int
    minute: int
    second: int
    weekday: int  # 0=Sunday .. 6=Saturday

    @property
    def day_key(self) -> str:
        return f"{self.year}-{self.month:02d}-{self.day:02d}"

    @property
    def month_key(self) -> str:
        return f"{self.year}-{self.month:02d}"

    @property
    def year_key(self) -> str:
        return f"{self.year}"


class ZonedTimeResolver:
    """
    Resolves instants into calendar parts in a fixed time zone.

    Attributes:
        tz_name: IANA zone identifier the resolver was built with
        zone: Resolved ZoneInfo

    Example:
        >>> resolver = ZonedTimeResolver("Asia/Bangkok")
        >>> parts = resolver.resolve(datetime(2026, 2, 10, 18, 0, tzinfo=timezone.utc))
        >>> parts.day_key, parts.hour, parts.weekday
        ('2026-02-11', 1, 3)
    """

    def __init__(self, tz_name: str):
        if not tz_name or not tz_name.strip():
            raise ConfigurationError("Time zone identifier must not be empty")
        try:
            self.zone = ZoneInfo(tz_name.strip())
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ConfigurationError(f"Unknown time zone: {tz_name}") from e
        self.tz_name = tz_name.strip()

    def resolve(self, instant: datetime) -> ZonedDateParts:
        """
        Convert an instant into calendar parts in the configured zone.

        Naive datetimes are interpreted as UTC.
        """
        local = as_utc(instant).astimezone(self.zone)
        return ZonedDateParts(
            year=local.year,
            month=local.month,
            day=local.day,
            hour=local.hour,
            minute=local.minute,
            second=local.second,
            # isoweekday: Monday=1 .. Sunday=7
            weekday=local.isoweekday() % 7,
        )

    def day_key(self, instant: datetime) -> str:
        return self.resolve(instant).day_key

    def month_key(self, instant: datetime) -> str:
        return self.resolve(instant).month_key

    def year_key(self, instant: datetime) -> str:
        return self.resolve(instant).year_key

    def trailing_day_keys(self, reference: datetime, days: int) -> list[str]:
        """
        Zoned day keys of the `days` days ending at `reference`, oldest first.

        Steps back in exact 24-hour increments from the reference instant.
        Duplicate keys (possible across DST transitions) are collapsed.
        """
        reference = as_utc(reference)
        keys: list[str] = []
        for offset in range(days - 1, -1, -1):
            key = self.day_key(reference - timedelta(days=offset))
            if not keys or keys[-1] != key:
                keys.append(key)
        return keys


def as_utc(instant: datetime) -> datetime:
    """Return `instant` as an aware UTC datetime (naive is taken as UTC)."""
    if instant.tzinfo is None:
        return instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(timezone.utc)
