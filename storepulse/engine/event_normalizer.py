"""
Event Normalizer - raw activity log to canonical records.

This module is the single parse-or-drop boundary of the engine. Raw log
entries arrive with loose, optional payload fields written by the field app;
the normalizer turns each one into exactly one canonical record or one
DroppedEvent, never a partially valid structure.

Rules:
1. Canonical timestamp is `meta.timestamp` when it is a non-empty string,
   otherwise the entry's own `timestamp`. Unparsable -> dropped.
2. String fields are trimmed; empty or missing values resolve through
   master data (by id) and then default to "ไม่ระบุ" (unspecified).
3. Sales `total` and `quantity` must be finite numbers. Missing values count
   as 0; present but unusable values drop the record.
4. Attendance status is lower-cased; only "check-out" is a check-out.

The same timestamp and numeric rules apply to sales ledger rows used by the
comparison report (`normalize_sales_rows`).
"""

import math
import re
from datetime import datetime
from typing import Any, Iterable, Optional, Union

import structlog
from dateutil.parser import ParserError
from dateutil.parser import parse as dateutil_parse
from pydantic import BaseModel, ValidationError

from storepulse.engine.time_resolver import ZonedDateParts, ZonedTimeResolver, as_utc
from storepulse.models.enums import AttendanceStatus, DropReason, EventScope
from storepulse.models.events import (
    UNSPECIFIED,
    AttendanceRecord,
    DroppedEvent,
    MasterData,
    NormalizationResult,
    RawEvent,
    SalesLineItem,
    SalesLineRecord,
    SalesRecord,
)

_DATE_ONLY = re.compile(r"^\s*(\d{4})-(\d{2})-(\d{2})\s*$")

# Fill values dateutil uses for missing date parts; they differ in every part
_FILL_A = datetime(2000, 1, 1)
_FILL_B = datetime(2001, 2, 2)


class _Drop(Exception):
    """Internal signal carrying the reason a record is excluded."""

    def __init__(self, reason: DropReason):
        super().__init__(reason.value)
        self.reason = reason


class EventNormalizer:
    """
    Maps heterogeneous raw events into AttendanceRecord / SalesRecord.

    Attributes:
        resolver: Zoned time resolver used to bucket every record
        master_data: Optional id -> name mappings for name fallback

    Example:
        >>> normalizer = EventNormalizer(ZonedTimeResolver("Asia/Bangkok"))
        >>> result = normalizer.normalize(raw_events)
        >>> len(result.attendance), len(result.sales), len(result.dropped)
    """

    def __init__(
        self,
        resolver: ZonedTimeResolver,
        master_data: Optional[MasterData] = None,
    ):
        self.resolver = resolver
        self.master_data = master_data or MasterData()
        self.logger = structlog.get_logger()

    def normalize(
        self, events: Iterable[Union[RawEvent, dict]]
    ) -> NormalizationResult:
        """
        Normalize an ordered sequence of raw events.

        Args:
            events: Raw log entries (models or plain dicts), attendance and
                sales scopes interleaved

        Returns:
            NormalizationResult with canonical records in input order and
            one DroppedEvent per excluded entry
        """
        result = NormalizationResult()

        for index, raw in enumerate(events):
            try:
                event = _coerce(raw, RawEvent)
            except ValidationError:
                scope = raw.get("scope") if isinstance(raw, dict) else None
                result.dropped.append(
                    DroppedEvent(
                        index=index,
                        scope=str(scope or ""),
                        reason=DropReason.MALFORMED_PAYLOAD,
                    )
                )
                continue

            try:
                if event.scope == EventScope.ATTENDANCE.value:
                    result.attendance.append(self._to_attendance(event))
                elif event.scope == EventScope.SALES.value:
                    result.sales.append(self._to_sales(event))
                else:
                    raise _Drop(DropReason.UNKNOWN_SCOPE)
            except _Drop as drop:
                result.dropped.append(
                    DroppedEvent(index=index, scope=event.scope, reason=drop.reason)
                )
                self.logger.debug(
                    "event_dropped",
                    index=index,
                    scope=event.scope,
                    reason=drop.reason.value,
                )

        self.logger.info(
            "events_normalized",
            attendance=len(result.attendance),
            sales=len(result.sales),
            dropped=len(result.dropped),
        )
        return result

    def normalize_sales_rows(
        self, rows: Iterable[Union[SalesLineItem, dict]]
    ) -> tuple[list[SalesLineRecord], list[DroppedEvent]]:
        """
        Normalize sales ledger rows for the comparison report.

        `recorded_date` values that are plain dates (YYYY-MM-DD) are taken as
        calendar dates; full timestamps are bucketed in the configured zone.

        Returns:
            Tuple of (normalized rows, dropped rows)
        """
        records: list[SalesLineRecord] = []
        dropped: list[DroppedEvent] = []

        for index, raw in enumerate(rows):
            try:
                row = _coerce(raw, SalesLineItem)
            except ValidationError:
                dropped.append(
                    DroppedEvent(
                        index=index,
                        scope=EventScope.SALES.value,
                        reason=DropReason.MALFORMED_PAYLOAD,
                    )
                )
                continue

            try:
                year, month = self._calendar_month(row.recorded_date)
                records.append(
                    SalesLineRecord(
                        product_code=_clean(row.product_code) or "",
                        product_name=_clean(row.product_name) or UNSPECIFIED,
                        unit_name=_clean(row.unit_name) or "",
                        quantity=_finite(row.quantity, DropReason.NON_FINITE_QUANTITY),
                        total=_finite(row.total, DropReason.NON_FINITE_TOTAL),
                        year=year,
                        month=month,
                        employee_name=_clean(row.employee_name) or UNSPECIFIED,
                        store_name=_clean(row.store_name) or UNSPECIFIED,
                    )
                )
            except _Drop as drop:
                dropped.append(
                    DroppedEvent(index=index, scope=EventScope.SALES.value, reason=drop.reason)
                )

        self.logger.info(
            "sales_rows_normalized",
            rows=len(records),
            dropped=len(dropped),
        )
        return records, dropped

    # =========================================================================
    # Per-scope transforms
    # =========================================================================

    def _to_attendance(self, event: RawEvent) -> AttendanceRecord:
        meta = event.meta or {}
        timestamp = self._canonical_timestamp(event)
        parts = self.resolver.resolve(timestamp)

        status_raw = meta.get("status")
        status = (
            AttendanceStatus.CHECK_OUT
            if isinstance(status_raw, str)
            and status_raw.strip().lower() == AttendanceStatus.CHECK_OUT.value
            else AttendanceStatus.CHECK_IN
        )

        return AttendanceRecord(
            timestamp_utc=timestamp,
            **_bucket_fields(parts),
            store_name=self._store_name(meta),
            employee_name=self._employee_name(meta),
            status=status,
        )

    def _to_sales(self, event: RawEvent) -> SalesRecord:
        meta = event.meta or {}
        timestamp = self._canonical_timestamp(event)
        total = _finite(meta.get("total"), DropReason.NON_FINITE_TOTAL)
        quantity = _finite(meta.get("quantity"), DropReason.NON_FINITE_QUANTITY)
        parts = self.resolver.resolve(timestamp)

        product = self.master_data.products.get(str(meta.get("productId", "")))

        return SalesRecord(
            timestamp_utc=timestamp,
            **_bucket_fields(parts),
            store_name=self._store_name(meta),
            employee_name=self._employee_name(meta),
            product_name=(
                _clean(meta.get("productName"))
                or (_clean(product.name) if product else None)
                or UNSPECIFIED
            ),
            product_code=(
                _clean(meta.get("productCode"))
                or (_clean(product.code) if product else None)
                or ""
            ),
            unit_name=_clean(meta.get("unitName")) or _clean(meta.get("unit")) or "",
            total=total,
            quantity=quantity,
            status=(_clean(meta.get("status")) or "completed").lower(),
        )

    # =========================================================================
    # Field helpers
    # =========================================================================

    def _canonical_timestamp(self, event: RawEvent) -> datetime:
        meta_ts = (event.meta or {}).get("timestamp")
        raw = meta_ts if isinstance(meta_ts, str) and meta_ts else event.timestamp
        parsed = parse_instant(raw)
        if parsed is None:
            raise _Drop(DropReason.UNPARSABLE_TIMESTAMP)
        return parsed

    def _calendar_month(self, recorded_date: Optional[str]) -> tuple[int, int]:
        if recorded_date:
            match = _DATE_ONLY.match(recorded_date)
            if match:
                year, month = int(match.group(1)), int(match.group(2))
                if 1 <= month <= 12:
                    return year, month
                raise _Drop(DropReason.UNPARSABLE_TIMESTAMP)
        parsed = parse_instant(recorded_date)
        if parsed is None:
            raise _Drop(DropReason.UNPARSABLE_TIMESTAMP)
        parts = self.resolver.resolve(parsed)
        return parts.year, parts.month

    def _employee_name(self, meta: dict[str, Any]) -> str:
        return (
            _clean(meta.get("employeeName"))
            or _clean(self.master_data.employees.get(str(meta.get("employeeId", ""))))
            or UNSPECIFIED
        )

    def _store_name(self, meta: dict[str, Any]) -> str:
        return (
            _clean(meta.get("storeName"))
            or _clean(self.master_data.stores.get(str(meta.get("storeId", ""))))
            or UNSPECIFIED
        )


def parse_instant(value: Any) -> Optional[datetime]:
    """
    Parse a timestamp string into an aware UTC datetime.

    Returns None for missing or unparsable values, and for partial values
    ("10:30", "March", "Monday") that do not name a full calendar date.
    Naive timestamps are taken as UTC.
    """
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    try:
        # A full date parses identically against both defaults
        parsed = dateutil_parse(text, default=_FILL_A)
        if dateutil_parse(text, default=_FILL_B) != parsed:
            return None
    except (ParserError, ValueError, OverflowError, TypeError):
        return None
    return as_utc(parsed)


def _coerce(raw: Any, model: type[BaseModel]) -> Any:
    if isinstance(raw, model):
        return raw
    return model.model_validate(raw)


def _bucket_fields(parts: ZonedDateParts) -> dict[str, Any]:
    return {
        "day_key": parts.day_key,
        "month_key": parts.month_key,
        "year_key": parts.year_key,
        "hour_of_day": parts.hour,
        "weekday": parts.weekday,
    }


def _clean(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _finite(value: Any, reason: DropReason) -> float:
    """Coerce a payload number; missing is 0, anything unusable drops."""
    if value is None:
        return 0.0
    if isinstance(value, bool):
        raise _Drop(reason)
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            raise _Drop(reason)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            raise _Drop(reason)
    else:
        raise _Drop(reason)
    if not math.isfinite(number):
        raise _Drop(reason)
    return number
