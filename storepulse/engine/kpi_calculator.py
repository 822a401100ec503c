"""
Windowed KPI Calculator - current window vs previous window.

Compares two fixed-length adjacent sliding windows anchored on a single
reference instant captured once per invocation:

    previous = [now - 2N days, now - N days)
    current  = [now - N days, ...)

The windows are sliding, not calendar aligned.

KPIs:
- revenue: sum of sales totals
- transactions: number of sales records
- avg_ticket: revenue / transactions
- check_ins: number of check-in events
- active_employees: distinct employee names over check-in events only

Each KPI also carries a sparkline: the last `sparkline_days` entries of the
day-keyed timeline of the current window, oldest first.
"""

from datetime import datetime, timedelta
from typing import NamedTuple, Optional, Sequence, Union

import structlog

from storepulse.engine.ratios import growth_percent, safe_divide
from storepulse.engine.time_resolver import ConfigurationError, ZonedTimeResolver, as_utc
from storepulse.models.dashboard import KPIResult, KPISet, TimelinePoint
from storepulse.models.events import AttendanceRecord, SalesRecord

DEFAULT_WINDOW_DAYS = 30
DEFAULT_SPARKLINE_DAYS = 7


class ReportingWindows(NamedTuple):
    """Current and previous window bounds for one invocation."""

    reference: datetime
    current_start: datetime
    previous_start: datetime

    @classmethod
    def from_reference(cls, reference: datetime, days: int) -> "ReportingWindows":
        reference = as_utc(reference)
        length = timedelta(days=days)
        return cls(
            reference=reference,
            current_start=reference - length,
            previous_start=reference - 2 * length,
        )

    def in_current(self, instant: datetime) -> bool:
        return instant >= self.current_start

    def in_previous(self, instant: datetime) -> bool:
        return self.previous_start <= instant < self.current_start


class WindowedKPIs(NamedTuple):
    """Output of one KPI pass, plus the current-window record sets."""

    kpis: KPISet
    timeline: list[TimelinePoint]
    attendance_current: list[AttendanceRecord]
    sales_current: list[SalesRecord]


class _DayBucket:
    __slots__ = ("check_ins", "check_outs", "revenue", "transactions", "employees")

    def __init__(self) -> None:
        self.check_ins = 0
        self.check_outs = 0
        self.revenue = 0.0
        self.transactions = 0
        self.employees: set[str] = set()


class WindowedKPICalculator:
    """
    Computes the five dashboard KPIs and the daily timeline.

    Attributes:
        resolver: Zoned time resolver for day keys
        window_days: Length of each window in days
        sparkline_days: Number of trailing timeline entries per sparkline

    Example:
        >>> calculator = WindowedKPICalculator(ZonedTimeResolver("Asia/Bangkok"))
        >>> windows = calculator.windows(datetime.now(timezone.utc))
        >>> result = calculator.compute(attendance, sales, windows)
        >>> result.kpis.revenue.growth_percent
    """

    def __init__(
        self,
        resolver: ZonedTimeResolver,
        window_days: int = DEFAULT_WINDOW_DAYS,
        sparkline_days: int = DEFAULT_SPARKLINE_DAYS,
    ):
        if window_days <= 0:
            raise ConfigurationError(f"window_days must be positive, got {window_days}")
        if sparkline_days <= 0:
            raise ConfigurationError(
                f"sparkline_days must be positive, got {sparkline_days}"
            )
        self.resolver = resolver
        self.window_days = window_days
        self.sparkline_days = sparkline_days
        self.logger = structlog.get_logger()

    def windows(self, now: Optional[datetime] = None) -> ReportingWindows:
        """Capture the reference instant once and derive both windows."""
        return ReportingWindows.from_reference(
            now or datetime.now().astimezone(), self.window_days
        )

    def compute(
        self,
        attendance: Sequence[AttendanceRecord],
        sales: Sequence[SalesRecord],
        windows: ReportingWindows,
    ) -> WindowedKPIs:
        """
        Compute KPIs for both windows and the current-window timeline.

        Args:
            attendance: Normalized attendance records (any period)
            sales: Normalized sales records (any period)
            windows: Window bounds captured for this invocation

        Returns:
            WindowedKPIs with the KPI set, timeline and current-window records
        """
        attendance_current = [r for r in attendance if windows.in_current(r.timestamp_utc)]
        attendance_previous = [r for r in attendance if windows.in_previous(r.timestamp_utc)]
        sales_current = [r for r in sales if windows.in_current(r.timestamp_utc)]
        sales_previous = [r for r in sales if windows.in_previous(r.timestamp_utc)]

        timeline = self.build_timeline(attendance_current, sales_current, windows)
        spark = timeline[-self.sparkline_days:]

        revenue_current = sum(r.total for r in sales_current)
        revenue_previous = sum(r.total for r in sales_previous)
        ticket_current = safe_divide(revenue_current, len(sales_current))
        ticket_previous = safe_divide(revenue_previous, len(sales_previous))
        check_ins_current = sum(1 for r in attendance_current if r.is_check_in)
        check_ins_previous = sum(1 for r in attendance_previous if r.is_check_in)
        active_current = _active_employees(attendance_current)
        active_previous = _active_employees(attendance_previous)

        kpis = KPISet(
            revenue=_kpi(revenue_current, revenue_previous, [p.revenue for p in spark], 2),
            transactions=_kpi(
                len(sales_current),
                len(sales_previous),
                [p.transactions for p in spark],
            ),
            avg_ticket=_kpi(ticket_current, ticket_previous, [p.avg_ticket for p in spark], 2),
            check_ins=_kpi(
                check_ins_current, check_ins_previous, [p.check_ins for p in spark]
            ),
            active_employees=_kpi(
                active_current, active_previous, [p.active_employees for p in spark]
            ),
        )

        self.logger.debug(
            "kpis_computed",
            revenue_current=kpis.revenue.current,
            revenue_growth=kpis.revenue.growth_percent,
            check_in_growth=kpis.check_ins.growth_percent,
            current_records=len(attendance_current) + len(sales_current),
            previous_records=len(attendance_previous) + len(sales_previous),
        )

        return WindowedKPIs(
            kpis=kpis,
            timeline=timeline,
            attendance_current=attendance_current,
            sales_current=sales_current,
        )

    def build_timeline(
        self,
        attendance_current: Sequence[AttendanceRecord],
        sales_current: Sequence[SalesRecord],
        windows: ReportingWindows,
    ) -> list[TimelinePoint]:
        """
        Build the daily timeline of the current window.

        The timeline is pre-seeded with every zoned day of the window so days
        without activity appear as zero rows. Records whose day key falls
        outside the seeded days are ignored.
        """
        days: dict[str, _DayBucket] = {
            key: _DayBucket()
            for key in self.resolver.trailing_day_keys(windows.reference, self.window_days)
        }

        for record in attendance_current:
            bucket = days.get(record.day_key)
            if bucket is None:
                continue
            if record.is_check_in:
                bucket.check_ins += 1
                bucket.employees.add(record.employee_name)
            else:
                bucket.check_outs += 1

        for record in sales_current:
            bucket = days.get(record.day_key)
            if bucket is None:
                continue
            bucket.revenue += record.total
            bucket.transactions += 1

        return [
            TimelinePoint(
                date=key,
                check_ins=bucket.check_ins,
                check_outs=bucket.check_outs,
                revenue=round(bucket.revenue, 2),
                transactions=bucket.transactions,
                active_employees=len(bucket.employees),
                avg_ticket=round(safe_divide(bucket.revenue, bucket.transactions), 2),
            )
            for key, bucket in days.items()
        ]


def _active_employees(records: Sequence[AttendanceRecord]) -> int:
    return len({r.employee_name for r in records if r.is_check_in})


def _kpi(
    current: Union[int, float],
    previous: Union[int, float],
    sparkline: list,
    digits: Optional[int] = None,
) -> KPIResult:
    growth = round(growth_percent(current, previous), 2)
    if digits is not None:
        current, previous = round(current, digits), round(previous, digits)
    return KPIResult(
        current=current,
        previous=previous,
        growth_percent=growth,
        sparkline=sparkline,
    )
