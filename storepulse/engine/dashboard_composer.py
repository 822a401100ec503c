"""
Dashboard Composer - live dashboard aggregate orchestration.

Pipeline (one synchronous pass per call, no shared state between calls):

    raw events -> EventNormalizer -> filters
               -> WindowedKPICalculator (KPIs, timeline, current-window sets)
               -> DimensionalRollupEngine / HeatmapBuilder (current window)
               -> CorrelationAnalyzer (timeline check-ins vs revenue)
               -> AlertGenerator
               -> DashboardAggregate

Every accumulator is allocated inside `compose`; the composer itself only
holds configuration and stateless collaborators, so one instance can serve
concurrent requests.
"""

from datetime import datetime
from typing import Iterable, Optional, Union

import structlog

from storepulse.config import Settings
from storepulse.engine.alerts import AlertGenerator, AlertThresholds
from storepulse.engine.correlation import CorrelationAnalyzer
from storepulse.engine.event_normalizer import EventNormalizer
from storepulse.engine.heatmap import HeatmapBuilder
from storepulse.engine.kpi_calculator import (
    DEFAULT_SPARKLINE_DAYS,
    DEFAULT_WINDOW_DAYS,
    WindowedKPICalculator,
)
from storepulse.engine.rollup import DEFAULT_ROLLUP_CAP, DimensionalRollupEngine
from storepulse.engine.time_resolver import ZonedTimeResolver
from storepulse.models.dashboard import (
    DashboardAggregate,
    DashboardFilters,
    DashboardMetadata,
    DataPoints,
    Heatmaps,
)
from storepulse.models.events import MasterData, NormalizationResult, RawEvent


class DashboardComposer:
    """
    Composes the live dashboard aggregate from a raw log snapshot.

    Attributes:
        resolver: Zoned time resolver (zone validated at construction)
        kpi_calculator: Windowed KPI calculator
        rollups: Dimensional rollup engine
        heatmaps: Heatmap builder
        correlation: Correlation analyzer
        alerts: Alert generator

    Example:
        >>> composer = DashboardComposer(time_zone="Asia/Bangkok")
        >>> dashboard = composer.compose(events, master_data=master_data)
        >>> dashboard.kpis.revenue.current, dashboard.correlation.strength
    """

    def __init__(
        self,
        time_zone: str = "Asia/Bangkok",
        window_days: int = DEFAULT_WINDOW_DAYS,
        sparkline_days: int = DEFAULT_SPARKLINE_DAYS,
        rollup_cap: Optional[int] = DEFAULT_ROLLUP_CAP,
        thresholds: AlertThresholds = AlertThresholds(),
    ):
        self.resolver = ZonedTimeResolver(time_zone)
        self.kpi_calculator = WindowedKPICalculator(
            self.resolver, window_days=window_days, sparkline_days=sparkline_days
        )
        self.rollups = DimensionalRollupEngine(cap=rollup_cap)
        self.heatmaps = HeatmapBuilder()
        self.correlation = CorrelationAnalyzer()
        self.alerts = AlertGenerator(thresholds)
        self.logger = structlog.get_logger()

    @classmethod
    def from_settings(cls, settings: Settings) -> "DashboardComposer":
        return cls(
            time_zone=settings.app_timezone,
            window_days=settings.kpi_window_days,
            sparkline_days=settings.sparkline_days,
            rollup_cap=settings.rollup_cap,
            thresholds=AlertThresholds(
                revenue_critical_growth=settings.revenue_critical_growth,
                revenue_warning_growth=settings.revenue_warning_growth,
                checkin_warning_growth=settings.checkin_warning_growth,
                low_correlation=settings.low_correlation_threshold,
            ),
        )

    def compose(
        self,
        events: Iterable[Union[RawEvent, dict]],
        master_data: Optional[MasterData] = None,
        filters: Optional[DashboardFilters] = None,
        now: Optional[datetime] = None,
    ) -> DashboardAggregate:
        """
        Build the dashboard aggregate.

        Args:
            events: Raw log snapshot for the reporting period
            master_data: Employee/store/product mappings from the caller
            filters: Optional store/employee filters
            now: Reference instant (default: current time), captured once

        Returns:
            Fully populated DashboardAggregate; zero events give zero values
        """
        master_data = master_data or MasterData()
        windows = self.kpi_calculator.windows(now)

        normalized = EventNormalizer(self.resolver, master_data).normalize(events)
        if filters is not None and not filters.is_empty:
            normalized = _apply_filters(normalized, filters)

        windowed = self.kpi_calculator.compute(
            normalized.attendance, normalized.sales, windows
        )
        stores, employees, products = self.rollups.rollup_all(windowed)

        r = self.correlation.pearson(
            [point.check_ins for point in windowed.timeline],
            [point.revenue for point in windowed.timeline],
        )
        correlation = self.correlation.summarize(r)
        alerts = self.alerts.generate(windowed.kpis, r)

        dashboard = DashboardAggregate(
            kpis=windowed.kpis,
            timeline=windowed.timeline,
            heatmaps=Heatmaps(
                attendance=self.heatmaps.attendance(windowed.attendance_current),
                sales=self.heatmaps.sales(windowed.sales_current),
            ),
            stores=stores,
            employees=employees,
            products=products,
            correlation=correlation,
            alerts=alerts,
            metadata=DashboardMetadata(
                total_employees=len(master_data.employees),
                total_stores=len(master_data.stores),
                total_products=len(master_data.products),
                data_points=DataPoints(
                    attendance=len(normalized.attendance),
                    sales=len(normalized.sales),
                    dropped=len(normalized.dropped),
                ),
                generated_at=windows.reference,
                timezone=self.resolver.tz_name,
                window_days=self.kpi_calculator.window_days,
            ),
        )

        self.logger.info(
            "dashboard_composed",
            attendance=len(normalized.attendance),
            sales=len(normalized.sales),
            dropped=len(normalized.dropped),
            alerts=len(alerts),
            correlation=correlation.value,
        )
        return dashboard


def _apply_filters(
    normalized: NormalizationResult, filters: DashboardFilters
) -> NormalizationResult:
    def keep(record) -> bool:
        if filters.store_name and record.store_name != filters.store_name.strip():
            return False
        if filters.employee_name and record.employee_name != filters.employee_name.strip():
            return False
        return True

    return NormalizationResult(
        attendance=[r for r in normalized.attendance if keep(r)],
        sales=[r for r in normalized.sales if keep(r)],
        dropped=normalized.dropped,
    )
