"""
StorePulse analytics engine components.

This package contains the engines that turn raw attendance and sales logs
into dashboard and report aggregates:

- Time resolution: instants bucketed into zoned calendar parts
- Event normalization: raw log entries -> canonical records (parse or drop)
- KPI calculation: sliding current/previous windows, growth and sparklines
- Rollups: per store, employee and product rankings
- Heatmaps: weekday x hour activity grids
- Correlation and alerts: check-ins vs revenue, threshold alerts
- Sales comparison: unit-normalized monthly product report

All components are stateless between calls: every accumulator is allocated
per computation, and configuration is passed in at construction.
"""

__all__ = [
    "ConfigurationError",
    "ZonedTimeResolver",
    "EventNormalizer",
    "WindowedKPICalculator",
    "DimensionalRollupEngine",
    "HeatmapBuilder",
    "CorrelationAnalyzer",
    "AlertGenerator",
    "AlertThresholds",
    "UnitClassifier",
    "SalesComparisonAggregator",
    "DashboardComposer",
    "SalesReportComposer",
]

from storepulse.engine.alerts import AlertGenerator, AlertThresholds
from storepulse.engine.correlation import CorrelationAnalyzer
from storepulse.engine.dashboard_composer import DashboardComposer
from storepulse.engine.event_normalizer import EventNormalizer
from storepulse.engine.heatmap import HeatmapBuilder
from storepulse.engine.kpi_calculator import WindowedKPICalculator
from storepulse.engine.report_composer import SalesReportComposer
from storepulse.engine.rollup import DimensionalRollupEngine
from storepulse.engine.sales_aggregator import SalesComparisonAggregator, UnitClassifier
from storepulse.engine.time_resolver import ConfigurationError, ZonedTimeResolver
