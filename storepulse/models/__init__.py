"""
Pydantic v2 data models for the StorePulse analytics engine.

Model Organization:
    - enums: Enumeration types for consistent classification
    - events: Raw activity-log events, master data and canonical records
    - dashboard: Live dashboard aggregate (KPIs, heatmaps, rollups, alerts)
    - sales_report: Unit-normalized multi-month sales comparison report

Usage:
    >>> from storepulse.models import RawEvent
    >>> event = RawEvent(
    ...     scope="attendance",
    ...     timestamp="2026-02-10T01:05:00Z",
    ...     meta={"employeeName": "Somchai", "storeName": "Lotus Rama 4", "status": "check-in"},
    ... )
"""

from .enums import (
    AlertSeverity,
    AttendanceStatus,
    CorrelationStrength,
    DropReason,
    EventScope,
    UnitCategory,
)
from .events import (
    UNSPECIFIED,
    AttendanceRecord,
    DroppedEvent,
    MasterData,
    NormalizationResult,
    ProductRef,
    RawEvent,
    SalesLineItem,
    SalesLineRecord,
    SalesRecord,
)
from .dashboard import (
    Alert,
    CorrelationResult,
    DashboardAggregate,
    DashboardFilters,
    DashboardMetadata,
    DataPoints,
    EmployeeMetric,
    Heatmaps,
    KPIResult,
    KPISet,
    ProductMetric,
    StoreMetric,
    TimelinePoint,
)
from .sales_report import (
    THAI_MONTH_NAMES,
    MonthlySalesEntry,
    ProductAggregation,
    ProductSalesComparison,
    SalesComparisonMetadata,
    SalesComparisonReport,
    SalesReportScope,
    UnitCategorySales,
    UnitSalesBreakdown,
)

__all__ = [
    # Enumerations
    "AlertSeverity",
    "AttendanceStatus",
    "CorrelationStrength",
    "DropReason",
    "EventScope",
    "UnitCategory",
    # Event models
    "UNSPECIFIED",
    "AttendanceRecord",
    "DroppedEvent",
    "MasterData",
    "NormalizationResult",
    "ProductRef",
    "RawEvent",
    "SalesLineItem",
    "SalesLineRecord",
    "SalesRecord",
    # Dashboard models
    "Alert",
    "CorrelationResult",
    "DashboardAggregate",
    "DashboardFilters",
    "DashboardMetadata",
    "DataPoints",
    "EmployeeMetric",
    "Heatmaps",
    "KPIResult",
    "KPISet",
    "ProductMetric",
    "StoreMetric",
    "TimelinePoint",
    # Sales report models
    "THAI_MONTH_NAMES",
    "MonthlySalesEntry",
    "ProductAggregation",
    "ProductSalesComparison",
    "SalesComparisonMetadata",
    "SalesComparisonReport",
    "SalesReportScope",
    "UnitCategorySales",
    "UnitSalesBreakdown",
]
