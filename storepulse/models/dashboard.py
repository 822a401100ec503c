"""
Dashboard aggregate models.

The dashboard aggregate is the single response shape of the dashboard
composer: period-over-period KPIs, a daily timeline, weekday x hour heatmaps,
ranked store/employee/product rollups, the attendance/revenue correlation,
alerts, and run metadata.
"""

from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel, Field, field_validator

from .enums import AlertSeverity, CorrelationStrength

HEATMAP_ROWS = 7
HEATMAP_COLUMNS = 24


class DashboardFilters(BaseModel):
    """Optional exact-match filters applied to normalized records."""

    store_name: Optional[str] = Field(default=None, description="Keep only this store")
    employee_name: Optional[str] = Field(
        default=None, description="Keep only this employee"
    )

    @property
    def is_empty(self) -> bool:
        return not self.store_name and not self.employee_name


class KPIResult(BaseModel):
    """
    Current vs previous window value for one KPI.

    Attributes:
        current: Value over the current window
        previous: Value over the previous window
        growth_percent: (current - previous) / previous * 100, 0 when previous is 0
        sparkline: Trailing daily values, oldest first

    Count KPIs (transactions, check-ins, active employees) stay integers.
    """

    current: Union[int, float] = 0
    previous: Union[int, float] = 0
    growth_percent: float = 0.0
    sparkline: list[Union[int, float]] = Field(default_factory=list)


class KPISet(BaseModel):
    """The five headline KPIs of the dashboard."""

    revenue: KPIResult
    transactions: KPIResult
    avg_ticket: KPIResult
    check_ins: KPIResult
    active_employees: KPIResult


class TimelinePoint(BaseModel):
    """One zoned calendar day of the current window."""

    date: str = Field(description="YYYY-MM-DD in the configured zone")
    check_ins: int = 0
    check_outs: int = 0
    revenue: float = 0.0
    transactions: int = 0
    active_employees: int = 0
    avg_ticket: float = 0.0


class Heatmaps(BaseModel):
    """Weekday (rows, 0=Sunday) x hour (columns) grids."""

    attendance: list[list[int]]
    sales: list[list[float]]

    @field_validator("attendance", "sales")
    @classmethod
    def validate_grid_shape(cls, v: list[list]) -> list[list]:
        """Grids are always 7 x 24."""
        if len(v) != HEATMAP_ROWS or any(len(row) != HEATMAP_COLUMNS for row in v):
            raise ValueError(f"Heatmap must be {HEATMAP_ROWS}x{HEATMAP_COLUMNS}")
        return v


class StoreMetric(BaseModel):
    """Store rollup row."""

    name: str
    check_ins: int = 0
    revenue: float = 0.0
    transactions: int = 0
    avg_ticket: float = 0.0
    active_employees: int = 0
    efficiency: float = Field(default=0.0, description="Revenue per check-in")


class EmployeeMetric(BaseModel):
    """Employee rollup row."""

    name: str
    check_ins: int = 0
    revenue: float = 0.0
    transactions: int = 0
    avg_ticket: float = 0.0
    stores_worked: int = 0
    products_sold: int = 0
    productivity: float = Field(default=0.0, description="Transactions per check-in")


class ProductMetric(BaseModel):
    """Product rollup row."""

    name: str
    revenue: float = 0.0
    quantity: float = 0.0
    transactions: int = 0
    avg_price: float = Field(default=0.0, description="Revenue per unit sold")
    active_employees: int = 0
    stores_sold: int = 0


class CorrelationResult(BaseModel):
    """Pearson coefficient between daily check-ins and daily revenue."""

    value: float = Field(default=0.0, ge=-1.0, le=1.0)
    strength: CorrelationStrength = CorrelationStrength.WEAK


class Alert(BaseModel):
    """Threshold alert emitted for the current dashboard computation."""

    type: AlertSeverity
    message: str


class DataPoints(BaseModel):
    """Record counts seen by the normalizer."""

    attendance: int = 0
    sales: int = 0
    dropped: int = 0


class DashboardMetadata(BaseModel):
    """Run metadata for the dashboard aggregate."""

    total_employees: int = 0
    total_stores: int = 0
    total_products: int = 0
    data_points: DataPoints = Field(default_factory=DataPoints)
    generated_at: datetime
    timezone: str
    window_days: int


class DashboardAggregate(BaseModel):
    """Complete live dashboard payload."""

    kpis: KPISet
    timeline: list[TimelinePoint]
    heatmaps: Heatmaps
    stores: list[StoreMetric]
    employees: list[EmployeeMetric]
    products: list[ProductMetric]
    correlation: CorrelationResult
    alerts: list[Alert]
    metadata: DashboardMetadata
