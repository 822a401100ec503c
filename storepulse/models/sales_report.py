"""
Sales comparison report models.

A report covers one employee (optionally one store) over one year and a
month range. Each product row carries per-unit-category totals and a fixed
12-month series with month-over-month differences.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from .enums import UnitCategory

THAI_MONTH_NAMES = [
    "มกราคม", "กุมภาพันธ์", "มีนาคม", "เมษายน",
    "พฤษภาคม", "มิถุนายน", "กรกฎาคม", "สิงหาคม",
    "กันยายน", "ตุลาคม", "พฤศจิกายน", "ธันวาคม",
]


class UnitAccumulator(BaseModel):
    """Running totals for one (product, unit category) pair."""

    total_quantity: float = 0.0
    total_amount: float = 0.0
    count: int = 0


class MonthAccumulator(BaseModel):
    """Running total for one (product, month) pair."""

    total_amount: float = 0.0


class ProductAggregation(BaseModel):
    """
    Per-product accumulator built progressively from ledger rows.

    Attributes:
        product_code: Product code (aggregation key)
        product_name: Name from the first row seen for this code
        by_unit_category: Totals per canonical unit category
        by_month: Totals per calendar month (1-12)
    """

    product_code: str
    product_name: str
    by_unit_category: dict[UnitCategory, UnitAccumulator] = Field(default_factory=dict)
    by_month: dict[int, MonthAccumulator] = Field(default_factory=dict)


class UnitCategorySales(BaseModel):
    """Finalized per-unit-category figures for one product."""

    quantity: float = 0.0
    avg_price: int = Field(default=0, description="Rounded amount per unit")
    total_sales: int = Field(default=0, description="Rounded total amount")


class UnitSalesBreakdown(BaseModel):
    box: UnitCategorySales = Field(default_factory=UnitCategorySales)
    pack: UnitCategorySales = Field(default_factory=UnitCategorySales)
    piece: UnitCategorySales = Field(default_factory=UnitCategorySales)


class MonthlySalesEntry(BaseModel):
    """
    One month of the 12-month series.

    Differences are relative to the immediately preceding month. Month 1 has
    no prior data and always reports zero differences.
    """

    month: int = Field(ge=1, le=12)
    month_name_th: str
    total_sales: int = 0
    diff_amount: int = 0
    diff_percent: float = 0.0


class ProductSalesComparison(BaseModel):
    """One product row of the sales comparison report."""

    product_code: str
    product_name: str
    unit_sales: UnitSalesBreakdown
    total_sales_all_units: int
    monthly_sales: list[MonthlySalesEntry]


class SalesReportScope(BaseModel):
    """
    Identity and range a sales comparison report is requested for.

    `year` may be given in the Buddhist Era (anything above 2500); the
    aggregator converts it before matching rows.
    """

    employee_id: str
    employee_name: str
    year: int
    store_id: Optional[str] = None
    store_name: Optional[str] = None
    start_month: int = Field(default=1, ge=1, le=12)
    end_month: int = Field(default=12, ge=1, le=12)
    employee_code: Optional[str] = None
    phone: Optional[str] = None
    region: Optional[str] = None
    regular_day_off: Optional[str] = None

    @model_validator(mode="after")
    def validate_month_range(self) -> "SalesReportScope":
        if self.start_month > self.end_month:
            raise ValueError("Start month cannot be greater than end month")
        return self

    @property
    def gregorian_year(self) -> int:
        return self.year - 543 if self.year > 2500 else self.year


class SalesComparisonMetadata(BaseModel):
    """Identity, range and totals of a sales comparison report."""

    employee_id: str
    employee_name: str
    employee_code: Optional[str] = None
    phone: Optional[str] = None
    region: Optional[str] = None
    regular_day_off: Optional[str] = None
    store_id: Optional[str] = None
    store_name: Optional[str] = None
    year: int
    start_month: int
    end_month: int
    start_month_name: str
    end_month_name: str
    generated_at: datetime
    total_products: int
    year_total_sales: int


class SalesComparisonReport(BaseModel):
    """Complete sales comparison report payload."""

    products: list[ProductSalesComparison]
    metadata: SalesComparisonMetadata
