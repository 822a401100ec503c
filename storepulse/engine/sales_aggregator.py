"""
Unit-Normalized Sales Aggregator - per product, per unit category, per month.

Free-text unit labels from the sales ledger ("กล่อง", "Box", "ลัง", "แพ็ค",
"ซอง", ...) are standardized into three canonical categories using
case-insensitive substring containment over a fixed keyword table. Categories
are tried in order Box, Pack, Piece; the first match wins. Substring matching
means "boxed" classifies as Box.

Rows whose unit label matches no category are logged and left out of the
per-unit totals. They still count toward the product's monthly totals.

Finalization:
- per unit: avg_price = round(amount / quantity) (0 when quantity is 0),
  total_sales = round(amount)
- per product: total_sales_all_units = sum of the three unit totals
- monthly: always 12 entries, month-over-month diffs from a zero baseline
"""

from typing import Iterable, Mapping, Optional, Sequence

import structlog

from storepulse.engine.ratios import change_percent, round_currency, safe_divide
from storepulse.models.enums import UnitCategory
from storepulse.models.events import SalesLineRecord
from storepulse.models.sales_report import (
    THAI_MONTH_NAMES,
    MonthAccumulator,
    MonthlySalesEntry,
    ProductAggregation,
    ProductSalesComparison,
    SalesReportScope,
    UnitAccumulator,
    UnitCategorySales,
    UnitSalesBreakdown,
)

DEFAULT_UNIT_KEYWORDS: dict[UnitCategory, tuple[str, ...]] = {
    UnitCategory.BOX: ("กล่อง", "box", "ลัง"),
    UnitCategory.PACK: ("แพ็ค", "pack", "แพค"),
    UnitCategory.PIECE: ("ซอง", "ชิ้น", "ปี๊บ", "piece"),
}


class UnitClassifier:
    """
    Maps a free-text unit label to a canonical UnitCategory.

    Example:
        >>> classifier = UnitClassifier()
        >>> classifier.classify("BOX"), classifier.classify("กล่อง")
        (<UnitCategory.BOX: 'Box'>, <UnitCategory.BOX: 'Box'>)
        >>> classifier.classify("kg") is None
        True
    """

    def __init__(
        self,
        keyword_table: Mapping[UnitCategory, Sequence[str]] = DEFAULT_UNIT_KEYWORDS,
    ):
        self.keyword_table = {
            category: tuple(keyword.lower() for keyword in keywords)
            for category, keywords in keyword_table.items()
        }

    def classify(self, unit_label: Optional[str]) -> Optional[UnitCategory]:
        if not unit_label:
            return None
        label = unit_label.lower().strip()
        for category, keywords in self.keyword_table.items():
            if any(keyword in label for keyword in keywords):
                return category
        return None


class SalesComparisonAggregator:
    """
    Builds per-product aggregations and the finalized report rows.

    Attributes:
        classifier: Unit label classifier

    Example:
        >>> aggregator = SalesComparisonAggregator()
        >>> rows = aggregator.filter_scope(records, scope)
        >>> products = aggregator.build_products(aggregator.aggregate(rows))
    """

    def __init__(self, classifier: Optional[UnitClassifier] = None):
        self.classifier = classifier or UnitClassifier()
        self.logger = structlog.get_logger()

    def filter_scope(
        self, records: Iterable[SalesLineRecord], scope: SalesReportScope
    ) -> list[SalesLineRecord]:
        """Keep rows for the scope's employee, year, optional store and month range."""
        year = scope.gregorian_year
        return [
            r
            for r in records
            if r.employee_name == scope.employee_name
            and r.year == year
            and (not scope.store_name or r.store_name == scope.store_name)
            and scope.start_month <= r.month <= scope.end_month
        ]

    def aggregate(
        self, records: Iterable[SalesLineRecord]
    ) -> dict[str, ProductAggregation]:
        """
        Accumulate rows into one ProductAggregation per product code.

        Returns:
            Insertion-ordered mapping of product code -> aggregation
        """
        aggregations: dict[str, ProductAggregation] = {}
        unknown_units: dict[str, int] = {}

        for record in records:
            agg = aggregations.get(record.product_code)
            if agg is None:
                agg = ProductAggregation(
                    product_code=record.product_code,
                    product_name=record.product_name,
                )
                aggregations[record.product_code] = agg

            category = self.classifier.classify(record.unit_name)
            if category is not None:
                unit = agg.by_unit_category.setdefault(category, UnitAccumulator())
                unit.total_quantity += record.quantity
                unit.total_amount += record.total
                unit.count += 1
            else:
                unknown_units[record.unit_name] = unknown_units.get(record.unit_name, 0) + 1
                self.logger.warning(
                    "unknown_unit_label",
                    unit_name=record.unit_name,
                    product_code=record.product_code,
                )

            month = agg.by_month.setdefault(record.month, MonthAccumulator())
            month.total_amount += record.total

        self.logger.info(
            "sales_aggregated",
            products=len(aggregations),
            unknown_unit_labels=unknown_units,
        )
        return aggregations

    def build_products(
        self, aggregations: Mapping[str, ProductAggregation]
    ) -> list[ProductSalesComparison]:
        """Finalize aggregations into report rows sorted by product code."""
        products: list[ProductSalesComparison] = []

        for agg in aggregations.values():
            breakdown = UnitSalesBreakdown(
                box=unit_sales(agg.by_unit_category.get(UnitCategory.BOX)),
                pack=unit_sales(agg.by_unit_category.get(UnitCategory.PACK)),
                piece=unit_sales(agg.by_unit_category.get(UnitCategory.PIECE)),
            )
            products.append(
                ProductSalesComparison(
                    product_code=agg.product_code,
                    product_name=agg.product_name,
                    unit_sales=breakdown,
                    total_sales_all_units=round_currency(
                        breakdown.box.total_sales
                        + breakdown.pack.total_sales
                        + breakdown.piece.total_sales
                    ),
                    monthly_sales=monthly_series(agg.by_month),
                )
            )

        products.sort(key=lambda p: p.product_code)
        return products


def unit_sales(accumulator: Optional[UnitAccumulator]) -> UnitCategorySales:
    """Finalize one unit category; a missing category is all zeros."""
    if accumulator is None:
        return UnitCategorySales()
    return UnitCategorySales(
        quantity=accumulator.total_quantity,
        avg_price=round_currency(
            safe_divide(accumulator.total_amount, accumulator.total_quantity)
        ),
        total_sales=round_currency(accumulator.total_amount),
    )


def monthly_series(by_month: Mapping[int, MonthAccumulator]) -> list[MonthlySalesEntry]:
    """
    Exactly 12 entries (January..December).

    Differences compare each month with the immediately preceding month.
    January has no prior data and reports zero differences; a zero previous
    month reports a zero percentage.
    """
    entries: list[MonthlySalesEntry] = []
    previous = 0.0

    for month in range(1, 13):
        current = by_month[month].total_amount if month in by_month else 0.0
        diff_amount = 0.0
        diff_percent = 0.0
        if month > 1:
            diff_amount = current - previous
            diff_percent = round(change_percent(current, previous), 2)

        entries.append(
            MonthlySalesEntry(
                month=month,
                month_name_th=THAI_MONTH_NAMES[month - 1],
                total_sales=round_currency(current),
                diff_amount=round_currency(diff_amount),
                diff_percent=diff_percent,
            )
        )
        previous = current

    return entries
