"""
Report Composer - unit-normalized sales comparison report.

Pipeline:

    ledger rows -> EventNormalizer.normalize_sales_rows
                -> SalesComparisonAggregator.filter_scope (employee/year/store/months)
                -> SalesComparisonAggregator.aggregate / build_products
                -> SalesComparisonReport

The requested year may be in the Buddhist Era; metadata echoes the year as
requested while row matching uses the Gregorian year.
"""

from datetime import datetime, timezone
from typing import Iterable, Optional, Union

import structlog

from storepulse.config import Settings
from storepulse.engine.event_normalizer import EventNormalizer
from storepulse.engine.ratios import round_currency
from storepulse.engine.sales_aggregator import SalesComparisonAggregator, UnitClassifier
from storepulse.engine.time_resolver import ZonedTimeResolver, as_utc
from storepulse.models.events import SalesLineItem
from storepulse.models.sales_report import (
    THAI_MONTH_NAMES,
    SalesComparisonMetadata,
    SalesComparisonReport,
    SalesReportScope,
)


class SalesReportComposer:
    """
    Composes the per-employee sales comparison report.

    Attributes:
        resolver: Zoned time resolver for full-timestamp ledger rows
        aggregator: Unit-normalized sales aggregator

    Example:
        >>> composer = SalesReportComposer(time_zone="Asia/Bangkok")
        >>> scope = SalesReportScope(employee_id="E1", employee_name="สมชาย", year=2568)
        >>> report = composer.compose(rows, scope)
        >>> report.metadata.total_products, report.metadata.year_total_sales
    """

    def __init__(
        self,
        time_zone: str = "Asia/Bangkok",
        classifier: Optional[UnitClassifier] = None,
    ):
        self.resolver = ZonedTimeResolver(time_zone)
        self.aggregator = SalesComparisonAggregator(classifier)
        self.logger = structlog.get_logger()

    @classmethod
    def from_settings(cls, settings: Settings) -> "SalesReportComposer":
        return cls(time_zone=settings.app_timezone)

    def compose(
        self,
        rows: Iterable[Union[SalesLineItem, dict]],
        scope: SalesReportScope,
        now: Optional[datetime] = None,
    ) -> SalesComparisonReport:
        """
        Build the sales comparison report for one employee.

        Args:
            rows: Sales ledger rows (models or plain dicts)
            scope: Employee/store identity, year and month range
            now: Generation instant (default: current time)

        Returns:
            SalesComparisonReport; a scope with no matching rows yields an
            empty product list and zero totals
        """
        generated_at = as_utc(now) if now is not None else datetime.now(timezone.utc)

        records, dropped = EventNormalizer(self.resolver).normalize_sales_rows(rows)
        in_scope = self.aggregator.filter_scope(records, scope)
        products = self.aggregator.build_products(self.aggregator.aggregate(in_scope))

        metadata = SalesComparisonMetadata(
            employee_id=scope.employee_id,
            employee_name=scope.employee_name,
            employee_code=scope.employee_code,
            phone=scope.phone,
            region=scope.region,
            regular_day_off=scope.regular_day_off,
            store_id=scope.store_id,
            store_name=scope.store_name,
            year=scope.year,
            start_month=scope.start_month,
            end_month=scope.end_month,
            start_month_name=THAI_MONTH_NAMES[scope.start_month - 1],
            end_month_name=THAI_MONTH_NAMES[scope.end_month - 1],
            generated_at=generated_at,
            total_products=len(products),
            year_total_sales=round_currency(
                sum(p.total_sales_all_units for p in products)
            ),
        )

        self.logger.info(
            "sales_report_composed",
            employee_id=scope.employee_id,
            year=scope.gregorian_year,
            rows=len(records),
            in_scope=len(in_scope),
            dropped=len(dropped),
            products=len(products),
        )
        return SalesComparisonReport(products=products, metadata=metadata)
