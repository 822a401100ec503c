"""
Dimensional Rollup Engine - per store / employee / product performance.

Each dimension is a single scan over the current-window records that
accumulates into a keyed map of mutable accumulators. Accumulators are
finalized exactly once, at emission: ratios are computed and membership sets
collapse to counts.

Dimension contributions:
- store:    check-ins (+ employees seen), revenue, transactions
            efficiency = revenue / check_ins
- employee: check-ins (+ stores worked), revenue, transactions (+ products sold)
            productivity = transactions / check_ins
- product:  revenue, quantity, transactions (+ employees, stores)
            avg_price = revenue / quantity

Output rows are stable-sorted descending by revenue, so ties keep the order
in which keys were first encountered, and capped to `cap` rows.
"""

from typing import Optional, Sequence

import structlog

from storepulse.engine.kpi_calculator import WindowedKPIs
from storepulse.engine.ratios import safe_divide
from storepulse.engine.time_resolver import ConfigurationError
from storepulse.models.dashboard import EmployeeMetric, ProductMetric, StoreMetric
from storepulse.models.events import AttendanceRecord, SalesRecord

DEFAULT_ROLLUP_CAP = 10


class _Aggregate:
    """Mutable per-key accumulator shared by all dimensions."""

    __slots__ = (
        "check_ins",
        "revenue",
        "quantity",
        "transactions",
        "employees",
        "stores",
        "products",
    )

    def __init__(self) -> None:
        self.check_ins = 0
        self.revenue = 0.0
        self.quantity = 0.0
        self.transactions = 0
        self.employees: set[str] = set()
        self.stores: set[str] = set()
        self.products: set[str] = set()

    @property
    def avg_ticket(self) -> float:
        return safe_divide(self.revenue, self.transactions)


class DimensionalRollupEngine:
    """
    Groups normalized records by store, employee and product name.

    Attributes:
        cap: Maximum rows returned per dimension (None = uncapped)

    Example:
        >>> engine = DimensionalRollupEngine(cap=10)
        >>> stores = engine.stores(attendance_current, sales_current)
        >>> stores[0].name, stores[0].efficiency
    """

    def __init__(self, cap: Optional[int] = DEFAULT_ROLLUP_CAP):
        if cap is not None and cap <= 0:
            raise ConfigurationError(f"Rollup cap must be positive, got {cap}")
        self.cap = cap
        self.logger = structlog.get_logger()

    def rollup_all(
        self, windowed: WindowedKPIs
    ) -> tuple[list[StoreMetric], list[EmployeeMetric], list[ProductMetric]]:
        """Run the three dimensions over the current-window records."""
        attendance, sales = windowed.attendance_current, windowed.sales_current
        return (
            self.stores(attendance, sales),
            self.employees(attendance, sales),
            self.products(sales),
        )

    def stores(
        self,
        attendance: Sequence[AttendanceRecord],
        sales: Sequence[SalesRecord],
    ) -> list[StoreMetric]:
        groups: dict[str, _Aggregate] = {}

        for record in attendance:
            if not record.is_check_in:
                continue
            agg = groups.setdefault(record.store_name, _Aggregate())
            agg.check_ins += 1
            agg.employees.add(record.employee_name)

        for record in sales:
            agg = groups.setdefault(record.store_name, _Aggregate())
            agg.revenue += record.total
            agg.transactions += 1

        rows = [
            StoreMetric(
                name=name,
                check_ins=agg.check_ins,
                revenue=round(agg.revenue, 2),
                transactions=agg.transactions,
                avg_ticket=round(agg.avg_ticket, 2),
                active_employees=len(agg.employees),
                efficiency=round(safe_divide(agg.revenue, agg.check_ins), 2),
            )
            for name, agg in groups.items()
        ]
        return self._rank(rows, "store", len(groups))

    def employees(
        self,
        attendance: Sequence[AttendanceRecord],
        sales: Sequence[SalesRecord],
    ) -> list[EmployeeMetric]:
        groups: dict[str, _Aggregate] = {}

        for record in attendance:
            if not record.is_check_in:
                continue
            agg = groups.setdefault(record.employee_name, _Aggregate())
            agg.check_ins += 1
            agg.stores.add(record.store_name)

        for record in sales:
            agg = groups.setdefault(record.employee_name, _Aggregate())
            agg.revenue += record.total
            agg.transactions += 1
            agg.products.add(record.product_name)

        rows = [
            EmployeeMetric(
                name=name,
                check_ins=agg.check_ins,
                revenue=round(agg.revenue, 2),
                transactions=agg.transactions,
                avg_ticket=round(agg.avg_ticket, 2),
                stores_worked=len(agg.stores),
                products_sold=len(agg.products),
                productivity=round(safe_divide(agg.transactions, agg.check_ins), 2),
            )
            for name, agg in groups.items()
        ]
        return self._rank(rows, "employee", len(groups))

    def products(self, sales: Sequence[SalesRecord]) -> list[ProductMetric]:
        groups: dict[str, _Aggregate] = {}

        for record in sales:
            agg = groups.setdefault(record.product_name, _Aggregate())
            agg.revenue += record.total
            agg.quantity += record.quantity
            agg.transactions += 1
            agg.employees.add(record.employee_name)
            agg.stores.add(record.store_name)

        rows = [
            ProductMetric(
                name=name,
                revenue=round(agg.revenue, 2),
                quantity=round(agg.quantity, 2),
                transactions=agg.transactions,
                avg_price=round(safe_divide(agg.revenue, agg.quantity), 2),
                active_employees=len(agg.employees),
                stores_sold=len(agg.stores),
            )
            for name, agg in groups.items()
        ]
        return self._rank(rows, "product", len(groups))

    def _rank(self, rows: list, dimension: str, group_count: int) -> list:
        # sorted() is stable: equal revenue keeps first-encounter order
        ranked = sorted(rows, key=lambda row: row.revenue, reverse=True)
        if self.cap is not None:
            ranked = ranked[: self.cap]
        self.logger.debug(
            "rollup_ranked",
            dimension=dimension,
            groups=group_count,
            emitted=len(ranked),
        )
        return ranked
