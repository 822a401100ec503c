"""
Alert Generator - fixed-threshold alerts over computed KPIs.

A pure function of the KPI set and the correlation coefficient. Alerts are
recomputed on every call; there is no suppression, deduplication or
acknowledgment state.

| Condition                          | Severity |
|------------------------------------|----------|
| revenue growth < critical (-20%)   | critical |
| revenue growth < warning (-10%)    | warning  |
| check-in growth < warning (-15%)   | warning  |
| |correlation| < low (0.3)          | info     |
"""

from typing import NamedTuple

import structlog

from storepulse.models.dashboard import Alert, KPISet
from storepulse.models.enums import AlertSeverity


class AlertThresholds(NamedTuple):
    """Growth thresholds are percentages; correlation is an absolute |r|."""

    revenue_critical_growth: float = -20.0
    revenue_warning_growth: float = -10.0
    checkin_warning_growth: float = -15.0
    low_correlation: float = 0.3


class AlertGenerator:
    """
    Evaluates KPIs and correlation against fixed thresholds.

    Attributes:
        thresholds: AlertThresholds in effect

    Example:
        >>> generator = AlertGenerator()
        >>> alerts = generator.generate(kpis, correlation=0.12)
        >>> [a.type.value for a in alerts]
        ['info']
    """

    def __init__(self, thresholds: AlertThresholds = AlertThresholds()):
        self.thresholds = thresholds
        self.logger = structlog.get_logger()

    def generate(self, kpis: KPISet, correlation: float) -> list[Alert]:
        """
        Emit alerts in order: revenue, check-ins, correlation.

        Args:
            kpis: KPI set of the current computation
            correlation: Pearson coefficient between daily check-ins and revenue

        Returns:
            Ordered list of alerts (possibly empty)
        """
        t = self.thresholds
        alerts: list[Alert] = []

        revenue_growth = kpis.revenue.growth_percent
        if revenue_growth < t.revenue_critical_growth:
            alerts.append(
                Alert(
                    type=AlertSeverity.CRITICAL,
                    message=_decrease_message("Revenue", revenue_growth),
                )
            )
        elif revenue_growth < t.revenue_warning_growth:
            alerts.append(
                Alert(
                    type=AlertSeverity.WARNING,
                    message=_decrease_message("Revenue", revenue_growth),
                )
            )

        check_in_growth = kpis.check_ins.growth_percent
        if check_in_growth < t.checkin_warning_growth:
            alerts.append(
                Alert(
                    type=AlertSeverity.WARNING,
                    message=_decrease_message("Check-ins", check_in_growth),
                )
            )

        if abs(correlation) < t.low_correlation:
            alerts.append(
                Alert(
                    type=AlertSeverity.INFO,
                    message="Low correlation between check-ins and revenue detected",
                )
            )

        if alerts:
            self.logger.info(
                "alerts_generated",
                count=len(alerts),
                severities=[a.type.value for a in alerts],
            )
        return alerts


def _decrease_message(subject: str, growth: float) -> str:
    return f"{subject} decreased by {abs(growth):.1f}% compared to previous period"
