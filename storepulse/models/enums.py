"""
Enumeration types for the StorePulse analytics engine.

All enums inherit from str to ensure JSON serialization compatibility.
"""

from enum import Enum


class EventScope(str, Enum):
    """Scope tag carried by every raw event in the activity log."""

    ATTENDANCE = "attendance"
    SALES = "sales"


class AttendanceStatus(str, Enum):
    """Attendance event direction. Anything that is not a check-out is a check-in."""

    CHECK_IN = "check-in"
    CHECK_OUT = "check-out"


class UnitCategory(str, Enum):
    """Canonical unit taxonomy used by the sales comparison report."""

    BOX = "Box"
    PACK = "Pack"
    PIECE = "Piece"


class AlertSeverity(str, Enum):
    """
    Severity tags for dashboard alerts.

    Values match the alert `type` field consumed by the dashboard client.
    """

    INFO = "info"
    WARNING = "warning"
    CRITICAL = "critical"


class CorrelationStrength(str, Enum):
    """Qualitative bucket for the absolute Pearson coefficient."""

    WEAK = "weak"
    MODERATE = "moderate"
    STRONG = "strong"


class DropReason(str, Enum):
    """Why the normalizer excluded a raw record from aggregation."""

    UNKNOWN_SCOPE = "unknown_scope"
    UNPARSABLE_TIMESTAMP = "unparsable_timestamp"
    NON_FINITE_TOTAL = "non_finite_total"
    NON_FINITE_QUANTITY = "non_finite_quantity"
    MALFORMED_PAYLOAD = "malformed_payload"
