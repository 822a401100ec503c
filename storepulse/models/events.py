"""
Event data models for the StorePulse analytics engine.

This module defines the raw activity-log shapes handed to the engine by the
log store, the master-data mappings used to resolve names, and the two
canonical record shapes produced by the normalizer. Canonical records are
ephemeral: they exist only for the duration of one computation.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .enums import AttendanceStatus, DropReason

UNSPECIFIED = "ไม่ระบุ"


class RawEvent(BaseModel):
    """
    One entry of the activity log as returned by the log store.

    Attributes:
        scope: "attendance" or "sales"; any other scope is dropped
        timestamp: Log-store timestamp (fallback when meta has none)
        meta: Loose payload written by the client app
    """

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "scope": "sales",
                "timestamp": "2026-02-10T07:30:00Z",
                "meta": {
                    "timestamp": "2026-02-10T14:30:00+07:00",
                    "storeName": "Lotus Rama 4",
                    "employeeName": "Somchai",
                    "productName": "Green Tea 500ml",
                    "productCode": "GT-500",
                    "unitName": "กล่อง",
                    "quantity": 2,
                    "total": 480,
                    "status": "completed",
                },
            }
        },
    )

    scope: str = Field(description="Event scope tag (attendance|sales)")
    timestamp: Optional[str] = Field(
        default=None, description="Log-store timestamp, ISO-8601"
    )
    meta: dict[str, Any] = Field(
        default_factory=dict, description="Event payload with optional fields"
    )

    @field_validator("meta", mode="before")
    @classmethod
    def null_meta_is_empty(cls, v: Any) -> Any:
        """A null payload carries no fields; the log timestamp still applies."""
        return {} if v is None else v


class ProductRef(BaseModel):
    """Product master-data entry."""

    code: str = Field(default="", description="Product code")
    name: str = Field(default="", description="Product display name")


class MasterData(BaseModel):
    """
    Master-data mappings fetched by the caller alongside the log snapshot.

    The engine never looks these up itself; it only uses them to fill names
    on events that carry ids, and to report catalog sizes.
    """

    employees: dict[str, str] = Field(
        default_factory=dict, description="Employee id -> name"
    )
    stores: dict[str, str] = Field(default_factory=dict, description="Store id -> name")
    products: dict[str, ProductRef] = Field(
        default_factory=dict, description="Product id -> {code, name}"
    )


class AttendanceRecord(BaseModel):
    """Canonical attendance record bucketed in the configured time zone."""

    timestamp_utc: datetime
    day_key: str = Field(description="YYYY-MM-DD in the configured zone")
    month_key: str = Field(description="YYYY-MM in the configured zone")
    year_key: str = Field(description="YYYY in the configured zone")
    store_name: str = UNSPECIFIED
    employee_name: str = UNSPECIFIED
    status: AttendanceStatus = AttendanceStatus.CHECK_IN
    hour_of_day: int = Field(ge=0, le=23)
    weekday: int = Field(ge=0, le=6, description="0=Sunday .. 6=Saturday")

    @property
    def is_check_in(self) -> bool:
        return self.status == AttendanceStatus.CHECK_IN


class SalesRecord(BaseModel):
    """
    Canonical point-of-sale record.

    `total` and `quantity` are always finite; the normalizer drops any
    record where they are not.
    """

    timestamp_utc: datetime
    day_key: str
    month_key: str
    year_key: str
    store_name: str = UNSPECIFIED
    employee_name: str = UNSPECIFIED
    product_name: str = UNSPECIFIED
    product_code: str = ""
    unit_name: str = ""
    total: float = Field(allow_inf_nan=False)
    quantity: float = Field(allow_inf_nan=False)
    status: str = "completed"
    hour_of_day: int = Field(ge=0, le=23)
    weekday: int = Field(ge=0, le=6)


class DroppedEvent(BaseModel):
    """A raw record the normalizer excluded, with the reason."""

    index: int = Field(ge=0, description="Position in the input sequence")
    scope: str = Field(description="Scope tag of the dropped record")
    reason: DropReason


class NormalizationResult(BaseModel):
    """Tagged parse-or-drop output of the event normalizer."""

    attendance: list[AttendanceRecord] = Field(default_factory=list)
    sales: list[SalesRecord] = Field(default_factory=list)
    dropped: list[DroppedEvent] = Field(default_factory=list)


class SalesLineItem(BaseModel):
    """
    One row of the sales ledger as fetched for the comparison report.

    Numeric fields are untyped; the normalizer decides whether a value is
    usable.
    """

    model_config = ConfigDict(frozen=True)

    product_code: Optional[str] = None
    product_name: Optional[str] = None
    unit_name: Optional[str] = None
    quantity: Any = None
    unit_price: Any = None
    total: Any = None
    recorded_date: Optional[str] = Field(
        default=None, description="YYYY-MM-DD or a full timestamp"
    )
    employee_name: Optional[str] = None
    store_name: Optional[str] = None


class SalesLineRecord(BaseModel):
    """Normalized sales ledger row used by the unit-normalized aggregator."""

    product_code: str
    product_name: str
    unit_name: str
    quantity: float = Field(allow_inf_nan=False)
    total: float = Field(allow_inf_nan=False)
    year: int
    month: int = Field(ge=1, le=12)
    employee_name: str
    store_name: str
