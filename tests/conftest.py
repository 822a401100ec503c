"""
Pytest configuration and shared fixtures for the StorePulse test suite.

Factories build raw log entries and ledger rows the way the field app writes
them (camelCase meta payloads, ISO timestamps), so every suite exercises the
normalizer boundary rather than constructing canonical records by hand.
"""

import os
from datetime import datetime, timedelta, timezone
from typing import Optional

import pytest
from fastapi.testclient import TestClient

# Set testing environment BEFORE importing app
os.environ["TESTING"] = "true"
os.environ.setdefault("APP_TIMEZONE", "Asia/Bangkok")

from storepulse.engine.time_resolver import ZonedTimeResolver
from storepulse.models.events import MasterData, ProductRef

# Fixed reference instant: 2026-03-01 12:00 Asia/Bangkok (a Sunday)
REFERENCE_NOW = datetime(2026, 3, 1, 5, 0, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Raw event factories, reusable across all test suites
# ---------------------------------------------------------------------------


def _iso(instant: datetime) -> str:
    return instant.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def make_attendance_event(
    at: Optional[datetime] = None,
    employee_name: Optional[str] = "Somchai",
    store_name: Optional[str] = "Store A",
    status: str = "check-in",
    use_meta_timestamp: bool = True,
    **meta_overrides,
) -> dict:
    """Factory function for raw attendance log entries."""
    at = at or REFERENCE_NOW - timedelta(days=1)
    meta = {
        "employeeName": employee_name,
        "storeName": store_name,
        "status": status,
    }
    if use_meta_timestamp:
        meta["timestamp"] = _iso(at)
    meta.update(meta_overrides)
    return {
        "scope": "attendance",
        "timestamp": _iso(at),
        "meta": {k: v for k, v in meta.items() if v is not None},
    }


def make_sales_event(
    at: Optional[datetime] = None,
    total=100.0,
    quantity=1,
    employee_name: Optional[str] = "Somchai",
    store_name: Optional[str] = "Store A",
    product_name: Optional[str] = "Green Tea 500ml",
    product_code: Optional[str] = "GT-500",
    unit_name: Optional[str] = "กล่อง",
    **meta_overrides,
) -> dict:
    """Factory function for raw sales log entries."""
    at = at or REFERENCE_NOW - timedelta(days=1)
    meta = {
        "timestamp": _iso(at),
        "employeeName": employee_name,
        "storeName": store_name,
        "productName": product_name,
        "productCode": product_code,
        "unitName": unit_name,
        "total": total,
        "quantity": quantity,
        "status": "completed",
    }
    meta.update(meta_overrides)
    return {
        "scope": "sales",
        "timestamp": _iso(at),
        "meta": {k: v for k, v in meta.items() if v is not None},
    }


def make_sales_row(
    year: int = 2025,
    month: int = 1,
    day: int = 15,
    product_code: str = "P001",
    product_name: str = "Green Tea 500ml",
    unit_name: str = "กล่อง",
    quantity=10,
    total=1000,
    employee_name: str = "Somchai",
    store_name: str = "Store A",
    **overrides,
) -> dict:
    """Factory function for sales ledger rows used by the comparison report."""
    row = dict(
        product_code=product_code,
        product_name=product_name,
        unit_name=unit_name,
        quantity=quantity,
        unit_price=None,
        total=total,
        recorded_date=f"{year:04d}-{month:02d}-{day:02d}",
        employee_name=employee_name,
        store_name=store_name,
    )
    row.update(overrides)
    return row


def make_master_data() -> MasterData:
    """Master data with two employees, two stores and one product."""
    return MasterData(
        employees={"E1": "Somchai", "E2": "Malee"},
        stores={"S1": "Store A", "S2": "Store B"},
        products={"P1": ProductRef(code="GT-500", name="Green Tea 500ml")},
    )


# ---------------------------------------------------------------------------
# Pytest fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def resolver():
    """Resolver in the default reporting zone."""
    return ZonedTimeResolver("Asia/Bangkok")


@pytest.fixture
def reference_now():
    return REFERENCE_NOW


@pytest.fixture
def master_data():
    return make_master_data()


@pytest.fixture
def two_store_events():
    """
    Store A: 300,000 current / 200,000 previous.
    Store B: 150,000 current / 250,000 previous.
    """
    current = REFERENCE_NOW - timedelta(days=5)
    previous = REFERENCE_NOW - timedelta(days=40)
    return [
        make_sales_event(at=current, total=300_000, store_name="Store A"),
        make_sales_event(at=current, total=150_000, store_name="Store B", employee_name="Malee"),
        make_sales_event(at=previous, total=200_000, store_name="Store A"),
        make_sales_event(at=previous, total=250_000, store_name="Store B", employee_name="Malee"),
        make_attendance_event(at=current - timedelta(hours=2), store_name="Store A"),
        make_attendance_event(
            at=current - timedelta(hours=2), store_name="Store B", employee_name="Malee"
        ),
    ]


@pytest.fixture
def client():
    """FastAPI test client for integration tests."""
    from storepulse.main import app

    with TestClient(app) as c:
        yield c
