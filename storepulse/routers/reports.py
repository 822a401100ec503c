"""
Reports router.

Wired to:
- SalesReportComposer for the unit-normalized sales comparison report
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from storepulse.config import Settings, get_settings
from storepulse.engine.report_composer import SalesReportComposer
from storepulse.models.sales_report import SalesReportScope
from storepulse.utils.logging import get_logger

logger = get_logger(__name__)
router = APIRouter()


class EmployeeProfile(BaseModel):
    """Employee directory entry."""

    name: str
    employee_code: Optional[str] = None
    phone: Optional[str] = None
    region: Optional[str] = None
    regular_day_off: Optional[str] = None


class Directory(BaseModel):
    """Employee and store profiles supplied by the caller."""

    employees: Dict[str, EmployeeProfile] = Field(default_factory=dict)
    stores: Dict[str, str] = Field(
        default_factory=dict, description="Store id -> name"
    )


class SalesComparisonRequest(BaseModel):
    """Request for one employee's sales comparison report."""

    rows: List[Any] = Field(default_factory=list, description="Sales ledger rows")
    employee_id: str
    year: int = Field(description="Gregorian or Buddhist Era year")
    store_id: Optional[str] = None
    start_month: int = 1
    end_month: int = 12
    directory: Directory = Field(default_factory=Directory)


@router.post("/sales-comparison")
async def sales_comparison(
    request: SalesComparisonRequest,
    settings: Settings = Depends(get_settings),
):
    """
    Build the per-product, per-unit, per-month sales comparison.

    Returns 400 for an invalid month range and 404 for an unknown employee.
    """
    logger.info(
        "sales_comparison_requested",
        employee_id=request.employee_id,
        year=request.year,
        store_id=request.store_id,
        start_month=request.start_month,
        end_month=request.end_month,
        rows_count=len(request.rows),
    )

    if not (1 <= request.start_month <= 12 and 1 <= request.end_month <= 12):
        raise HTTPException(
            status_code=400, detail="Invalid month range (must be between 1-12)"
        )
    if request.start_month > request.end_month:
        raise HTTPException(
            status_code=400, detail="Start month cannot be greater than end month"
        )

    employee = request.directory.employees.get(request.employee_id)
    if employee is None:
        raise HTTPException(status_code=404, detail="Employee not found")

    try:
        scope = SalesReportScope(
            employee_id=request.employee_id,
            employee_name=employee.name,
            year=request.year,
            store_id=request.store_id,
            store_name=(
                request.directory.stores.get(request.store_id)
                if request.store_id
                else None
            ),
            start_month=request.start_month,
            end_month=request.end_month,
            employee_code=employee.employee_code,
            phone=employee.phone,
            region=employee.region,
            regular_day_off=employee.regular_day_off,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    report = SalesReportComposer.from_settings(settings).compose(request.rows, scope)
    return {"success": True, "data": report.model_dump(mode="json")}
