from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import ConfigDict, Field

from src.shared.base import BaseSchema


class EmployeeListFilters(BaseSchema):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    department_id: Optional[str] = None
    new_hires_only: bool = False
    include_past_employees: bool = False


class EmployeeSummary(BaseSchema):
    id: str
    first_name: str
    last_name: str
    email: str
    job_title: Optional[str] = None
    status: Optional[str] = None
    start_date: Optional[datetime] = None
    departure_date: Optional[datetime] = None
    manager_email: Optional[str] = None
    department_id: Optional[str] = None
    department_name: Optional[str] = None
    office_location: Optional[str] = None
    tenure_in_months: int
    tenure_in_years: int
    reports_to_count: int
    is_past_employee: bool


class EmployeeDetail(EmployeeSummary):
    attributes: Dict[str, Any] = Field(default_factory=dict)
    direct_reports: Optional[List[EmployeeSummary]] = None


class Department(BaseSchema):
    id: Optional[str] = None
    name: str
    department_headcount: int
    average_tenure_in_months: int
    include_past_employees: bool = False


class DirectoryStatus(BaseSchema):
    loaded: bool
    loaded_at: Optional[datetime] = None
    is_stale: bool
    employee_count: int
    department_count: int
    freshness_window_hours: int
