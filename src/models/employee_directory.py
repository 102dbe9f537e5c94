from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

# (record field, report column, column must be present in the report)
REPORT_COLUMNS: List[Tuple[str, str, bool]] = [
    ("guid", "guid", True),
    ("first_name", "first_name", True),
    ("last_name", "last_name", True),
    ("email", "email", True),
    ("job_title", "job_title", False),
    ("status", "user_status", False),
    ("start_date", "start_date", True),
    ("departure_date", "departure_date", True),
    ("reports_to_email", "reports_to_email", True),
    ("department_id", "department_id", True),
    ("department_name", "department_name", False),
    ("office_location", "office_location", False),
]

REQUIRED_REPORT_COLUMNS = frozenset(column for _, column, required in REPORT_COLUMNS if required)
MAPPED_REPORT_COLUMNS = frozenset(column for _, column, _ in REPORT_COLUMNS)

ALL_DEPARTMENT_ID = "all"
ALL_DEPARTMENT_NAME = "All"
UNASSIGNED_DEPARTMENT_NAME = "Unassigned"


class EmployeeRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    guid: str
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    job_title: Optional[str] = None
    status: Optional[str] = None
    start_date: Optional[datetime] = None
    departure_date: Optional[datetime] = None
    reports_to_email: Optional[str] = None
    department_id: Optional[str] = None
    department_name: Optional[str] = None
    office_location: Optional[str] = None
    attributes: Dict[str, Any] = Field(default_factory=dict)
    tenure_in_months: int = 0
    tenure_in_years: int = 0
    reports_to_count: int = 0

    @property
    def is_past_employee(self) -> bool:
        return self.departure_date is not None


class DepartmentRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: Optional[str] = None
    name: str
    department_headcount: int = 0
    total_tenure_in_months: int = 0
    average_tenure_in_months: int = 0


class DirectorySnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    employees: Dict[str, EmployeeRecord]
    # Real departments keyed by department id; employees without one sit under None.
    departments: Dict[Optional[str], DepartmentRecord]
    all_department: DepartmentRecord
    loaded_at: datetime
