from __future__ import annotations

import math
from collections import Counter
from datetime import date, datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from src.models.employee_directory import (
    ALL_DEPARTMENT_ID,
    ALL_DEPARTMENT_NAME,
    MAPPED_REPORT_COLUMNS,
    REPORT_COLUMNS,
    UNASSIGNED_DEPARTMENT_NAME,
    DepartmentRecord,
    DirectorySnapshot,
    EmployeeRecord,
)

MS_PER_DAY = 24 * 60 * 60 * 1000
DAYS_PER_MONTH = 30.44
DAYS_PER_YEAR = 365.25


def parse_report_datetime(value: Any) -> Optional[datetime]:
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    else:
        text = str(value).strip()
        if not text:
            return None
        try:
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError as exc:
            raise ValueError(f"Unparseable report date: {text!r}") from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def calculate_tenure(start: Optional[datetime], end: datetime) -> Tuple[int, int]:
    """Whole months and years between start and end, floored and never negative."""
    if start is None:
        return 0, 0
    elapsed_ms = (end - start).total_seconds() * 1000
    months = math.floor(elapsed_ms / (MS_PER_DAY * DAYS_PER_MONTH))
    years = math.floor(elapsed_ms / (MS_PER_DAY * DAYS_PER_YEAR))
    return max(months, 0), max(years, 0)


def rounded_mean(total: int, count: int) -> int:
    if not count:
        return 0
    return math.floor(total / count + 0.5)


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def employee_from_row(row: Mapping[str, Any], now: datetime) -> EmployeeRecord:
    data: Dict[str, Any] = {}
    for field_name, column, _ in REPORT_COLUMNS:
        data[field_name] = row.get(column)

    guid = _text(data["guid"])
    if not guid:
        raise ValueError("Report row is missing a guid")

    start_date = parse_report_datetime(data["start_date"])
    departure_date = parse_report_datetime(data["departure_date"])
    tenure_months, tenure_years = calculate_tenure(start_date, departure_date or now)

    return EmployeeRecord(
        guid=guid,
        first_name=_text(data["first_name"]) or "",
        last_name=_text(data["last_name"]) or "",
        email=_text(data["email"]) or "",
        job_title=_text(data["job_title"]),
        status=_text(data["status"]),
        start_date=start_date,
        departure_date=departure_date,
        reports_to_email=_text(data["reports_to_email"]),
        department_id=_text(data["department_id"]),
        department_name=_text(data["department_name"]),
        office_location=_text(data["office_location"]),
        attributes={key: value for key, value in row.items() if key not in MAPPED_REPORT_COLUMNS},
        tenure_in_months=tenure_months,
        tenure_in_years=tenure_years,
    )


def count_reports_to(employees: Iterable[EmployeeRecord]) -> Dict[str, int]:
    employee_list = list(employees)
    manager_counts = Counter(
        employee.reports_to_email for employee in employee_list if employee.reports_to_email
    )
    return {
        employee.guid: manager_counts.get(employee.email, 0) if employee.email else 0
        for employee in employee_list
    }


def department_display_name(employee: EmployeeRecord) -> str:
    if employee.department_id is None:
        return UNASSIGNED_DEPARTMENT_NAME
    return employee.department_name or employee.department_id


def summarize_departments(employees: Iterable[EmployeeRecord]) -> Dict[Optional[str], DepartmentRecord]:
    buckets: Dict[Optional[str], Dict[str, Any]] = {}
    for employee in employees:
        bucket = buckets.setdefault(
            employee.department_id,
            {
                "id": employee.department_id,
                "name": department_display_name(employee),
                "department_headcount": 0,
                "total_tenure_in_months": 0,
            },
        )
        bucket["department_headcount"] += 1
        bucket["total_tenure_in_months"] += employee.tenure_in_months

    departments: Dict[Optional[str], DepartmentRecord] = {}
    for key, bucket in buckets.items():
        departments[key] = DepartmentRecord(
            **bucket,
            average_tenure_in_months=rounded_mean(
                bucket["total_tenure_in_months"], bucket["department_headcount"]
            ),
        )
    return departments


def summarize_all_department(departments: Iterable[DepartmentRecord]) -> DepartmentRecord:
    """The synthetic "all" bucket, summed over the real departments."""
    records = list(departments)
    total_headcount = sum(item.department_headcount for item in records)
    total_tenure = sum(item.total_tenure_in_months for item in records)
    return DepartmentRecord(
        id=ALL_DEPARTMENT_ID,
        name=ALL_DEPARTMENT_NAME,
        department_headcount=total_headcount,
        total_tenure_in_months=total_tenure,
        average_tenure_in_months=rounded_mean(total_tenure, total_headcount),
    )


def build_snapshot(rows: Iterable[Mapping[str, Any]], now: datetime) -> DirectorySnapshot:
    """Build a complete directory snapshot from pivoted report rows.

    Nothing here touches shared state; callers swap the result in only after it
    has been built in full. Rows sharing a guid keep the last occurrence.
    """
    staged: Dict[str, EmployeeRecord] = {}
    for row in rows:
        employee = employee_from_row(row, now)
        staged[employee.guid] = employee

    reports_to = count_reports_to(staged.values())
    employees = {
        guid: employee.model_copy(update={"reports_to_count": reports_to[guid]})
        for guid, employee in staged.items()
    }
    departments = summarize_departments(employees.values())
    return DirectorySnapshot(
        employees=employees,
        departments=departments,
        all_department=summarize_all_department(departments.values()),
        loaded_at=now,
    )


def pivot_report_rows(columns: List[str], content: Iterable[List[Any]]) -> List[Dict[str, Any]]:
    rows: List[Dict[str, Any]] = []
    for index, values in enumerate(content):
        if len(values) != len(columns):
            raise ValueError(
                f"Report row {index} has {len(values)} values for {len(columns)} columns"
            )
        rows.append(dict(zip(columns, values)))
    return rows
