from __future__ import annotations

import re
from datetime import datetime, timedelta
from typing import Iterable, List, Optional

from src.analytics.employee_directory import department_display_name, rounded_mean
from src.core.errors import EmptyResultError, NotFoundError, ValidationError
from src.models.employee_directory import (
    ALL_DEPARTMENT_ID,
    DepartmentRecord,
    DirectorySnapshot,
    EmployeeRecord,
)
from src.schemas.employee_directory import (
    Department,
    DirectoryStatus,
    EmployeeDetail,
    EmployeeListFilters,
    EmployeeSummary,
)
from src.services.employee_directory_cache import EmployeeDirectoryCache

EMPLOYEE_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")


class EmployeeDirectoryService:
    def __init__(self, cache: EmployeeDirectoryCache, new_hire_window_days: int = 7) -> None:
        self.cache = cache
        self.new_hire_window = timedelta(days=new_hire_window_days)

    def get_employee(self, employee_id: str, include_direct_reports: bool = False) -> EmployeeDetail:
        if not EMPLOYEE_ID_PATTERN.match(employee_id or ""):
            raise ValidationError(f"Invalid employee id: {employee_id!r}")
        snapshot = self.cache.snapshot()
        employee = snapshot.employees.get(employee_id)
        if employee is None:
            raise NotFoundError(f"Employee {employee_id} not found")

        detail = EmployeeDetail(
            **self._map_employee(employee).model_dump(),
            attributes=employee.attributes,
        )
        if include_direct_reports:
            detail.direct_reports = [
                self._map_employee(report)
                for report in snapshot.employees.values()
                if not report.is_past_employee
                and employee.email
                and report.reports_to_email == employee.email
            ]
        return detail

    def list_employees(self, filters: EmployeeListFilters) -> List[EmployeeSummary]:
        snapshot = self.cache.snapshot()
        now = self.cache.now()
        first_name = (filters.first_name or "").lower()
        last_name = (filters.last_name or "").lower()
        email = (filters.email or "").lower()

        results: List[EmployeeSummary] = []
        for employee in snapshot.employees.values():
            if not filters.include_past_employees and employee.is_past_employee:
                continue
            if first_name and first_name not in employee.first_name.lower():
                continue
            if last_name and last_name not in employee.last_name.lower():
                continue
            if email and not employee.email.lower().startswith(email):
                continue
            if filters.department_id and employee.department_id != filters.department_id:
                continue
            if filters.new_hires_only:
                if employee.start_date is None or abs(now - employee.start_date) > self.new_hire_window:
                    continue
            results.append(self._map_employee(employee))
        return results

    def get_department(self, department_id: str, include_past_employees: bool = False) -> Department:
        snapshot = self.cache.snapshot()
        record = self._find_department(snapshot, department_id, match_name=False)
        if record is None:
            raise NotFoundError(f"Department {department_id} not found")
        return self._recompute_department(snapshot, record, include_past_employees)

    def get_department_by_name(self, name_or_id: str, include_past_employees: bool = False) -> Department:
        snapshot = self.cache.snapshot()
        record = self._find_department(snapshot, name_or_id, match_name=True)
        if record is None:
            raise NotFoundError(f"Department {name_or_id} not found")
        return self._recompute_department(snapshot, record, include_past_employees)

    def list_departments(self, include_past_employees: bool = False) -> List[Department]:
        snapshot = self.cache.snapshot()
        departments = [
            self._recompute_department(snapshot, record, include_past_employees)
            for record in snapshot.departments.values()
        ]
        if not include_past_employees:
            departments = [item for item in departments if item.department_headcount > 0]
        if not departments:
            raise EmptyResultError("No departments with active employees")
        return sorted(departments, key=lambda item: (item.name.lower(), item.id or ""))

    def loaded_at(self) -> Optional[datetime]:
        snapshot = self.cache.current
        return snapshot.loaded_at if snapshot else None

    def is_stale(self) -> bool:
        return self.cache.is_stale()

    def get_status(self) -> DirectoryStatus:
        snapshot = self.cache.current
        return DirectoryStatus(
            loaded=snapshot is not None,
            loaded_at=snapshot.loaded_at if snapshot else None,
            is_stale=self.cache.is_stale(),
            employee_count=len(snapshot.employees) if snapshot else 0,
            department_count=len(snapshot.departments) if snapshot else 0,
            freshness_window_hours=int(self.cache.freshness_window.total_seconds() // 3600),
        )

    def refresh(self) -> DirectoryStatus:
        self.cache.refresh()
        return self.get_status()

    @staticmethod
    def _find_department(
        snapshot: DirectorySnapshot, value: str, match_name: bool
    ) -> Optional[DepartmentRecord]:
        for record in snapshot.departments.values():
            if record.id is not None and record.id == value:
                return record
        if match_name:
            lowered = value.lower()
            for record in snapshot.departments.values():
                if record.name.lower() == lowered:
                    return record
        # A real department named "all" shadows the synthetic bucket.
        if value == ALL_DEPARTMENT_ID or (match_name and value.lower() == ALL_DEPARTMENT_ID):
            return snapshot.all_department
        return None

    def _recompute_department(
        self,
        snapshot: DirectorySnapshot,
        record: DepartmentRecord,
        include_past_employees: bool,
    ) -> Department:
        if record is snapshot.all_department:
            members: Iterable[EmployeeRecord] = snapshot.employees.values()
        else:
            members = (
                employee for employee in snapshot.employees.values() if employee.department_id == record.id
            )
        headcount = 0
        total_tenure = 0
        for employee in members:
            if not include_past_employees and employee.is_past_employee:
                continue
            headcount += 1
            total_tenure += employee.tenure_in_months
        return Department(
            id=record.id,
            name=record.name,
            department_headcount=headcount,
            average_tenure_in_months=rounded_mean(total_tenure, headcount),
            include_past_employees=include_past_employees,
        )

    @staticmethod
    def _map_employee(employee: EmployeeRecord) -> EmployeeSummary:
        return EmployeeSummary(
            id=employee.guid,
            first_name=employee.first_name,
            last_name=employee.last_name,
            email=employee.email,
            job_title=employee.job_title,
            status=employee.status,
            start_date=employee.start_date,
            departure_date=employee.departure_date,
            manager_email=employee.reports_to_email,
            department_id=employee.department_id,
            department_name=department_display_name(employee),
            office_location=employee.office_location,
            tenure_in_months=employee.tenure_in_months,
            tenure_in_years=employee.tenure_in_years,
            reports_to_count=employee.reports_to_count,
            is_past_employee=employee.is_past_employee,
        )
