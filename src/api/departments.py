from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Query

from src.api.dependencies import get_employee_directory_service
from src.schemas.employee_directory import Department
from src.services.employee_directory_service import EmployeeDirectoryService
from src.shared.response import ResponseEnvelope, build_meta

router = APIRouter(prefix="/departments", tags=["departments"])

DEPARTMENT_SOURCE = "hr_employee_report"


@router.get("")
def list_departments(
    include_past_employees: bool = Query(default=False),
    service: EmployeeDirectoryService = Depends(get_employee_directory_service),
) -> ResponseEnvelope[List[Department]]:
    data = service.list_departments(include_past_employees=include_past_employees)
    return ResponseEnvelope(
        data=data,
        pagination=None,
        meta=build_meta(
            source=DEPARTMENT_SOURCE,
            is_stale=service.is_stale(),
            generated_at=service.loaded_at(),
        ),
    )


@router.get("/{department_name}")
def get_department(
    department_name: str,
    include_past_employees: bool = Query(default=False),
    service: EmployeeDirectoryService = Depends(get_employee_directory_service),
) -> ResponseEnvelope[Department]:
    data = service.get_department_by_name(department_name, include_past_employees=include_past_employees)
    return ResponseEnvelope(
        data=data,
        pagination=None,
        meta=build_meta(
            source=DEPARTMENT_SOURCE,
            is_stale=service.is_stale(),
            generated_at=service.loaded_at(),
        ),
    )
