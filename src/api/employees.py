from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from src.api.dependencies import get_employee_directory_service
from src.schemas.employee_directory import EmployeeDetail, EmployeeListFilters, EmployeeSummary
from src.services.employee_directory_service import EmployeeDirectoryService
from src.shared.response import ResponseEnvelope, build_meta, paginate_list

router = APIRouter(prefix="/employees", tags=["employees"])

DIRECTORY_SOURCE = "hr_employee_report"


def get_employee_list_filters(
    first_name: Optional[str] = Query(default=None, max_length=100),
    last_name: Optional[str] = Query(default=None, max_length=100),
    email: Optional[str] = Query(default=None, max_length=254),
    department_id: Optional[str] = Query(default=None, max_length=100),
    new_hires_only: bool = Query(default=False),
    include_past_employees: bool = Query(default=False),
) -> EmployeeListFilters:
    return EmployeeListFilters(
        first_name=first_name,
        last_name=last_name,
        email=email,
        department_id=department_id,
        new_hires_only=new_hires_only,
        include_past_employees=include_past_employees,
    )


@router.get("")
def list_employees(
    filters: EmployeeListFilters = Depends(get_employee_list_filters),
    page: Optional[int] = Query(default=None, ge=1),
    page_size: int = Query(default=100, ge=1, le=1000),
    service: EmployeeDirectoryService = Depends(get_employee_directory_service),
) -> ResponseEnvelope[List[EmployeeSummary]]:
    data = service.list_employees(filters)
    pagination = None
    if page is not None:
        data, pagination = paginate_list(data, page, page_size)
    return ResponseEnvelope(
        data=data,
        pagination=pagination,
        meta=build_meta(
            source=DIRECTORY_SOURCE,
            is_stale=service.is_stale(),
            generated_at=service.loaded_at(),
        ),
    )


@router.get("/{employee_id}")
def get_employee(
    employee_id: str,
    include_direct_reports: bool = Query(default=False),
    service: EmployeeDirectoryService = Depends(get_employee_directory_service),
) -> ResponseEnvelope[EmployeeDetail]:
    data = service.get_employee(employee_id, include_direct_reports=include_direct_reports)
    return ResponseEnvelope(
        data=data,
        pagination=None,
        meta=build_meta(
            source=DIRECTORY_SOURCE,
            is_stale=service.is_stale(),
            generated_at=service.loaded_at(),
        ),
    )
