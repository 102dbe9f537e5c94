from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Header

from src.api.dependencies import get_employee_directory_service
from src.core.config import get_settings
from src.core.errors import BadRequestError
from src.schemas.employee_directory import DirectoryStatus
from src.services.employee_directory_service import EmployeeDirectoryService
from src.shared.response import ResponseEnvelope, build_meta

router = APIRouter(prefix="/directory", tags=["directory"])


def _validate_manual_refresh_token(x_directory_refresh_token: Optional[str]) -> None:
    configured = (get_settings().directory_manual_refresh_token or "").strip()
    if not configured:
        raise BadRequestError("Directory manual refresh endpoint is disabled")
    if not x_directory_refresh_token or x_directory_refresh_token != configured:
        raise BadRequestError("Invalid directory refresh token")


@router.get("/status")
def directory_status(
    service: EmployeeDirectoryService = Depends(get_employee_directory_service),
) -> ResponseEnvelope[DirectoryStatus]:
    data = service.get_status()
    return ResponseEnvelope(
        data=data,
        pagination=None,
        meta=build_meta(
            source="directory_cache",
            data_status="stale" if data.is_stale else "live",
            is_stale=data.is_stale,
            generated_at=data.loaded_at,
        ),
    )


@router.post("/refresh")
def directory_refresh(
    service: EmployeeDirectoryService = Depends(get_employee_directory_service),
    x_directory_refresh_token: Optional[str] = Header(default=None),
) -> ResponseEnvelope[DirectoryStatus]:
    _validate_manual_refresh_token(x_directory_refresh_token)
    data = service.refresh()
    return ResponseEnvelope(
        data=data,
        pagination=None,
        meta=build_meta(source="directory_refresh", is_stale=data.is_stale, generated_at=data.loaded_at),
    )
