from __future__ import annotations

from datetime import timedelta
from functools import lru_cache

from src.core.config import get_settings
from src.repositories.cart_repository import CartRepository
from src.repositories.employee_report_repository import EmployeeReportRepository
from src.repositories.refresh_state_repository import RefreshStateRepository
from src.services.employee_directory_cache import EmployeeDirectoryCache
from src.services.employee_directory_service import EmployeeDirectoryService
from src.services.firing_worksheet_service import FiringWorksheetService


@lru_cache
def get_employee_directory_cache() -> EmployeeDirectoryCache:
    settings = get_settings()
    return EmployeeDirectoryCache(
        report_repository=EmployeeReportRepository(),
        state_repository=RefreshStateRepository(),
        freshness_window=timedelta(hours=settings.directory_freshness_hours),
    )


def get_employee_directory_service() -> EmployeeDirectoryService:
    return EmployeeDirectoryService(
        cache=get_employee_directory_cache(),
        new_hire_window_days=get_settings().directory_new_hire_window_days,
    )


@lru_cache
def get_cart_repository() -> CartRepository:
    return CartRepository()


def get_firing_worksheet_service() -> FiringWorksheetService:
    settings = get_settings()
    return FiringWorksheetService(
        repository=get_cart_repository(),
        app_id=settings.ecommerce_app_id,
        upload_folder=settings.firing_upload_folder,
    )
