from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

import httpx
import pytest
from fastapi.testclient import TestClient

from src.api.dependencies import get_employee_directory_service
from src.core.errors import UpstreamFetchError
from src.main import create_app
from src.repositories.employee_report_repository import EmployeeReportRepository
from src.services.employee_directory_cache import EmployeeDirectoryCache
from src.services.employee_directory_service import EmployeeDirectoryService

NOW = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)

REPORT_COLUMNS = [
    "guid",
    "first_name",
    "last_name",
    "email",
    "job_title",
    "user_status",
    "start_date",
    "departure_date",
    "reports_to_email",
    "department_id",
    "department_name",
    "office_location",
    "personal_email",
]

REPORT_CONTENT: List[List[Any]] = [
    ["e-100", "Ada", "Lovelace", "ada@acme.io", "CTO", "active", "2020-01-15", None, None,
     "Development", "Development", "London", "ada@home.example"],
    ["e-101", "Grace", "Hopper", "grace@acme.io", "Engineer", "active", "2022-03-01", None, "ada@acme.io",
     "Development", "Development", "New York", None],
    ["e-102", "Alan", "Turing", "alan@acme.io", "Engineer", "inactive", "2021-06-01", "2023-06-01",
     "ada@acme.io", "Development", "Development", "London", None],
    ["e-103", "Katherine", "Johnson", "katherine@acme.io", "Analyst", "active", "2024-06-10", "",
     "grace@acme.io", "Finance", "Finance", "Remote", None],
    ["e-104", "Margaret", "Hamilton", "margaret@acme.io", "Director", "inactive", "2019-09-01", "2022-09-01",
     None, "Operations", "Operations", "Boston", None],
    ["e-105", "Linus", "Pauling", "linus@acme.io", "Chemist", "active", "2023-01-01", None, "ADA@acme.io",
     None, None, "Portland", None],
]


def build_report_payload(
    columns: Optional[List[str]] = None,
    content: Optional[List[List[Any]]] = None,
) -> Dict[str, Any]:
    return {
        "reports": [
            {
                "columns": [
                    {"name": name, "label": name.replace("_", " ").title()}
                    for name in (columns or REPORT_COLUMNS)
                ],
                "content": [list(row) for row in (content if content is not None else REPORT_CONTENT)],
            }
        ]
    }


class StubReportRepository:
    def __init__(self, payload: Optional[Dict[str, Any]] = None) -> None:
        self.payload = payload or build_report_payload()
        self.fetch_count = 0
        self.error: Optional[Exception] = None

    def fetch_rows(self) -> List[Dict[str, Any]]:
        self.fetch_count += 1
        if self.error is not None:
            raise self.error
        return EmployeeReportRepository.parse_report(self.payload)


class StubRefreshStateRepository:
    def __init__(self, last_refresh: Optional[datetime] = None) -> None:
        self.last_refresh = last_refresh

    def get_last_refresh(self) -> Optional[datetime]:
        return self.last_refresh

    def set_last_refresh(self, value: datetime) -> bool:
        self.last_refresh = value
        return True


class MutableClock:
    def __init__(self, now: datetime = NOW) -> None:
        self.value = now

    def __call__(self) -> datetime:
        return self.value

    def advance(self, delta: timedelta) -> None:
        self.value = self.value + delta


@pytest.fixture()
def clock() -> MutableClock:
    return MutableClock()


@pytest.fixture()
def report_repository() -> StubReportRepository:
    return StubReportRepository()


@pytest.fixture()
def state_repository() -> StubRefreshStateRepository:
    return StubRefreshStateRepository()


@pytest.fixture()
def directory_cache(
    report_repository: StubReportRepository,
    state_repository: StubRefreshStateRepository,
    clock: MutableClock,
) -> EmployeeDirectoryCache:
    return EmployeeDirectoryCache(
        report_repository=report_repository,  # type: ignore[arg-type]
        state_repository=state_repository,  # type: ignore[arg-type]
        freshness_window=timedelta(hours=24),
        clock=clock,
    )


@pytest.fixture()
def directory_service(directory_cache: EmployeeDirectoryCache) -> EmployeeDirectoryService:
    return EmployeeDirectoryService(cache=directory_cache, new_hire_window_days=7)


@pytest.fixture()
def client(directory_service: EmployeeDirectoryService) -> TestClient:
    app = create_app()
    app.dependency_overrides[get_employee_directory_service] = lambda: directory_service
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def failing_report_repository(report_repository: StubReportRepository) -> StubReportRepository:
    report_repository.error = UpstreamFetchError("Employee report request failed with status 503")
    return report_repository


class StubCartRepository:
    def __init__(self, current_cart: Optional[Dict[str, Any]] = None) -> None:
        self.current_cart = current_cart
        self.calls: List[str] = []
        self.created: List[List[Dict[str, Any]]] = []
        self.added: List[List[Dict[str, Any]]] = []
        self.removed: List[List[str]] = []
        self.uploads: List[str] = []
        self.fail_on: set[str] = set()

    def _maybe_fail(self, name: str) -> None:
        self.calls.append(name)
        if name in self.fail_on:
            request = httpx.Request("POST", "https://ecommerce.example.test")
            raise httpx.ConnectError("connection reset", request=request)

    def get_current_cart(self) -> Optional[Dict[str, Any]]:
        self._maybe_fail("get_current_cart")
        return self.current_cart

    def create_cart(self, custom_line_items: List[Dict[str, Any]]) -> Dict[str, Any]:
        self._maybe_fail("create_cart")
        self.created.append(custom_line_items)
        return {"id": "cart-new", "lineItems": custom_line_items}

    def add_to_current_cart(self, custom_line_items: List[Dict[str, Any]]) -> Dict[str, Any]:
        self._maybe_fail("add_to_current_cart")
        self.added.append(custom_line_items)
        return {"id": "cart-current"}

    def remove_line_items_from_current_cart(self, line_item_ids: List[str]) -> Dict[str, Any]:
        self._maybe_fail("remove_line_items_from_current_cart")
        self.removed.append(line_item_ids)
        return {"id": "cart-current"}

    def upload_image(self, folder: str, file_name: str, content: bytes) -> str:
        self._maybe_fail("upload_image")
        self.uploads.append(f"{folder}/{file_name}")
        return f"https://media.example.test/{file_name}"
