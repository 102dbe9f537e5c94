from __future__ import annotations

from typing import Any, Dict, List, Optional

import httpx

from src.analytics.employee_directory import pivot_report_rows
from src.core.config import get_settings
from src.core.errors import UpstreamFetchError
from src.core.hr_platform import HrPlatformClient
from src.models.employee_directory import REQUIRED_REPORT_COLUMNS


class EmployeeReportRepository:
    def __init__(self, client: Optional[HrPlatformClient] = None, report_id: Optional[str] = None) -> None:
        self.client = client or HrPlatformClient()
        self.report_id = report_id or get_settings().hr_employee_report_id
        if not self.report_id:
            raise ValueError("HR_EMPLOYEE_REPORT_ID is required")

    def fetch_rows(self) -> List[Dict[str, Any]]:
        try:
            payload = self.client.get_report(self.report_id)
        except httpx.HTTPStatusError as exc:
            raise UpstreamFetchError(
                f"Employee report request failed with status {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise UpstreamFetchError(f"Employee report request failed: {exc}") from exc
        except ValueError as exc:
            raise UpstreamFetchError("Employee report response is not valid JSON") from exc
        return self.parse_report(payload)

    @staticmethod
    def parse_report(payload: Any) -> List[Dict[str, Any]]:
        if not isinstance(payload, dict):
            raise UpstreamFetchError("Employee report payload must be a JSON object")
        reports = payload.get("reports")
        if not isinstance(reports, list) or not reports or not isinstance(reports[0], dict):
            raise UpstreamFetchError("Employee report payload has no reports")
        report = reports[0]

        raw_columns = report.get("columns")
        content = report.get("content")
        if not isinstance(raw_columns, list) or not isinstance(content, list):
            raise UpstreamFetchError("Employee report is missing columns or content")
        columns = [str(column.get("name") or "") if isinstance(column, dict) else "" for column in raw_columns]
        if any(not name for name in columns):
            raise UpstreamFetchError("Employee report has unnamed columns")

        missing = sorted(REQUIRED_REPORT_COLUMNS - set(columns))
        if missing:
            raise UpstreamFetchError(f"Employee report is missing expected columns: {', '.join(missing)}")

        if any(not isinstance(row, list) for row in content):
            raise UpstreamFetchError("Employee report rows must be arrays")
        try:
            return pivot_report_rows(columns, content)
        except ValueError as exc:
            raise UpstreamFetchError(f"Malformed employee report: {exc}") from exc
