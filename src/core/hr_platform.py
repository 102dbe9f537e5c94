from __future__ import annotations

from threading import Lock
from typing import Any, Dict, Optional

import httpx

from src.core.config import get_settings


class HrPlatformClient:
    _shared_client: httpx.Client | None = None
    _client_lock: Lock = Lock()

    def __init__(self, http_client: Optional[httpx.Client] = None) -> None:
        settings = get_settings()
        self.base_url = settings.hr_api_base_url.rstrip("/")
        self.api_token = settings.hr_api_token
        if not self.base_url:
            raise ValueError("HR_API_BASE_URL is required")
        if not self.api_token:
            raise ValueError("HR API token is required")
        self._client = http_client or self._get_shared_client(settings.hr_request_timeout_seconds)

    @classmethod
    def _get_shared_client(cls, timeout: float) -> httpx.Client:
        if cls._shared_client is not None:
            return cls._shared_client
        with cls._client_lock:
            if cls._shared_client is None:
                cls._shared_client = httpx.Client(
                    timeout=timeout,
                    limits=httpx.Limits(max_keepalive_connections=5, max_connections=10),
                )
        return cls._shared_client

    def get_report(self, report_id: str) -> Dict[str, Any]:
        headers = {
            "Accept": "application/json",
            "Authorization": f"Bearer {self.api_token}",
        }
        url = f"{self.base_url}/reports/{report_id}"
        response = self._client.get(url, headers=headers)
        response.raise_for_status()
        return response.json()
