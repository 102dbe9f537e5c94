from __future__ import annotations

from threading import Lock
from typing import Any, Dict, List, Optional

import httpx

from src.core.config import get_settings

CARTS_PATH = "/ecom/v1/carts"
CURRENT_CART_PATH = "/ecom/v1/carts/current"
MEDIA_UPLOAD_PATH = "/site-media/v1/files/upload"


class EcommerceClient:
    _shared_client: httpx.Client | None = None
    _client_lock: Lock = Lock()

    def __init__(self, http_client: Optional[httpx.Client] = None) -> None:
        settings = get_settings()
        self.base_url = settings.ecommerce_api_url.rstrip("/")
        self.api_key = settings.ecommerce_api_key
        self.site_id = settings.ecommerce_site_id
        if not self.api_key:
            raise ValueError("E-commerce API key is required")
        self._client = http_client or self._get_shared_client(settings.ecommerce_timeout_seconds)

    @classmethod
    def _get_shared_client(cls, timeout: float) -> httpx.Client:
        if cls._shared_client is not None:
            return cls._shared_client
        with cls._client_lock:
            if cls._shared_client is None:
                cls._shared_client = httpx.Client(
                    timeout=timeout,
                    limits=httpx.Limits(max_keepalive_connections=5, max_connections=20),
                )
        return cls._shared_client

    def _headers(self) -> Dict[str, str]:
        headers = {
            "Authorization": str(self.api_key),
            "Content-Type": "application/json",
        }
        if self.site_id:
            headers["wix-site-id"] = self.site_id
        return headers

    def get(self, path: str) -> Optional[Dict[str, Any]]:
        response = self._client.get(f"{self.base_url}{path}", headers=self._headers())
        if response.status_code == 404:
            return None
        response.raise_for_status()
        if not response.content:
            return None
        return response.json()

    def post(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        response = self._client.post(f"{self.base_url}{path}", headers=self._headers(), json=payload)
        response.raise_for_status()
        if not response.content:
            return {}
        data = response.json()
        if isinstance(data, dict):
            return data
        return {}

    def upload(
        self,
        folder: str,
        file_name: str,
        content: bytes,
        mime_type: str,
    ) -> Dict[str, Any]:
        headers = self._headers()
        headers.pop("Content-Type", None)
        files: List[tuple[str, tuple[str, bytes, str]]] = [("file", (file_name, content, mime_type))]
        response = self._client.post(
            f"{self.base_url}{MEDIA_UPLOAD_PATH}",
            headers=headers,
            data={"parentFolder": folder, "mediaType": "image"},
            files=files,
        )
        response.raise_for_status()
        return response.json()
