from __future__ import annotations

from typing import Any, Dict, List, Optional

from src.core.ecommerce import CARTS_PATH, CURRENT_CART_PATH, EcommerceClient


class CartRepository:
    def __init__(self, client: Optional[EcommerceClient] = None) -> None:
        self._client = client

    @property
    def client(self) -> EcommerceClient:
        # Created on first use so quoting works without cart credentials.
        if self._client is None:
            self._client = EcommerceClient()
        return self._client

    def get_current_cart(self) -> Optional[Dict[str, Any]]:
        data = self.client.get(CURRENT_CART_PATH)
        if not data:
            return None
        return data.get("cart") or None

    def create_cart(self, custom_line_items: List[Dict[str, Any]]) -> Dict[str, Any]:
        data = self.client.post(CARTS_PATH, {"customLineItems": custom_line_items})
        return data.get("cart") or {}

    def add_to_current_cart(self, custom_line_items: List[Dict[str, Any]]) -> Dict[str, Any]:
        data = self.client.post(
            f"{CURRENT_CART_PATH}/add-to-cart",
            {"customLineItems": custom_line_items},
        )
        return data.get("cart") or {}

    def remove_line_items_from_current_cart(self, line_item_ids: List[str]) -> Dict[str, Any]:
        data = self.client.post(
            f"{CURRENT_CART_PATH}/remove-line-items",
            {"lineItemIds": line_item_ids},
        )
        return data.get("cart") or {}

    def upload_image(self, folder: str, file_name: str, content: bytes) -> str:
        data = self.client.upload(folder, file_name, content, "image/png")
        file_info = data.get("file") or data
        return str(file_info.get("url") or file_info.get("fileUrl") or "")
