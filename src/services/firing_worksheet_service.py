from __future__ import annotations

import base64
import binascii
import logging
from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence, Tuple

import httpx

from src.analytics.firing_cost import format_usd, list_firing_options, quote_worksheet
from src.core.errors import UpstreamFetchError, ValidationError
from src.repositories.cart_repository import CartRepository
from src.schemas.firing_worksheet import (
    FiringCartResult,
    FiringLineItemQuote,
    FiringLineItemRequest,
    FiringOption,
    FiringWorksheetQuote,
    FiringWorksheetRequest,
)

logger = logging.getLogger(__name__)

CUSTOM_ITEM_TYPE = "custom"


class FiringWorksheetService:
    def __init__(
        self,
        repository: CartRepository,
        app_id: str,
        upload_folder: str = "/firing-worksheet-Uploads",
    ) -> None:
        self.repository = repository
        self.app_id = app_id
        self.upload_folder = upload_folder

    def get_options(self) -> List[FiringOption]:
        return list_firing_options()

    def quote(self, request: FiringWorksheetRequest) -> FiringWorksheetQuote:
        return quote_worksheet(request.items)

    def add_worksheet_to_cart(self, request: FiringWorksheetRequest) -> FiringCartResult:
        quote = quote_worksheet(request.items)
        pairs = list(zip(request.items, quote.line_items))
        photos = [self._decode_photo(item.photo_base64) for item in request.items]

        try:
            cart, created_new_cart = self._replace_firing_items(pairs, photos)
            used_fallback = False
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Adding firing worksheet to current cart failed, creating a new cart: %s", exc)
            cart = self._create_fallback_cart(pairs, photos)
            created_new_cart = True
            used_fallback = True

        return FiringCartResult(
            cart_id=(cart.get("id") or cart.get("_id")) if cart else None,
            line_item_count=len(pairs),
            subtotal=quote.total_price,
            formatted_subtotal=format_usd(quote.total_price),
            created_new_cart=created_new_cart,
            used_fallback=used_fallback,
        )

    def _replace_firing_items(
        self,
        pairs: Sequence[Tuple[FiringLineItemRequest, FiringLineItemQuote]],
        photos: Sequence[Optional[bytes]],
    ) -> Tuple[Dict[str, Any], bool]:
        existing_cart = self.repository.get_current_cart()
        custom_line_items = self._build_custom_line_items(pairs, photos)
        if not existing_cart:
            return self.repository.create_cart(custom_line_items), True

        firing_item_ids = [
            str(line_item.get("id") or line_item.get("_id"))
            for line_item in existing_cart.get("lineItems") or []
            if (line_item.get("itemType") or {}).get("custom") == CUSTOM_ITEM_TYPE
            and (line_item.get("id") or line_item.get("_id"))
        ]
        if firing_item_ids:
            self.repository.remove_line_items_from_current_cart(firing_item_ids)
        return self.repository.add_to_current_cart(custom_line_items), False

    def _create_fallback_cart(
        self,
        pairs: Sequence[Tuple[FiringLineItemRequest, FiringLineItemQuote]],
        photos: Sequence[Optional[bytes]],
    ) -> Dict[str, Any]:
        try:
            custom_line_items = self._build_custom_line_items(pairs, photos)
            cart = self.repository.create_cart(custom_line_items)
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("Fallback cart creation failed: %s", exc)
            raise UpstreamFetchError("Failed to create cart during fallback") from exc
        logger.info("Fallback cart created: %s", cart.get("id") or cart.get("_id"))
        return cart

    def _build_custom_line_items(
        self,
        pairs: Sequence[Tuple[FiringLineItemRequest, FiringLineItemQuote]],
        photos: Sequence[Optional[bytes]],
    ) -> List[Dict[str, Any]]:
        line_items: List[Dict[str, Any]] = []
        for index, ((item, line), photo) in enumerate(zip(pairs, photos)):
            image_url = ""
            if photo:
                image_url = self.repository.upload_image(
                    self.upload_folder, f"firing-worksheet-{index + 1}.png", photo
                )
            line_items.append(self._custom_line_item(item, line, image_url))
        return line_items

    def _custom_line_item(
        self, item: FiringLineItemRequest, line: FiringLineItemQuote, image_url: str
    ) -> Dict[str, Any]:
        price = self._price_text(line.piece_price)
        return {
            "itemType": {"custom": CUSTOM_ITEM_TYPE},
            "media": image_url,
            "price": price,
            "priceDescription": {"original": price},
            "descriptionLines": [
                self._description_line("Due Date", item.due_date or ""),
                self._description_line("Special Directions", item.special_directions or ""),
                self._description_line("Height", str(line.height)),
                self._description_line("Width", str(line.width)),
                self._description_line("Length", str(line.length)),
            ],
            "productName": {"original": line.firing_type},
            "catalogReference": {
                "appId": self.app_id,
                "catalogItemId": item.catalog_item_id or "",
                "options": {
                    "Type": line.firing_type,
                    "Height": str(line.height),
                    "Width": str(line.width),
                    "Length": str(line.length),
                    "Image": image_url,
                },
            },
            "quantity": line.quantity,
        }

    @staticmethod
    def _description_line(name: str, value: str) -> Dict[str, Any]:
        return {"name": {"original": name}, "plainText": {"original": value}}

    @staticmethod
    def _price_text(value: Decimal) -> str:
        return f"{value:.2f}"

    @staticmethod
    def _decode_photo(photo_base64: Optional[str]) -> Optional[bytes]:
        if not photo_base64:
            return None
        payload = photo_base64.split(",", 1)[1] if photo_base64.startswith("data:") else photo_base64
        try:
            return base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise ValidationError("Photo must be a base64-encoded PNG image") from exc
