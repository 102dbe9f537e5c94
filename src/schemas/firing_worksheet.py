from __future__ import annotations

from decimal import Decimal
from typing import List, Optional

from pydantic import ConfigDict, Field

from src.shared.base import BaseSchema


class FiringOption(BaseSchema):
    firing_type: str
    unit_cost: Decimal


class FiringLineItemRequest(BaseSchema):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    firing_type: str
    height: int
    width: int
    length: int
    quantity: int = 1
    due_date: Optional[str] = None
    special_directions: Optional[str] = None
    photo_base64: Optional[str] = None
    catalog_item_id: Optional[str] = None


class FiringWorksheetRequest(BaseSchema):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    items: List[FiringLineItemRequest] = Field(min_length=1, max_length=100)


class FiringLineItemQuote(BaseSchema):
    firing_type: str
    unit_cost: Decimal
    height: int
    width: int
    length: int
    volume: int
    quantity: int
    piece_price: Decimal
    price: Decimal
    formatted_unit_cost: str
    formatted_price: str


class FiringWorksheetQuote(BaseSchema):
    line_items: List[FiringLineItemQuote]
    total_price: Decimal
    formatted_total_price: str
    currency_code: str = "USD"


class FiringCartResult(BaseSchema):
    cart_id: Optional[str] = None
    line_item_count: int
    subtotal: Decimal
    formatted_subtotal: str
    created_new_cart: bool
    used_fallback: bool
