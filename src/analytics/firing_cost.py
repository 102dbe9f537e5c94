"""Pricing for kiln firing line items.

Cost is charged by the cubic inch: ``unit_cost * length * width * height`` per
piece, times the quantity. For example three 4" x 2" x 6" cups fired at
Oxidation ∆ 6 cost ``3 * 4 * 2 * 6 * $0.03 = $4.32``.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, List

from src.core.errors import ValidationError
from src.schemas.firing_worksheet import (
    FiringLineItemQuote,
    FiringLineItemRequest,
    FiringOption,
    FiringWorksheetQuote,
)

FIRING_OPTIONS: Dict[str, Decimal] = {
    "Bisque": Decimal("0.03"),
    "Slipcast Bisque": Decimal("0.04"),
    "Oxidation ∆ 6": Decimal("0.03"),
    "Oxidation ∆ 10": Decimal("0.06"),
    "Reduction ∆ 10": Decimal("0.06"),
}

MIN_DIMENSION = 1
MAX_DIMENSION = 120
MIN_QUANTITY = 1
MAX_QUANTITY = 100
MAX_UNIT_COST = Decimal("5")
MAX_VOLUME = 1_000_000
CENT = Decimal("0.01")

INVALID_DIMENSIONS_MESSAGE = (
    "Invalid dimensions or quantity. Please use positive whole numbers within the allowed limits."
)
INVALID_UNIT_COST_MESSAGE = "Invalid unit cost. Please enter a value between 0 and 5."
VOLUME_OUT_OF_RANGE_MESSAGE = "Volume out of range. Please adjust dimensions."


def list_firing_options() -> List[FiringOption]:
    return [FiringOption(firing_type=name, unit_cost=cost) for name, cost in FIRING_OPTIONS.items()]


def format_usd(amount: Decimal) -> str:
    rounded = amount.quantize(CENT, rounding=ROUND_HALF_UP)
    sign = "-" if rounded < 0 else ""
    return f"{sign}${abs(rounded):,.2f}"


def resolve_unit_cost(firing_type: str) -> Decimal:
    unit_cost = FIRING_OPTIONS.get(firing_type)
    if unit_cost is None:
        raise ValidationError(f"Unknown firing type: {firing_type}")
    return unit_cost


def price_line_item(item: FiringLineItemRequest) -> FiringLineItemQuote:
    unit_cost = resolve_unit_cost(item.firing_type)
    dimensions = (item.length, item.width, item.height)
    if any(value < MIN_DIMENSION or value > MAX_DIMENSION for value in dimensions) or not (
        MIN_QUANTITY <= item.quantity <= MAX_QUANTITY
    ):
        raise ValidationError(INVALID_DIMENSIONS_MESSAGE)
    if unit_cost <= 0 or unit_cost >= MAX_UNIT_COST:
        raise ValidationError(INVALID_UNIT_COST_MESSAGE)

    volume = item.length * item.width * item.height
    if volume < 1 or volume >= MAX_VOLUME:
        raise ValidationError(VOLUME_OUT_OF_RANGE_MESSAGE)

    piece_price = (unit_cost * volume).quantize(CENT, rounding=ROUND_HALF_UP)
    price = (unit_cost * volume * item.quantity).quantize(CENT, rounding=ROUND_HALF_UP)
    return FiringLineItemQuote(
        firing_type=item.firing_type,
        unit_cost=unit_cost,
        height=item.height,
        width=item.width,
        length=item.length,
        volume=volume,
        quantity=item.quantity,
        piece_price=piece_price,
        price=price,
        formatted_unit_cost=format_usd(unit_cost),
        formatted_price=format_usd(price),
    )


def quote_worksheet(items: Iterable[FiringLineItemRequest]) -> FiringWorksheetQuote:
    line_items = [price_line_item(item) for item in items]
    total_price = sum((line.price for line in line_items), Decimal("0"))
    return FiringWorksheetQuote(
        line_items=line_items,
        total_price=total_price,
        formatted_total_price=format_usd(total_price),
    )
