from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends

from src.api.dependencies import get_firing_worksheet_service
from src.schemas.firing_worksheet import (
    FiringCartResult,
    FiringOption,
    FiringWorksheetQuote,
    FiringWorksheetRequest,
)
from src.services.firing_worksheet_service import FiringWorksheetService
from src.shared.response import ResponseEnvelope, build_meta

router = APIRouter(prefix="/firing-worksheet", tags=["firing-worksheet"])


@router.get("/options")
def firing_options(
    service: FiringWorksheetService = Depends(get_firing_worksheet_service),
) -> ResponseEnvelope[List[FiringOption]]:
    return ResponseEnvelope(
        data=service.get_options(),
        pagination=None,
        meta=build_meta(source="firing_price_list"),
    )


@router.post("/quote")
def firing_quote(
    request: FiringWorksheetRequest,
    service: FiringWorksheetService = Depends(get_firing_worksheet_service),
) -> ResponseEnvelope[FiringWorksheetQuote]:
    return ResponseEnvelope(
        data=service.quote(request),
        pagination=None,
        meta=build_meta(source="firing_price_list"),
    )


@router.post("/cart")
def firing_add_to_cart(
    request: FiringWorksheetRequest,
    service: FiringWorksheetService = Depends(get_firing_worksheet_service),
) -> ResponseEnvelope[FiringCartResult]:
    result = service.add_worksheet_to_cart(request)
    return ResponseEnvelope(
        data=result,
        pagination=None,
        meta=build_meta(source="ecommerce_cart", data_status="fallback" if result.used_fallback else "live"),
    )
