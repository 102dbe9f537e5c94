from __future__ import annotations

import base64
from decimal import Decimal

import pytest

from src.core.errors import UpstreamFetchError, ValidationError
from src.schemas.firing_worksheet import FiringWorksheetRequest
from src.services.firing_worksheet_service import FiringWorksheetService
from tests.conftest import StubCartRepository

APP_ID = "firing-app"


def _request(**overrides) -> FiringWorksheetRequest:
    item = {
        "firingType": "Oxidation ∆ 6",
        "height": 6,
        "width": 2,
        "length": 4,
        "quantity": 3,
        "dueDate": "2024-07-01",
        "specialDirections": "Wax the feet",
    }
    item.update(overrides)
    return FiringWorksheetRequest.model_validate({"items": [item]})


def _service(repository: StubCartRepository) -> FiringWorksheetService:
    return FiringWorksheetService(repository=repository, app_id=APP_ID)  # type: ignore[arg-type]


def test_creates_cart_when_none_exists() -> None:
    repository = StubCartRepository()
    result = _service(repository).add_worksheet_to_cart(_request())

    assert result.cart_id == "cart-new"
    assert result.created_new_cart is True
    assert result.used_fallback is False
    assert result.subtotal == Decimal("4.32")
    assert result.formatted_subtotal == "$4.32"

    line_item = repository.created[0][0]
    assert line_item["price"] == "1.44"
    assert line_item["quantity"] == 3
    assert line_item["itemType"] == {"custom": "custom"}
    assert line_item["catalogReference"]["appId"] == APP_ID
    assert line_item["catalogReference"]["options"]["Type"] == "Oxidation ∆ 6"
    assert line_item["descriptionLines"][0]["plainText"]["original"] == "2024-07-01"


def test_replaces_previous_firing_items_in_current_cart() -> None:
    repository = StubCartRepository(
        current_cart={
            "id": "cart-current",
            "lineItems": [
                {"id": "line-1", "itemType": {"custom": "custom"}},
                {"id": "line-2", "itemType": {"preset": "PHYSICAL"}},
            ],
        }
    )
    result = _service(repository).add_worksheet_to_cart(_request())

    assert repository.removed == [["line-1"]]
    assert len(repository.added) == 1
    assert repository.created == []
    assert result.cart_id == "cart-current"
    assert result.created_new_cart is False


def test_falls_back_to_new_cart_when_current_cart_update_fails() -> None:
    repository = StubCartRepository(current_cart={"id": "cart-current", "lineItems": []})
    repository.fail_on = {"add_to_current_cart"}

    result = _service(repository).add_worksheet_to_cart(_request())

    assert result.used_fallback is True
    assert result.created_new_cart is True
    assert result.cart_id == "cart-new"
    assert len(repository.created) == 1


def test_fallback_failure_raises_upstream_error() -> None:
    repository = StubCartRepository()
    repository.fail_on = {"get_current_cart", "create_cart"}

    with pytest.raises(UpstreamFetchError) as excinfo:
        _service(repository).add_worksheet_to_cart(_request())
    assert excinfo.value.message == "Failed to create cart during fallback"


def test_photo_is_uploaded_and_linked() -> None:
    repository = StubCartRepository()
    photo = "data:image/png;base64," + base64.b64encode(b"\x89PNG fake").decode("ascii")

    _service(repository).add_worksheet_to_cart(_request(photoBase64=photo))

    assert repository.uploads == ["/firing-worksheet-Uploads/firing-worksheet-1.png"]
    line_item = repository.created[0][0]
    assert line_item["media"] == "https://media.example.test/firing-worksheet-1.png"
    assert line_item["catalogReference"]["options"]["Image"] == line_item["media"]


def test_invalid_photo_is_rejected_before_touching_cart() -> None:
    repository = StubCartRepository()
    with pytest.raises(ValidationError):
        _service(repository).add_worksheet_to_cart(_request(photoBase64="not base64!!"))
    assert repository.calls == []


def test_invalid_dimensions_are_rejected_before_touching_cart() -> None:
    repository = StubCartRepository()
    with pytest.raises(ValidationError):
        _service(repository).add_worksheet_to_cart(_request(height=500))
    assert repository.calls == []
