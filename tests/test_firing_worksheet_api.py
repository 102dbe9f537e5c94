from __future__ import annotations

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from src.api.dependencies import get_firing_worksheet_service
from src.main import create_app
from src.services.firing_worksheet_service import FiringWorksheetService
from tests.conftest import StubCartRepository


@pytest.fixture()
def cart_repository() -> StubCartRepository:
    return StubCartRepository()


@pytest.fixture()
def firing_client(cart_repository: StubCartRepository) -> TestClient:
    app = create_app()
    service = FiringWorksheetService(repository=cart_repository, app_id="firing-app")  # type: ignore[arg-type]
    app.dependency_overrides[get_firing_worksheet_service] = lambda: service
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


WORKSHEET = {
    "items": [
        {"firingType": "Oxidation ∆ 6", "height": 6, "width": 2, "length": 4, "quantity": 3},
        {"firingType": "Reduction ∆ 10", "height": 8, "width": 9, "length": 5, "quantity": 4},
    ]
}


def test_firing_options(firing_client: TestClient) -> None:
    response = firing_client.get("/api/v1/firing-worksheet/options")
    assert response.status_code == 200
    data = response.json()["data"]
    assert data[0]["firingType"] == "Bisque"
    assert Decimal(data[0]["unitCost"]) == Decimal("0.03")


def test_firing_quote(firing_client: TestClient, cart_repository: StubCartRepository) -> None:
    response = firing_client.post("/api/v1/firing-worksheet/quote", json=WORKSHEET)
    assert response.status_code == 200
    data = response.json()["data"]
    assert [Decimal(line["price"]) for line in data["lineItems"]] == [Decimal("4.32"), Decimal("86.40")]
    assert data["formattedTotalPrice"] == "$90.72"
    assert cart_repository.calls == []


def test_firing_quote_invalid_dimensions(firing_client: TestClient) -> None:
    worksheet = {"items": [{"firingType": "Bisque", "height": 0, "width": 2, "length": 4}]}
    response = firing_client.post("/api/v1/firing-worksheet/quote", json=worksheet)
    assert response.status_code == 400
    payload = response.json()
    assert payload["error"]["code"] == "validation_error"
    assert payload["error"]["message"].startswith("Invalid dimensions or quantity")


def test_firing_quote_rejects_empty_worksheet(firing_client: TestClient) -> None:
    response = firing_client.post("/api/v1/firing-worksheet/quote", json={"items": []})
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "validation_error"


def test_firing_cart(firing_client: TestClient) -> None:
    response = firing_client.post("/api/v1/firing-worksheet/cart", json=WORKSHEET)
    assert response.status_code == 200
    payload = response.json()
    assert payload["data"]["cartId"] == "cart-new"
    assert payload["data"]["lineItemCount"] == 2
    assert Decimal(payload["data"]["subtotal"]) == Decimal("90.72")
    assert payload["meta"]["dataStatus"] == "live"


def test_firing_cart_fallback_is_flagged(firing_client: TestClient, cart_repository: StubCartRepository) -> None:
    cart_repository.current_cart = {"id": "cart-current", "lineItems": []}
    cart_repository.fail_on = {"add_to_current_cart"}
    response = firing_client.post("/api/v1/firing-worksheet/cart", json=WORKSHEET)
    assert response.status_code == 200
    payload = response.json()
    assert payload["data"]["usedFallback"] is True
    assert payload["meta"]["dataStatus"] == "fallback"


def test_firing_cart_upstream_failure(firing_client: TestClient, cart_repository: StubCartRepository) -> None:
    cart_repository.fail_on = {"get_current_cart", "create_cart"}
    response = firing_client.post("/api/v1/firing-worksheet/cart", json=WORKSHEET)
    assert response.status_code == 502
    assert response.json()["error"]["code"] == "upstream_error"
