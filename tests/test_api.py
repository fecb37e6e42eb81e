"""
Tests for the currency exchange API.
"""

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from currency_exchange.api.app import CONFLICT_MESSAGE, app
from currency_exchange.api.dependencies import get_handler
from currency_exchange.handlers import ExchangeHandler
from currency_exchange.services import ExchangeService


@pytest.fixture
def service(repository, resilient_manager):
    return ExchangeService.create(repository=repository, cache_manager=resilient_manager)


@pytest.fixture
def client(service):
    """Create a test client wired to in-memory SQLite and a fake cache."""
    handler = ExchangeHandler(exchange_service=service, environment="8000")
    app.dependency_overrides[get_handler] = lambda: handler
    yield TestClient(app)
    app.dependency_overrides.clear()


def create(client, from_currency="USD", to_currency="INR", multiple="65", **extra):
    payload = {"from": from_currency, "to": to_currency, "conversionMultiple": multiple, **extra}
    response = client.post("/currency-exchange", json=payload)
    assert response.status_code == 201
    return response.json()


def test_root(client):
    """Test root endpoint."""
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Currency Exchange API"


def test_health(client):
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["cache_circuit"] == "closed"


def test_health_reports_open_circuit(client, store):
    store.backend.failing = True
    client.get("/currency-exchange/from/USD/to/INR")

    assert client.get("/health").json()["cache_circuit"] == "open"


def test_create_and_retrieve(client):
    created = create(client, id=1000)
    assert created["id"] == 1000
    assert created["from"] == "USD"
    assert created["to"] == "INR"
    assert created["version"] == 1

    response = client.get("/currency-exchange/from/USD/to/INR")
    assert response.status_code == 200
    data = response.json()
    assert data["id"] == 1000
    assert Decimal(str(data["conversionMultiple"])) == Decimal("65")
    assert data["environment"] == "8000"


def test_retrieve_unknown_pair(client):
    response = client.get("/currency-exchange/from/USD/to/XYZ")
    assert response.status_code == 404
    assert response.json()["detail"] == "Conversion record not found"


def test_retrieve_works_with_cache_down(client, store):
    create(client)
    store.backend.failing = True

    response = client.get("/currency-exchange/from/USD/to/INR")
    assert response.status_code == 200
    assert response.json()["from"] == "USD"


def test_retrieve_fails_when_cache_and_database_fail(client, store, repository, monkeypatch):
    store.backend.failing = True

    def broken(*args):
        raise RuntimeError("database down")

    monkeypatch.setattr(repository, "find_by_from_and_to", broken)

    response = client.get("/currency-exchange/from/USD/to/INR")
    assert response.status_code == 503


def test_create_rejects_invalid_payload(client):
    response = client.post("/currency-exchange", json={"from": "USD", "to": "INR", "conversionMultiple": -1})
    assert response.status_code == 422


def test_create_duplicate_pair_conflicts(client):
    create(client)

    response = client.post("/currency-exchange", json={"from": "USD", "to": "INR", "conversionMultiple": "70"})
    assert response.status_code == 409
    assert response.json()["error"] == "DUPLICATE"


def test_update(client):
    created = create(client)

    response = client.put(
        f"/currency-exchange/{created['id']}",
        json={"from": "USD", "to": "INR", "conversionMultiple": "70", "version": created["version"]},
    )
    assert response.status_code == 200
    assert response.json()["version"] == created["version"] + 1

    data = client.get("/currency-exchange/from/USD/to/INR").json()
    assert Decimal(str(data["conversionMultiple"])) == Decimal("70")


def test_update_with_stale_version_conflicts(client):
    created = create(client)
    body = {"from": "USD", "to": "INR", "conversionMultiple": "70", "version": created["version"]}
    assert client.put(f"/currency-exchange/{created['id']}", json=body).status_code == 200

    response = client.put(f"/currency-exchange/{created['id']}", json=dict(body, conversionMultiple="80"))
    assert response.status_code == 409
    assert response.json() == {"error": "CONFLICT", "message": CONFLICT_MESSAGE}


def test_update_unknown_id(client):
    response = client.put("/currency-exchange/999", json={"from": "USD", "to": "INR", "conversionMultiple": "1"})
    assert response.status_code == 404
    assert response.json()["detail"] == "CurrencyExchange not found"


def test_patch(client):
    created = create(client)

    response = client.patch(f"/currency-exchange/{created['id']}", json={"conversionMultiple": "66"})
    assert response.status_code == 200
    data = response.json()
    assert data["to"] == "INR"
    assert Decimal(str(data["conversionMultiple"])) == Decimal("66")


def test_patch_unknown_id(client):
    response = client.patch("/currency-exchange/999", json={"conversionMultiple": "66"})
    assert response.status_code == 404


def test_delete(client):
    create(client)

    response = client.delete("/currency-exchange/from/USD/to/INR")
    assert response.status_code == 200
    assert response.json()["message"] == "CurrencyExchange deleted"

    assert client.get("/currency-exchange/from/USD/to/INR").status_code == 404
    assert client.delete("/currency-exchange/from/USD/to/INR").status_code == 404
