from __future__ import annotations

import asyncio

import pytest
from fastapi.testclient import TestClient

import tablewise.app as app_module
from tablewise.app import app, get_preference_store
from tablewise.preferences.durable import InMemoryStore
from tablewise.preferences.store import PreferenceStore


@pytest.fixture
def client():
    store = PreferenceStore(InMemoryStore())
    app.dependency_overrides[get_preference_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


def _names(body):
    return [item["restaurant"]["name"] for item in body["restaurants"]]


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_metadata_lists_categories_and_tiers(client):
    body = client.get("/metadata").json()
    assert "Pizza" in body["categories"]
    assert "Sushi" in body["categories"]
    assert body["categories"] == sorted(body["categories"])
    assert body["price_tiers"] == ["€", "€€", "€€€"]


def test_restaurants_default_order_is_alphabetical(client):
    resp = client.get("/restaurants")
    assert resp.status_code == 200
    body = resp.json()
    names = _names(body)
    assert names == sorted(names)
    assert body["total_candidates"] == len(names) > 0
    assert all(item["score"] == 0 for item in body["restaurants"])
    assert body["preferences"] == {"categories": {}, "priceRanges": {}}


def test_restaurants_text_filter(client):
    body = client.get("/restaurants", params={"q": "piz"}).json()
    assert body["total_candidates"] > 0
    for item in body["restaurants"]:
        r = item["restaurant"]
        assert "piz" in r["name"].lower() or "piz" in (r["category"] or "").lower()


def test_restaurants_price_filter_is_exact(client):
    body = client.get("/restaurants", params={"price": "€"}).json()
    assert body["total_candidates"] > 0
    for item in body["restaurants"]:
        assert item["restaurant"]["price"] == "€"


def test_restaurants_unknown_query_is_empty(client):
    body = client.get("/restaurants", params={"q": "Nonexistent12345"}).json()
    assert body["restaurants"] == []
    assert body["total_candidates"] == 0


def test_learned_preferences_reorder_restaurants(client):
    client.post("/preferences/categories", json={"value": "Sushi"})
    client.post("/preferences/categories", json={"value": "Sushi"})
    client.post("/preferences/price-ranges", json={"value": "€€€"})

    body = client.get("/restaurants").json()
    scores = [item["score"] for item in body["restaurants"]]
    assert scores == sorted(scores, reverse=True)

    top = body["restaurants"][0]
    assert top["restaurant"]["name"] == "Sakura Garden"
    assert top["score"] == 3
    assert body["preferences"] == {"categories": {"Sushi": 2}, "priceRanges": {"€€€": 1}}

    # ties keep alphabetical order
    zero_names = [i["restaurant"]["name"] for i in body["restaurants"] if i["score"] == 0]
    assert zero_names == sorted(zero_names)


def test_restaurant_detail(client):
    resp = client.get("/restaurants/r3")
    assert resp.status_code == 200
    assert resp.json()["name"] == "Sakura Garden"


def test_restaurant_detail_missing(client):
    resp = client.get("/restaurants/does-not-exist")
    assert resp.status_code == 404


def test_restaurant_without_facets_is_listed(client):
    body = client.get("/restaurants", params={"q": "hawaiian"}).json()
    assert _names(body) == ["Hawaiian Corner"]
    restaurant = body["restaurants"][0]["restaurant"]
    assert restaurant["category"] is None
    assert restaurant["price"] is None


def test_restaurant_products_ordered_by_name(client):
    resp = client.get("/restaurants/r1/products")
    assert resp.status_code == 200
    products = resp.json()
    assert [p["name"] for p in products] == ["Garlic Bread", "Margherita", "Ultimate Pepperoni"]
    assert {p["restaurant_id"] for p in products} == {"r1"}
    assert products[0]["image_url"] is None
    assert products[1]["price"] == 9.9


def test_restaurant_products_empty_menu(client):
    resp = client.get("/restaurants/r4/products")
    assert resp.status_code == 200
    assert resp.json() == []


def test_restaurant_products_missing_restaurant(client):
    resp = client.get("/restaurants/does-not-exist/products")
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Restaurant not found"


def test_reservations_ordered_by_time(client):
    body = client.get("/reservations").json()
    times = [r["reservation_time"] for r in body["reservations"]]
    assert times == sorted(times)
    assert body["total_candidates"] == len(times) > 0
    assert all(r["restaurant"] is not None for r in body["reservations"])


def test_reservations_filter_by_status_and_restaurant(client):
    body = client.get("/reservations", params={"q": "COMPLETED"}).json()
    assert body["total_candidates"] > 0
    assert all(r["status"] == "completed" for r in body["reservations"])

    body = client.get("/reservations", params={"q": "sakura"}).json()
    assert [r["restaurant"]["name"] for r in body["reservations"]] == ["Sakura Garden"]


def test_reservation_detail(client):
    resp = client.get("/reservations/b1")
    assert resp.status_code == 200
    body = resp.json()
    assert body["restaurant_id"] == "r3"
    assert body["number_guests"] == 2
    assert body["grade"] is None
    assert body["restaurant"]["name"] == "Sakura Garden"


def test_reservation_detail_missing(client):
    resp = client.get("/reservations/does-not-exist")
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Reservation not found"


def test_preferences_start_empty(client):
    resp = client.get("/preferences")
    assert resp.status_code == 200
    assert resp.json() == {"categories": {}, "priceRanges": {}}


def test_preference_increments(client):
    client.post("/preferences/categories", json={"value": "Pizza"})
    resp = client.post("/preferences/categories", json={"value": "Pizza"})
    assert resp.json()["categories"] == {"Pizza": 2}

    resp = client.post("/preferences/price-ranges", json={"value": "€€"})
    assert resp.json() == {"categories": {"Pizza": 2}, "priceRanges": {"€€": 1}}


def test_blank_preference_is_noop(client):
    resp = client.post("/preferences/categories", json={"value": "   "})
    assert resp.status_code == 200
    assert resp.json() == {"categories": {}, "priceRanges": {}}


def test_preference_validation_rejects_missing_value(client):
    resp = client.post("/preferences/categories", json={})
    assert resp.status_code == 422


def test_reset_preferences(client):
    client.post("/preferences/categories", json={"value": "Pizza"})
    client.post("/preferences/price-ranges", json={"value": "€"})
    resp = client.post("/preferences/reset")
    assert resp.json() == {"categories": {}, "priceRanges": {}}
    assert client.get("/preferences").json() == {"categories": {}, "priceRanges": {}}


def test_preference_store_dependency_is_created_once(monkeypatch):
    monkeypatch.setattr(app_module, "_store", None)
    monkeypatch.setattr(
        PreferenceStore, "from_config", classmethod(lambda cls: cls(InMemoryStore()))
    )

    async def _resolve_concurrently():
        return await asyncio.gather(*(get_preference_store() for _ in range(10)))

    stores = asyncio.run(_resolve_concurrently())
    assert all(store is stores[0] for store in stores)
    assert app_module._store is stores[0]
