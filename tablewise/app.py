from __future__ import annotations

from fastapi import Depends, FastAPI, HTTPException

from .preferences.models import PreferenceSet, PreferenceUpdateRequest
from .preferences.store import PreferenceStore
from .ranking.config import DEFAULT_RANKING_CONFIG
from .restaurants.data_store import (
    get_reservation,
    get_restaurant,
    get_restaurants_dataframe,
    list_products,
)
from .restaurants.models import (
    Product,
    Reservation,
    ReservationListResponse,
    Restaurant,
    RestaurantListResponse,
)
from .restaurants.retrieval import get_filtered_reservations, get_ranked_restaurants

app = FastAPI(title="Tablewise Restaurant API", version="1.0.0")

_store: PreferenceStore | None = None


async def get_preference_store() -> PreferenceStore:
    """
    Return the process-wide preference store, creating it on first use.

    Resolved on the event loop, not the threadpool, so the check-then-set
    below cannot interleave between requests.
    """
    global _store
    if _store is None:
        _store = PreferenceStore.from_config()
    return _store


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/metadata")
def metadata() -> dict:
    df = get_restaurants_dataframe()
    categories = sorted({str(c).strip() for c in df["category"].dropna() if str(c).strip()})
    return {"categories": categories, "price_tiers": list(DEFAULT_RANKING_CONFIG.price_tiers)}


# ── Restaurants & reservations ───────────────────────────────────────────


@app.get("/restaurants", response_model=RestaurantListResponse)
async def restaurants(
    q: str = "",
    price: str = "",
    store: PreferenceStore = Depends(get_preference_store),
) -> RestaurantListResponse:
    preferences = await store.load()
    return get_ranked_restaurants(q, price, preferences)


@app.get("/restaurants/{restaurant_id}", response_model=Restaurant)
def restaurant_detail(restaurant_id: str) -> Restaurant:
    restaurant = get_restaurant(restaurant_id)
    if restaurant is None:
        raise HTTPException(status_code=404, detail="Restaurant not found")
    return restaurant


@app.get("/restaurants/{restaurant_id}/products", response_model=list[Product])
def restaurant_products(restaurant_id: str) -> list[Product]:
    if get_restaurant(restaurant_id) is None:
        raise HTTPException(status_code=404, detail="Restaurant not found")
    return list_products(restaurant_id)


@app.get("/reservations", response_model=ReservationListResponse)
def reservations(q: str = "") -> ReservationListResponse:
    return get_filtered_reservations(q)


@app.get("/reservations/{reservation_id}", response_model=Reservation)
def reservation_detail(reservation_id: str) -> Reservation:
    reservation = get_reservation(reservation_id)
    if reservation is None:
        raise HTTPException(status_code=404, detail="Reservation not found")
    return reservation


# ── Preferences ──────────────────────────────────────────────────────────


@app.get("/preferences", response_model=PreferenceSet)
async def preferences(store: PreferenceStore = Depends(get_preference_store)) -> PreferenceSet:
    return await store.load()


@app.post("/preferences/categories", response_model=PreferenceSet)
async def reinforce_category(
    body: PreferenceUpdateRequest,
    store: PreferenceStore = Depends(get_preference_store),
) -> PreferenceSet:
    return await store.increment_category(body.value)


@app.post("/preferences/price-ranges", response_model=PreferenceSet)
async def reinforce_price_range(
    body: PreferenceUpdateRequest,
    store: PreferenceStore = Depends(get_preference_store),
) -> PreferenceSet:
    return await store.increment_price_range(body.value)


@app.post("/preferences/reset", response_model=PreferenceSet)
async def reset_preferences(store: PreferenceStore = Depends(get_preference_store)) -> PreferenceSet:
    return await store.reset()
