from __future__ import annotations

from pathlib import Path

import pandas as pd

from .models import Product, Reservation, Restaurant, RestaurantSummary

_DATA_DIR = Path(__file__).resolve().parent.parent / "data"
_RESTAURANTS_CSV = _DATA_DIR / "restaurants.csv"
_RESERVATIONS_CSV = _DATA_DIR / "reservations.csv"
_PRODUCTS_CSV = _DATA_DIR / "products.csv"

_STRING_COLUMNS = ["id", "user_id", "name", "image_url", "price", "location", "contact", "category"]

_restaurants_df: pd.DataFrame | None = None
_reservations_df: pd.DataFrame | None = None
_products_df: pd.DataFrame | None = None


def _clean_str(value: object) -> str | None:
    if value is None or pd.isna(value):
        return None
    text = str(value).strip()
    return text or None


def _load_restaurants(path: Path = _RESTAURANTS_CSV) -> pd.DataFrame:
    df = pd.read_csv(path, dtype={col: str for col in _STRING_COLUMNS})
    df["evaluation"] = pd.to_numeric(df["evaluation"], errors="coerce")
    # Upstream order is alphabetical by name; ranking ties fall back to it
    return df.sort_values("name", kind="stable").reset_index(drop=True)


def _load_reservations(path: Path = _RESERVATIONS_CSV) -> pd.DataFrame:
    df = pd.read_csv(path, dtype={"id": str, "user_id": str, "restaurant_id": str, "status": str})
    df["reservation_time"] = pd.to_datetime(df["reservation_time"])
    df["number_guests"] = pd.to_numeric(df["number_guests"], errors="coerce").fillna(1).astype(int)
    df["grade"] = pd.to_numeric(df["grade"], errors="coerce")
    return df.sort_values("reservation_time", kind="stable").reset_index(drop=True)


def _load_products(path: Path = _PRODUCTS_CSV) -> pd.DataFrame:
    df = pd.read_csv(path, dtype={"id": str, "restaurant_id": str, "name": str, "image_url": str})
    df["price"] = pd.to_numeric(df["price"], errors="coerce")
    return df.sort_values("name", kind="stable").reset_index(drop=True)


def get_restaurants_dataframe() -> pd.DataFrame:
    """Return the in-memory restaurant DataFrame, loading it on first call."""
    global _restaurants_df
    if _restaurants_df is None:
        _restaurants_df = _load_restaurants()
    return _restaurants_df


def get_reservations_dataframe() -> pd.DataFrame:
    """Return the in-memory reservation DataFrame, loading it on first call."""
    global _reservations_df
    if _reservations_df is None:
        _reservations_df = _load_reservations()
    return _reservations_df


def get_products_dataframe() -> pd.DataFrame:
    global _products_df
    if _products_df is None:
        _products_df = _load_products()
    return _products_df


def _row_to_restaurant(row: pd.Series) -> Restaurant:
    evaluation = row.get("evaluation")
    return Restaurant(
        id=str(row["id"]),
        user_id=_clean_str(row.get("user_id")),
        name=_clean_str(row.get("name")) or "",
        image_url=_clean_str(row.get("image_url")),
        price=_clean_str(row.get("price")),
        location=_clean_str(row.get("location")),
        evaluation=float(evaluation) if pd.notna(evaluation) else None,
        contact=_clean_str(row.get("contact")),
        category=_clean_str(row.get("category")),
    )


def list_restaurants() -> list[Restaurant]:
    df = get_restaurants_dataframe()
    return [_row_to_restaurant(row) for _, row in df.iterrows()]


def get_restaurant(restaurant_id: str) -> Restaurant | None:
    df = get_restaurants_dataframe()
    match = df.loc[df["id"] == restaurant_id]
    if match.empty:
        return None
    return _row_to_restaurant(match.iloc[0])


def list_reservations() -> list[Reservation]:
    restaurants_by_id = {r.id: r for r in list_restaurants()}
    return [
        _row_to_reservation(row, restaurants_by_id.get(str(row["restaurant_id"])))
        for _, row in get_reservations_dataframe().iterrows()
    ]


def get_reservation(reservation_id: str) -> Reservation | None:
    df = get_reservations_dataframe()
    match = df.loc[df["id"] == reservation_id]
    if match.empty:
        return None
    row = match.iloc[0]
    return _row_to_reservation(row, get_restaurant(str(row["restaurant_id"])))


def _row_to_reservation(row: pd.Series, restaurant: Restaurant | None) -> Reservation:
    summary = (
        RestaurantSummary(
            name=restaurant.name,
            location=restaurant.location,
            image_url=restaurant.image_url,
        )
        if restaurant
        else None
    )
    grade = row.get("grade")
    return Reservation(
        id=str(row["id"]),
        user_id=_clean_str(row.get("user_id")),
        restaurant_id=str(row["restaurant_id"]),
        reservation_time=row["reservation_time"].to_pydatetime(),
        number_guests=int(row["number_guests"]),
        status=_clean_str(row.get("status")) or "",
        grade=int(grade) if pd.notna(grade) else None,
        restaurant=summary,
    )


def list_products(restaurant_id: str) -> list[Product]:
    """Menu items for one restaurant, ordered by name."""
    df = get_products_dataframe()
    match = df.loc[df["restaurant_id"] == restaurant_id]
    return [
        Product(
            id=str(row["id"]),
            restaurant_id=str(row["restaurant_id"]),
            name=_clean_str(row.get("name")) or "",
            image_url=_clean_str(row.get("image_url")),
            price=float(row["price"]) if pd.notna(row["price"]) else None,
        )
        for _, row in match.iterrows()
    ]
