from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from ..preferences.models import PreferenceSet


class Restaurant(BaseModel):
    id: str
    user_id: str | None = None
    name: str
    image_url: str | None = None
    price: str | None = Field(default=None, description='Price tier, e.g. "€€"')
    location: str | None = None
    evaluation: float | None = None
    contact: str | None = None
    category: str | None = None


class Product(BaseModel):
    id: str
    restaurant_id: str
    name: str
    image_url: str | None = None
    price: float | None = Field(default=None, ge=0)


class RestaurantSummary(BaseModel):
    name: str
    location: str | None = None
    image_url: str | None = None


class Reservation(BaseModel):
    id: str
    user_id: str | None = None
    restaurant_id: str
    reservation_time: datetime
    number_guests: int = Field(..., ge=1)
    status: str
    grade: int | None = Field(default=None, ge=1, le=5)
    restaurant: RestaurantSummary | None = None


class RankedRestaurant(BaseModel):
    restaurant: Restaurant
    score: int


class RestaurantListResponse(BaseModel):
    restaurants: list[RankedRestaurant]
    total_candidates: int
    preferences: PreferenceSet


class ReservationListResponse(BaseModel):
    reservations: list[Reservation]
    total_candidates: int
