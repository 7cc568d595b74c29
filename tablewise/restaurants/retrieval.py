from __future__ import annotations

import logging

from ..preferences.models import PreferenceSet
from ..ranking.engine import RESERVATION_TEXT_FIELDS, rank_and_filter, rank_with_scores
from .data_store import list_reservations, list_restaurants
from .models import (
    RankedRestaurant,
    ReservationListResponse,
    RestaurantListResponse,
)

logger = logging.getLogger(__name__)


def get_ranked_restaurants(
    text_query: str = "",
    price_query: str = "",
    preferences: PreferenceSet | None = None,
) -> RestaurantListResponse:
    preferences = preferences or PreferenceSet()
    candidates = list_restaurants()
    ranked = rank_with_scores(candidates, text_query, price_query, preferences)
    logger.debug(
        "Ranked %d of %d restaurants (text=%r, price=%r)",
        len(ranked), len(candidates), text_query, price_query,
    )
    return RestaurantListResponse(
        restaurants=[RankedRestaurant(restaurant=r, score=score) for r, score in ranked],
        total_candidates=len(ranked),
        preferences=preferences,
    )


def get_filtered_reservations(text_query: str = "") -> ReservationListResponse:
    # Reservations carry no facets, so every score is 0 and time order is kept.
    reservations = rank_and_filter(
        list_reservations(),
        text_query,
        text_fields=RESERVATION_TEXT_FIELDS,
    )
    return ReservationListResponse(
        reservations=reservations,
        total_candidates=len(reservations),
    )
