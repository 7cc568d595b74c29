from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, TypeVar

from ..preferences.models import PreferenceSet

T = TypeVar("T")

RESTAURANT_TEXT_FIELDS: tuple[str, ...] = ("name", "category")
RESERVATION_TEXT_FIELDS: tuple[str, ...] = ("restaurant.name", "restaurant.location", "status")


def _field_value(candidate: Any, path: str) -> Any:
    """Resolve a dotted path across mappings and attribute objects; None if missing."""
    value = candidate
    for part in path.split("."):
        if value is None:
            return None
        if isinstance(value, Mapping):
            value = value.get(part)
        else:
            value = getattr(value, part, None)
    return value


def _as_text(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def matches_text(candidate: Any, query_lower: str, fields: Sequence[str]) -> bool:
    for field in fields:
        text = _as_text(_field_value(candidate, field))
        if text and query_lower in text.lower():
            return True
    return False


def score_candidate(candidate: Any, preferences: PreferenceSet) -> int:
    """Sum of the category weight and the price-tier weight; 0 for missing facets."""
    category = _as_text(_field_value(candidate, "category"))
    price = _as_text(_field_value(candidate, "price"))
    return preferences.weight_for_category(category) + preferences.weight_for_price(price)


def filter_candidates(
    candidates: Sequence[T],
    text_query: str = "",
    price_query: str = "",
    *,
    text_fields: Sequence[str] = RESTAURANT_TEXT_FIELDS,
) -> list[T]:
    filtered = list(candidates)

    if text_query:
        query_lower = text_query.lower()
        filtered = [c for c in filtered if matches_text(c, query_lower, text_fields)]

    if price_query:
        # Exact tier match: "€" must not match "€€"
        filtered = [c for c in filtered if _field_value(c, "price") == price_query]

    return filtered


def rank_with_scores(
    candidates: Sequence[T],
    text_query: str = "",
    price_query: str = "",
    preferences: PreferenceSet | None = None,
    *,
    text_fields: Sequence[str] = RESTAURANT_TEXT_FIELDS,
) -> list[tuple[T, int]]:
    """Filter, score and order candidates, keeping each score alongside its candidate."""
    preferences = preferences or PreferenceSet()
    filtered = filter_candidates(candidates, text_query, price_query, text_fields=text_fields)
    scored = [(c, score_candidate(c, preferences)) for c in filtered]
    # list.sort is stable, so equal scores keep their upstream order
    scored.sort(key=lambda item: item[1], reverse=True)
    return scored


def rank_and_filter(
    candidates: Sequence[T],
    text_query: str = "",
    price_query: str = "",
    preferences: PreferenceSet | None = None,
    *,
    text_fields: Sequence[str] = RESTAURANT_TEXT_FIELDS,
) -> list[T]:
    return [
        candidate
        for candidate, _ in rank_with_scores(
            candidates, text_query, price_query, preferences, text_fields=text_fields
        )
    ]
