from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, PositiveInt

logger = logging.getLogger(__name__)


def _coerce_weight_map(facet: str, value: Any) -> dict[str, int]:
    """Keep only string keys with integer weights >= 1."""
    if not isinstance(value, dict):
        if value is not None:
            logger.warning("Preference facet %r is not a mapping, resetting it", facet)
        return {}

    weights: dict[str, int] = {}
    for key, weight in value.items():
        # bool is an int subclass; true/false are not counts
        if isinstance(weight, bool) or not isinstance(weight, int) or weight < 1:
            logger.warning("Dropping invalid weight %r for %s key %r", weight, facet, key)
            continue
        weights[str(key)] = weight
    return weights


class PreferenceSet(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    categories: dict[str, PositiveInt] = Field(default_factory=dict)
    price_ranges: dict[str, PositiveInt] = Field(default_factory=dict, alias="priceRanges")

    @classmethod
    def from_payload(cls, payload: Any) -> PreferenceSet:
        """
        Build a set from decoded JSON, tolerating partial corruption.

        Raises ValueError when the payload is not a mapping at all.
        """
        if not isinstance(payload, dict):
            raise ValueError(f"expected a JSON object, got {type(payload).__name__}")
        return cls(
            categories=_coerce_weight_map("categories", payload.get("categories")),
            price_ranges=_coerce_weight_map("priceRanges", payload.get("priceRanges")),
        )

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)

    def weight_for_category(self, category: str | None) -> int:
        if not category:
            return 0
        return self.categories.get(category, 0)

    def weight_for_price(self, price: str | None) -> int:
        if not price:
            return 0
        return self.price_ranges.get(price, 0)


class PreferenceUpdateRequest(BaseModel):
    value: str = Field(..., max_length=200, description="Category name or price tier to reinforce")
