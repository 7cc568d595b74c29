from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any, Callable

from ..preferences.models import PreferenceSet
from ..preferences.store import PreferenceStore
from .config import DEFAULT_RANKING_CONFIG
from .debounce import Debouncer
from .engine import RESTAURANT_TEXT_FIELDS, rank_and_filter

logger = logging.getLogger(__name__)


class SearchSession:
    """
    Search box state for one screen: typed text, selected price tier, results.

    Typed text is debounced, then both filters the list and reinforces the
    trimmed text as a category preference. Price taps toggle the active tier
    and reinforce it when selected. Every change re-ranks the candidates with
    the latest preference snapshot.
    """

    def __init__(
        self,
        store: PreferenceStore,
        candidates: Sequence[Any] = (),
        *,
        debounce_seconds: float = DEFAULT_RANKING_CONFIG.debounce_seconds,
        text_fields: Sequence[str] = RESTAURANT_TEXT_FIELDS,
        on_results: Callable[[list[Any]], None] | None = None,
    ) -> None:
        self.store = store
        self.text_fields = tuple(text_fields)
        self.on_results = on_results
        self.text_query = ""
        self.price_query = ""
        self.preferences = PreferenceSet()
        self.results: list[Any] = []
        self._candidates: list[Any] = list(candidates)
        self._debouncer = Debouncer(debounce_seconds, self._apply_text)

    async def start(self) -> list[Any]:
        self.preferences = await self.store.load()
        return self._refresh()

    def on_text_change(self, text: str) -> None:
        self._debouncer.call(text)

    async def flush(self) -> None:
        await self._debouncer.flush()

    def close(self) -> None:
        self._debouncer.cancel()

    async def select_price(self, tier: str) -> list[Any]:
        self.price_query = "" if tier == self.price_query else tier
        if self.price_query:
            self.preferences = await self.store.increment_price_range(self.price_query)
        return self._refresh()

    async def reset_preferences(self) -> list[Any]:
        self.preferences = await self.store.reset()
        return self._refresh()

    def set_candidates(self, candidates: Sequence[Any]) -> list[Any]:
        self._candidates = list(candidates)
        return self._refresh()

    async def _apply_text(self, text: str) -> None:
        self.text_query = text
        term = text.strip()
        if term:
            self.preferences = await self.store.increment_category(term)
        self._refresh()

    def _refresh(self) -> list[Any]:
        self.results = rank_and_filter(
            self._candidates,
            self.text_query,
            self.price_query,
            self.preferences,
            text_fields=self.text_fields,
        )
        logger.debug(
            "Ranked %d of %d candidates (text=%r, price=%r)",
            len(self.results),
            len(self._candidates),
            self.text_query,
            self.price_query,
        )
        if self.on_results is not None:
            self.on_results(self.results)
        return self.results
