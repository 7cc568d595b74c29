from __future__ import annotations

import asyncio
import json
import logging

from .config import DEFAULT_PREFERENCE_CONFIG, PreferenceConfig
from .durable import DurableStore, JsonFileStore
from .models import PreferenceSet

logger = logging.getLogger(__name__)


class PreferenceStore:
    """
    Durable, monotonically reinforcing record of chosen categories and price tiers.

    Every public coroutine is best-effort: storage and parsing failures are
    logged and absorbed, so callers always get a usable PreferenceSet back.
    Keys are stored exactly as given; only blank keys are rejected.
    """

    def __init__(self, backend: DurableStore, key: str = DEFAULT_PREFERENCE_CONFIG.store_key) -> None:
        self.backend = backend
        self.key = key
        # Serializes read-modify-write cycles on this instance.
        self._lock = asyncio.Lock()

    @classmethod
    def from_config(cls, config: PreferenceConfig = DEFAULT_PREFERENCE_CONFIG) -> PreferenceStore:
        return cls(JsonFileStore(config.store_dir), key=config.store_key)

    async def load(self) -> PreferenceSet:
        """Return the persisted set, or an empty one if absent or unreadable."""
        try:
            raw = await self.backend.get(self.key)
        except Exception:
            logger.warning("Failed to read preferences, using defaults", exc_info=True)
            return PreferenceSet()

        if raw is None:
            return PreferenceSet()

        try:
            preferences = PreferenceSet.from_payload(json.loads(raw))
        except (ValueError, RecursionError):
            # json.JSONDecodeError is a ValueError; deep nesting overflows the decoder
            logger.warning("Persisted preferences are malformed, using defaults", exc_info=True)
            return PreferenceSet()

        logger.debug("Preferences loaded: %s", preferences.to_json())
        return preferences

    async def save(self, preferences: PreferenceSet) -> None:
        async with self._lock:
            await self._save(preferences)

    async def increment_category(self, name: str) -> PreferenceSet:
        return await self._increment("categories", name)

    async def increment_price_range(self, tier: str) -> PreferenceSet:
        return await self._increment("price_ranges", tier)

    async def reset(self) -> PreferenceSet:
        preferences = PreferenceSet()
        async with self._lock:
            await self._save(preferences)
        logger.info("Preferences have been reset to default")
        return preferences

    async def _increment(self, facet: str, key: str) -> PreferenceSet:
        async with self._lock:
            preferences = await self.load()
            if not key or not key.strip():
                return preferences

            weights: dict[str, int] = getattr(preferences, facet)
            weights[key] = weights.get(key, 0) + 1
            await self._save(preferences)
            logger.debug("Preference %s[%r] is now %d", facet, key, weights[key])
            return preferences

    async def _save(self, preferences: PreferenceSet) -> None:
        payload = preferences.to_json()
        try:
            await self.backend.set(self.key, payload)
        except Exception:
            logger.warning("Failed to save preferences", exc_info=True)
            return
        logger.debug("Preferences saved: %s", payload)
