from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


@dataclass(frozen=True)
class RankingConfig:
    debounce_seconds: float = float(os.getenv("TABLEWISE_DEBOUNCE_SECONDS", "0.3"))
    price_tiers: tuple[str, ...] = ("€", "€€", "€€€")


DEFAULT_RANKING_CONFIG = RankingConfig()
