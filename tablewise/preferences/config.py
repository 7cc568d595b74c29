from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


@dataclass(frozen=True)
class PreferenceConfig:
    store_dir: Path = Path(os.getenv("TABLEWISE_STORE_DIR", str(Path.home() / ".tablewise")))
    store_key: str = "user_preferences"


DEFAULT_PREFERENCE_CONFIG = PreferenceConfig()
