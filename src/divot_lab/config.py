from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

DEFAULT_CACHE_DIR = "data/raw"
DEFAULT_REFRESH_SECONDS = 3600  # live predictions refresh hourly
DEFAULT_TOUR = "pga"


@dataclass(frozen=True)
class Settings:
    api_key: str | None = None
    cache_dir: str = DEFAULT_CACHE_DIR
    refresh_seconds: float = DEFAULT_REFRESH_SECONDS
    tour: str = DEFAULT_TOUR

    @classmethod
    def from_env(cls) -> "Settings":
        refresh = os.environ.get("DIVOT_LAB_REFRESH_SECONDS")
        return cls(
            api_key=os.environ.get("DATAGOLF_API_KEY"),
            cache_dir=os.environ.get("DIVOT_LAB_CACHE_DIR", DEFAULT_CACHE_DIR),
            refresh_seconds=float(refresh) if refresh else DEFAULT_REFRESH_SECONDS,
            tour=os.environ.get("DIVOT_LAB_TOUR", DEFAULT_TOUR),
        )
