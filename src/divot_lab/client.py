"""DataGolf feed client used by load cycles."""
from __future__ import annotations
import logging
import os
import threading
import time
from typing import Any, Optional

import requests
from dotenv import load_dotenv

from .cache import DataGolfCache

load_dotenv()

logger = logging.getLogger(__name__)

BASE_URL = "https://feeds.datagolf.com"
MIN_REQUEST_INTERVAL = 1.0  # seconds; DataGolf allows one request per second
REQUEST_TIMEOUT = 30


class DataGolfClient:
    """
    Cached, rate-limited access to the feeds the lab is built from.

    Every call is cached on disk under its endpoint and parameters (never the
    API key). Misses share one throttle, so concurrent fetches from a load
    cycle still go out at most once per second. HTTP and decoding errors
    propagate to the caller.
    """

    def __init__(self, api_key: Optional[str] = None, cache_dir: str = "data/raw"):
        self.api_key = api_key or os.environ["DATAGOLF_API_KEY"]
        self.cache = DataGolfCache(cache_dir)
        self._throttle = threading.Lock()
        self._last_request: float = 0.0

    def _wait_turn(self) -> None:
        with self._throttle:
            elapsed = time.time() - self._last_request
            if elapsed < MIN_REQUEST_INTERVAL:
                time.sleep(MIN_REQUEST_INTERVAL - elapsed)
            self._last_request = time.time()

    def _get(self, endpoint: str, params: Optional[dict] = None) -> Any:
        query = {**(params or {}), "file_format": "json"}

        cached = self.cache.get(endpoint, query)
        if cached is not None:
            logger.debug("Cache hit for %s %s", endpoint, query)
            return cached

        self._wait_turn()
        url = f"{BASE_URL}/{endpoint.lstrip('/')}"
        logger.debug("GET %s %s", url, query)
        response = requests.get(url, params={**query, "key": self.api_key}, timeout=REQUEST_TIMEOUT)
        response.raise_for_status()

        data = response.json()
        self.cache.set(endpoint, query, data)
        return data

    # --- Event context ---

    def get_schedule(self, tour: str = "pga", season: Optional[int] = None) -> dict:
        params: dict = {"tour": tour}
        if season is not None:
            params["season"] = season
        return self._get("/get-schedule", params)

    def get_field_updates(self, tour: str = "pga") -> dict:
        """Current field plus event name and round; the week's event as DataGolf sees it."""
        return self._get("/field-updates", {"tour": tour})

    # --- Predictions ---

    def get_pre_tournament_predictions(self, tour: str = "pga", odds_format: str = "percent") -> dict:
        return self._get("/preds/pre-tournament", {"tour": tour, "odds_format": odds_format})

    def get_in_play_predictions(self, tour: str = "pga", odds_format: str = "percent") -> dict:
        """In-play odds; rows also carry live scoring (position, score, thru, rounds)."""
        return self._get("/preds/in-play", {"tour": tour, "odds_format": odds_format})

    # --- Player skill ---

    def get_skill_ratings(self, display: str = "value") -> dict:
        return self._get("/preds/skill-ratings", {"display": display})

    def get_dg_rankings(self) -> dict:
        """DG rankings; each row carries a ``dg_skill_estimate``."""
        return self._get("/preds/get-dg-rankings")
