"""On-disk response cache for DataGolf feeds, one JSON file per request."""
from __future__ import annotations
import hashlib
import json
import logging
import os
import tempfile
import time
from pathlib import Path
from typing import Any, Optional

logger = logging.getLogger(__name__)


class DataGolfCache:
    DEFAULT_TTL = 3600          # 1 hour

    # Longest matching prefix wins; live odds go stale fastest
    ENDPOINT_TTLS: dict[str, int] = {
        "get-schedule": 604800,            # 7 days
        "preds/skill-ratings": 86400,      # 24 hours
        "preds/get-dg-rankings": 86400,    # 24 hours
        "preds/pre-tournament": 21600,     # 6 hours
        "field-updates": 3600,             # 1 hour
        "preds/in-play": 300,              # 5 minutes
    }

    def __init__(self, cache_dir: str | Path = "data/raw"):
        self.cache_dir = Path(cache_dir)
        self.cache_dir.mkdir(parents=True, exist_ok=True)

    def path_for(self, endpoint: str, params: dict) -> Path:
        """File backing `endpoint` called with `params` (the API key excluded)."""
        digest = hashlib.md5(json.dumps(params, sort_keys=True).encode()).hexdigest()[:8]
        stem = endpoint.strip("/").replace("/", "_")
        return self.cache_dir / f"{stem}_{digest}.json"

    def ttl_for(self, endpoint: str) -> int:
        path = endpoint.strip("/")
        matches = [p for p in self.ENDPOINT_TTLS if path.startswith(p)]
        if not matches:
            return self.DEFAULT_TTL
        return self.ENDPOINT_TTLS[max(matches, key=len)]

    def _read(self, path: Path) -> Optional[tuple[float, Any]]:
        try:
            with path.open() as f:
                entry = json.load(f)
            return float(entry["timestamp"]), entry["data"]
        except FileNotFoundError:
            return None
        except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
            # Unreadable entries are evicted so the next call refetches
            logger.warning("Discarding unreadable cache file %s: %s", path.name, e)
            path.unlink(missing_ok=True)
            return None

    def get(self, endpoint: str, params: dict) -> Optional[Any]:
        path = self.path_for(endpoint, params)
        entry = self._read(path)
        if entry is None:
            return None
        stored_at, data = entry
        if time.time() - stored_at > self.ttl_for(endpoint):
            path.unlink(missing_ok=True)
            return None
        return data

    def set(self, endpoint: str, params: dict, data: Any) -> None:
        """Store `data`; readers see either the old file or the complete new one."""
        path = self.path_for(endpoint, params)
        fd, tmp = tempfile.mkstemp(dir=self.cache_dir, prefix=f".{path.stem}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w") as f:
                json.dump({"timestamp": time.time(), "data": data}, f)
            os.replace(tmp, path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise

    def clear(self) -> int:
        removed = 0
        for path in self.cache_dir.glob("*.json"):
            path.unlink(missing_ok=True)
            removed += 1
        return removed
