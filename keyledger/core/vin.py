# keyledger/core/vin.py

import logging
import time
from typing import Any, Callable, Dict, Optional, Tuple

import httpx

from keyledger.errors import UpstreamFailure, ValidationFailure

logger = logging.getLogger(__name__)


class VinCache:
    """
    Short-lived VIN lookup cache: key -> (payload, stored_at).

    Entries only expire; there is no LRU ordering. Once the cache grows past
    `max_entries`, expired entries are swept out on the next write.
    """

    def __init__(
        self,
        ttl_seconds: float = 300.0,
        max_entries: int = 100,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._entries: Dict[str, Tuple[Any, float]] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def _expired(self, stored_at: float, now: float) -> bool:
        return now - stored_at >= self.ttl_seconds

    def get(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        payload, stored_at = entry
        if self._expired(stored_at, self._clock()):
            del self._entries[key]
            return None
        return payload

    def put(self, key: str, payload: Any) -> None:
        self._entries[key] = (payload, self._clock())
        if len(self._entries) > self.max_entries:
            self.purge_expired()

    def purge_expired(self) -> int:
        now = self._clock()
        stale = [k for k, (_, ts) in self._entries.items() if self._expired(ts, now)]
        for key in stale:
            del self._entries[key]
        return len(stale)


class VinDecoder:
    def __init__(self, client: httpx.Client, cache: VinCache, base_url: str):
        self.client = client
        self.cache = cache
        self.base_url = base_url.rstrip("/")

    def decode(self, vin: str) -> Tuple[Dict[str, Any], str]:
        """Return (decoded payload, "cache" | "api")."""
        vin = (vin or "").strip().upper()
        if not vin:
            raise ValidationFailure("VIN is required")

        cached = self.cache.get(vin)
        if cached is not None:
            return cached, "cache"

        try:
            response = self.client.get(
                f"{self.base_url}/{vin}", params={"format": "json"}
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as exc:
            logger.error("VIN decode for %s failed: %s", vin, exc)
            raise UpstreamFailure(
                "Failed to decode VIN",
                f"NHTSA API error: {exc.response.status_code}",
            ) from exc
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("VIN decode for %s failed: %s", vin, exc)
            raise UpstreamFailure("Failed to decode VIN", str(exc)) from exc

        self.cache.put(vin, data)
        return data, "api"
