# petsar/core/cache.py
"""
Short-lived store for behaviour predictions, keyed by pet id.
"""
import math
from datetime import datetime

from cachetools import TTLCache

from ..utils.logging_setup import get_logger

log = get_logger()

DEFAULT_PREDICTION_TTL_SECONDS = 5 * 60


class PredictionCache:
    """
    TTL cache whose notion of "now" is supplied by the caller.

    Entries expire ``ttl_seconds`` after they were stored. The cache is
    unbounded by default, so nothing is dropped before it expires. The clock
    is passed explicitly to every call so that predictions computed for a
    given instant are reproducible.
    """

    def __init__(self, ttl_seconds: float = DEFAULT_PREDICTION_TTL_SECONDS, maxsize: float = math.inf):
        self.ttl_seconds = ttl_seconds
        self._current_time = 0.0
        self._store = TTLCache(maxsize=maxsize, ttl=ttl_seconds, timer=self._timer)

    def _timer(self) -> float:
        return self._current_time

    def _advance(self, now: datetime):
        self._current_time = now.timestamp()

    def get(self, key: str, now: datetime):
        self._advance(now)
        value = self._store.get(key)
        log.debug(f"Prediction cache {'hit' if value is not None else 'miss'} for '{key}'")
        return value

    def set(self, key: str, value, now: datetime):
        self._advance(now)
        self._store[key] = value

    def invalidate(self, key: str):
        if self._store.pop(key, None) is not None:
            log.debug(f"Invalidated cached prediction for '{key}'")

    def clear(self):
        self._store.clear()

    def __len__(self):
        return len(self._store)
