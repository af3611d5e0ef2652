# src/distkey/core/key_cache.py
from __future__ import annotations
import threading

from distkey.core import clock as clk
from distkey.core.distribution import DistributionKey

class DistributionKeyCache:
    """
    Holds the entity's current distribution key. A newer key from Auth replaces it;
    an expired one is dropped on read.
    """

    def __init__(self, clock: clk.Clock | None = None, logger=None):
        self._clock = clock
        self._logger = logger
        self._lock = threading.Lock()
        self._key: DistributionKey | None = None

    def update(self, key: DistributionKey) -> None:
        if not isinstance(key, DistributionKey):
            raise TypeError("key must be DistributionKey")
        with self._lock:
            previous = self._key
            self._key = key
        if self._logger:
            if previous is None:
                self._logger.info(f"[dist-key] installed sha256:{key.fingerprint()}")
            else:
                self._logger.info(
                    f"[dist-key] replaced sha256:{previous.fingerprint()} with sha256:{key.fingerprint()}"
                )

    def get(self, reference_time: int | None = None) -> DistributionKey | None:
        if reference_time is None:
            reference_time = clk.resolve(self._clock).now_millis()
        with self._lock:
            key = self._key
            if key is None:
                return None
            if key.is_expired(reference_time):
                self._key = None
            else:
                return key
        if self._logger:
            self._logger.info(f"[dist-key] sha256:{key.fingerprint()} expired at {key.expiration_time}, dropped")
        return None

    def clear(self) -> None:
        with self._lock:
            self._key = None
