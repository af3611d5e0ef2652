# src/distkey/core/material.py
from __future__ import annotations
import dataclasses
import hashlib
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from distkey.core import clock as clk
from distkey.core.crypto import generate_key_bytes
from distkey.core.cryptospec import CryptoSpec
from distkey.core.errors import InvalidArgument

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
MAX_DATETIME_MILLIS = (datetime.max.replace(tzinfo=timezone.utc) - _EPOCH) // timedelta(milliseconds=1)

def _check_millis(value, what: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgument(f"{what} must be int milliseconds, got {type(value).__name__}")
    if value < 0:
        raise InvalidArgument(f"{what} cannot be negative")
    return value

@dataclass(frozen=True, repr=False)
class KeyMaterial:
    """
    A symmetric key bound to a CryptoSpec and an absolute expiration instant
    (ms since epoch). Immutable once built; "changing" it means building a new one.

    The key length is not checked here, that belongs to whoever interprets the
    key under crypto_spec (the DKE-1 decoder, the cipher boundary).
    """
    crypto_spec: CryptoSpec
    expiration_time: int
    key_bytes: bytes

    def __post_init__(self) -> None:
        if not isinstance(self.crypto_spec, CryptoSpec):
            raise InvalidArgument("crypto_spec is required")
        _check_millis(self.expiration_time, "expiration_time")
        if not isinstance(self.key_bytes, (bytes, bytearray, memoryview)):
            raise InvalidArgument("key_bytes must be bytes-like")
        if not isinstance(self.key_bytes, bytes):
            object.__setattr__(self, "key_bytes", bytes(self.key_bytes))

    @classmethod
    def issue(cls, crypto_spec: CryptoSpec, validity_millis: int,
              key_bytes: bytes | None = None, clock: clk.Clock | None = None) -> "KeyMaterial":
        """
        Fresh issuance: expiration = now + validity_millis. Without key_bytes a random
        key of crypto_spec.key_length is generated.
        """
        if not isinstance(crypto_spec, CryptoSpec):
            raise InvalidArgument("crypto_spec is required")
        _check_millis(validity_millis, "validity_millis")
        if key_bytes is None:
            key_bytes = generate_key_bytes(crypto_spec)
        now = clk.resolve(clock).now_millis()
        return cls(crypto_spec, now + validity_millis, key_bytes)

    @property
    def expiration_datetime(self) -> datetime:
        """
        UTC instant of expiration_time. datetime stops at 9999-12-31, so later
        instants (still valid in the 48-bit wire field) come back as datetime.max.
        """
        if self.expiration_time > MAX_DATETIME_MILLIS:
            return datetime.max.replace(tzinfo=timezone.utc)
        return _EPOCH + timedelta(milliseconds=self.expiration_time)

    def is_expired(self, reference_time: int) -> bool:
        return reference_time >= self.expiration_time

    def is_expired_now(self, clock: clk.Clock | None = None) -> bool:
        return self.is_expired(clk.resolve(clock).now_millis())

    def remaining_millis(self, reference_time: int) -> int:
        return max(0, self.expiration_time - reference_time)

    def with_expiration(self, expiration_time: int) -> "KeyMaterial":
        return dataclasses.replace(self, expiration_time=expiration_time)

    def fingerprint(self) -> str:
        return hashlib.sha256(self.key_bytes).hexdigest()[:16]

    def __repr__(self) -> str:
        return (f"{type(self).__name__}(crypto_spec={self.crypto_spec}, "
                f"expiration_time={self.expiration_time}, "
                f"key=<{len(self.key_bytes)} bytes sha256:{self.fingerprint()}>)")
