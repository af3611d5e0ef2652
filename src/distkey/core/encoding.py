# src/distkey/core/encoding.py
"""
DKE-1, the distribution key body:

    offset  size  field
    0       6     expiration time, uint48 big-endian, ms since epoch
    6       N     raw key bytes, N = crypto_spec.key_length (no length prefix)

Timestamps that do not fit in 48 bits are rejected on encode instead of truncated.
"""
from __future__ import annotations
import struct

from distkey.core.cryptospec import CryptoSpec
from distkey.core.errors import InvalidArgument, MalformedEncoding

EXPIRATION_TIME_SIZE = 6
MAX_EXPIRATION_TIME = (1 << 48) - 1

# uint48 = high uint16 + low uint32
_EXPIRATION = struct.Struct(">HI")

def _require_spec(crypto_spec) -> CryptoSpec:
    if not isinstance(crypto_spec, CryptoSpec):
        raise InvalidArgument("crypto_spec is required")
    return crypto_spec

def encoded_length(crypto_spec: CryptoSpec) -> int:
    return EXPIRATION_TIME_SIZE + crypto_spec.key_length

def pack_expiration_time(expiration_time: int) -> bytes:
    if isinstance(expiration_time, bool) or not isinstance(expiration_time, int):
        raise InvalidArgument("expiration_time must be int")
    if expiration_time < 0 or expiration_time > MAX_EXPIRATION_TIME:
        raise InvalidArgument(
            f"expiration_time {expiration_time} does not fit in {EXPIRATION_TIME_SIZE * 8} bits"
        )
    return _EXPIRATION.pack(expiration_time >> 32, expiration_time & 0xFFFFFFFF)

def unpack_expiration_time(raw: bytes) -> int:
    if len(raw) < EXPIRATION_TIME_SIZE:
        raise MalformedEncoding("Unexpected end of data while reading expiration time")
    high, low = _EXPIRATION.unpack_from(raw, 0)
    return (high << 32) | low

def pack_distribution_key(expiration_time: int, key_bytes: bytes) -> bytes:
    """
    expiration(6) + key_bytes, nothing else.
    """
    if not isinstance(key_bytes, (bytes, bytearray, memoryview)):
        raise InvalidArgument("key_bytes must be bytes-like")
    return pack_expiration_time(expiration_time) + bytes(key_bytes)

def unpack_distribution_key(data: bytes, crypto_spec: CryptoSpec) -> tuple[int, bytes]:
    """
    Inverse of pack_distribution_key → (expiration_time, key_bytes).
    The key length must be exactly what crypto_spec dictates.
    """
    _require_spec(crypto_spec)
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise MalformedEncoding("distribution key data must be bytes")
    data = bytes(data)
    if len(data) < EXPIRATION_TIME_SIZE:
        raise MalformedEncoding(
            f"distribution key too short: {len(data)} < {EXPIRATION_TIME_SIZE} bytes"
        )
    key_len = len(data) - EXPIRATION_TIME_SIZE
    if key_len != crypto_spec.key_length:
        raise MalformedEncoding(
            f"key length {key_len} does not match {crypto_spec.name} ({crypto_spec.key_length} bytes)"
        )
    return unpack_expiration_time(data), data[EXPIRATION_TIME_SIZE:]

def read_distribution_key(fin, crypto_spec: CryptoSpec) -> tuple[int, bytes]:
    """
    Read exactly one DKE-1 body from a binary stream; anything after it stays unread.
    """
    _require_spec(crypto_spec)
    size = encoded_length(crypto_spec)
    data = fin.read(size)
    if data is None or len(data) != size:
        got = 0 if data is None else len(data)
        raise MalformedEncoding(f"Unexpected EOF while reading distribution key ({got}/{size} bytes)")
    return unpack_distribution_key(data, crypto_spec)
