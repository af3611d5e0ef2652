# src/distkey/core/errors.py
from __future__ import annotations

class DistKeyError(Exception):
    pass

class InvalidArgument(DistKeyError, ValueError):
    """Structurally impossible input at construction time (caller error, never retried)."""

class MalformedEncoding(DistKeyError, ValueError):
    """A DKE-1 body that is truncated or does not fit the bound CryptoSpec."""
