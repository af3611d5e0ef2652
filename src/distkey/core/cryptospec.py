# src/distkey/core/cryptospec.py
from __future__ import annotations
from dataclasses import dataclass

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers import algorithms, modes

from distkey.core.errors import InvalidArgument

_CIPHERS = {
    "AES": algorithms.AES,
}

_KEY_BITS = (128, 192, 256)

_MODES = {
    "CBC": modes.CBC,
    "CTR": modes.CTR,
    "GCM": modes.GCM,
}

_MACS = {
    "SHA1": hashes.SHA1,
    "SHA256": hashes.SHA256,
    "SHA384": hashes.SHA384,
    "SHA512": hashes.SHA512,
}

@dataclass(frozen=True)
class CryptoSpec:
    """
    Which symmetric algorithm a raw key is meant for: cipher family, key size, mode and
    the hash of the accompanying MAC. Used only as a tag; never touches key bytes itself.
    """
    cipher: str = "AES"
    key_bits: int = 128
    mode: str = "CBC"
    mac: str = "SHA256"

    def __post_init__(self) -> None:
        if not isinstance(self.cipher, str) or self.cipher.upper() not in _CIPHERS:
            raise InvalidArgument(f"Unsupported cipher: {self.cipher!r}")
        if not isinstance(self.mode, str) or self.mode.upper() not in _MODES:
            raise InvalidArgument(f"Unsupported cipher mode: {self.mode!r}")
        if not isinstance(self.mac, str) or self.mac.upper() not in _MACS:
            raise InvalidArgument(f"Unsupported MAC hash: {self.mac!r}")
        if isinstance(self.key_bits, bool) or not isinstance(self.key_bits, int):
            raise InvalidArgument("key_bits must be int")
        # frozen: normalise through object.__setattr__
        object.__setattr__(self, "cipher", self.cipher.upper())
        object.__setattr__(self, "mode", self.mode.upper())
        object.__setattr__(self, "mac", self.mac.upper())
        if self.key_bits not in _KEY_BITS or self.key_bits not in _CIPHERS[self.cipher].key_sizes:
            raise InvalidArgument(f"{self.cipher} does not support {self.key_bits}-bit keys")

    @property
    def key_length(self) -> int:
        return self.key_bits // 8

    @property
    def name(self) -> str:
        return f"{self.cipher}-{self.key_bits}-{self.mode}"

    @classmethod
    def from_string(cls, cipher_name: str, mac: str = "SHA256") -> "CryptoSpec":
        """Parse 'AES-128-CBC' style names (case-insensitive)."""
        if not isinstance(cipher_name, str):
            raise InvalidArgument("cipher name must be str")
        parts = cipher_name.strip().split("-")
        if len(parts) != 3:
            raise InvalidArgument(f"Expected CIPHER-BITS-MODE, got {cipher_name!r}")
        family, bits, mode = parts
        try:
            key_bits = int(bits)
        except ValueError as e:
            raise InvalidArgument(f"Bad key size in {cipher_name!r}") from e
        return cls(cipher=family, key_bits=key_bits, mode=mode, mac=mac)

    @classmethod
    def from_dict(cls, d: dict) -> "CryptoSpec":
        if not isinstance(d, dict) or "cipher" not in d:
            raise InvalidArgument("crypto spec must be an object with 'cipher'")
        return cls.from_string(d["cipher"], mac=d.get("mac", "SHA256"))

    def to_dict(self) -> dict:
        return {"cipher": self.name, "mac": self.mac}

    def matches_key(self, raw: bytes) -> bool:
        return len(raw) == self.key_length

    def algorithm(self, key: bytes):
        return _CIPHERS[self.cipher](key)

    def mode_for(self, iv: bytes):
        return _MODES[self.mode](iv)

    def hash_algorithm(self) -> hashes.HashAlgorithm:
        return _MACS[self.mac]()

    def __str__(self) -> str:
        return f"{self.name}:{self.mac}"
