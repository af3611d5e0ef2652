# src/distkey/core/distribution.py
from __future__ import annotations
from dataclasses import dataclass

from distkey.core import clock as clk
from distkey.core import encoding
from distkey.core.crypto import derive_key_argon2id
from distkey.core.cryptospec import CryptoSpec
from distkey.core.errors import InvalidArgument
from distkey.core.material import KeyMaterial

@dataclass(frozen=True)
class DistributionKey:
    """
    Key material meant for a peer (entity <-> Auth), with its DKE-1 wire form.
    Wraps a KeyMaterial; the only thing it adds is the codec.
    """
    material: KeyMaterial

    def __post_init__(self) -> None:
        if not isinstance(self.material, KeyMaterial):
            raise InvalidArgument("material must be KeyMaterial")
        if self.material.expiration_time > encoding.MAX_EXPIRATION_TIME:
            raise InvalidArgument("expiration_time does not fit the 48-bit DKE-1 field")

    # --- construction ---

    @classmethod
    def create(cls, crypto_spec: CryptoSpec, expiration_time: int, key_bytes: bytes) -> "DistributionKey":
        return cls(KeyMaterial(crypto_spec, expiration_time, key_bytes))

    @classmethod
    def issue(cls, crypto_spec: CryptoSpec, validity_millis: int,
              key_bytes: bytes | None = None, clock: clk.Clock | None = None) -> "DistributionKey":
        return cls(KeyMaterial.issue(crypto_spec, validity_millis, key_bytes=key_bytes, clock=clock))

    @classmethod
    def derive(cls, crypto_spec: CryptoSpec, validity_millis: int, passphrase: bytes, salt: bytes,
               clock: clk.Clock | None = None, m_cost: int = 64 * 1024 * 1024,
               t_cost: int = 3, parallelism: int = 1) -> "DistributionKey":
        """Issue a key whose bytes are Argon2id(passphrase, salt) instead of random."""
        key = derive_key_argon2id(passphrase, salt, crypto_spec.key_length, m_cost, t_cost, parallelism)
        return cls.issue(crypto_spec, validity_millis, key_bytes=key, clock=clock)

    @classmethod
    def deserialize(cls, data: bytes, crypto_spec: CryptoSpec) -> "DistributionKey":
        expiration_time, key_bytes = encoding.unpack_distribution_key(data, crypto_spec)
        return cls.create(crypto_spec, expiration_time, key_bytes)

    @classmethod
    def read(cls, fin, crypto_spec: CryptoSpec) -> "DistributionKey":
        expiration_time, key_bytes = encoding.read_distribution_key(fin, crypto_spec)
        return cls.create(crypto_spec, expiration_time, key_bytes)

    # --- codec ---

    def serialize(self) -> bytes:
        return encoding.pack_distribution_key(self.material.expiration_time, self.material.key_bytes)

    # --- delegation ---

    @property
    def crypto_spec(self) -> CryptoSpec:
        return self.material.crypto_spec

    @property
    def expiration_time(self) -> int:
        return self.material.expiration_time

    @property
    def key_bytes(self) -> bytes:
        return self.material.key_bytes

    def is_expired(self, reference_time: int) -> bool:
        return self.material.is_expired(reference_time)

    def is_expired_now(self, clock: clk.Clock | None = None) -> bool:
        return self.material.is_expired_now(clock)

    def remaining_millis(self, reference_time: int) -> int:
        return self.material.remaining_millis(reference_time)

    def fingerprint(self) -> str:
        return self.material.fingerprint()

    def describe(self) -> str:
        return (f"Expiration Time: {self.material.expiration_datetime.isoformat()} "
                f"({self.expiration_time})\tCryptoSpec: {self.crypto_spec}\t"
                f"Key: sha256:{self.fingerprint()}")

    def __repr__(self) -> str:
        return f"DistributionKey({self.material!r})"
