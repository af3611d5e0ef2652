# src/distkey/core/crypto.py
from __future__ import annotations
import os

from argon2.exceptions import HashingError
from argon2.low_level import hash_secret_raw, Type
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers import Cipher

from distkey.core.cryptospec import CryptoSpec
from distkey.core.errors import InvalidArgument

def generate_key_bytes(crypto_spec: CryptoSpec) -> bytes:
    return os.urandom(crypto_spec.key_length)

def derive_key_argon2id(passphrase: bytes, salt: bytes, length: int,
                        m_cost: int, t_cost: int, parallelism: int) -> bytes:
    if not isinstance(passphrase, (bytes, bytearray)):
        raise TypeError("passphrase must be bytes")
    if not isinstance(salt, (bytes, bytearray)):
        raise TypeError("salt must be bytes")
    if length <= 0:
        raise InvalidArgument("length must be > 0")
    # argon2 expects memory_cost in KiB
    try:
        return hash_secret_raw(
            secret=bytes(passphrase),
            salt=bytes(salt),
            time_cost=t_cost,
            memory_cost=m_cost // 1024,
            parallelism=parallelism,
            hash_len=length,
            type=Type.ID,
        )
    except HashingError as e:
        raise InvalidArgument(f"Argon2id rejected the parameters: {e}") from e

def new_cipher(crypto_spec: CryptoSpec, key_bytes: bytes, iv: bytes) -> Cipher:
    """
    Hand the raw key to the cipher the spec selects. Only the length is checked;
    the caller does the actual encrypting/decrypting.
    """
    if not crypto_spec.matches_key(key_bytes):
        raise InvalidArgument(
            f"{crypto_spec.name} needs a {crypto_spec.key_length}-byte key, got {len(key_bytes)}"
        )
    try:
        return Cipher(crypto_spec.algorithm(key_bytes), crypto_spec.mode_for(iv))
    except ValueError as e:
        raise InvalidArgument(f"Cannot build {crypto_spec.name} cipher: {e}") from e

def mac_algorithm(crypto_spec: CryptoSpec) -> hashes.HashAlgorithm:
    return crypto_spec.hash_algorithm()
