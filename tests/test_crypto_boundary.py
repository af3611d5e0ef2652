# tests/test_crypto_boundary.py
import os
import pytest
from cryptography.hazmat.primitives import hashes, padding
from distkey.core import crypto
from distkey.core.cryptospec import CryptoSpec
from distkey.core.distribution import DistributionKey
from distkey.core.errors import InvalidArgument

def test_generate_key_bytes_matches_spec():
    assert len(crypto.generate_key_bytes(CryptoSpec.from_string("AES-192-CBC"))) == 24

def test_distribution_key_drives_selected_cipher():
    spec = CryptoSpec.from_string("AES-128-CBC")
    key = DistributionKey.create(spec, 1000, os.urandom(16))
    iv = os.urandom(16)

    padder = padding.PKCS7(128).padder()
    plain = padder.update(b"session key request") + padder.finalize()
    enc = crypto.new_cipher(spec, key.key_bytes, iv).encryptor()
    ct = enc.update(plain) + enc.finalize()

    dec = crypto.new_cipher(spec, key.key_bytes, iv).decryptor()
    assert dec.update(ct) + dec.finalize() == plain

def test_wrong_key_length_is_invalid():
    spec = CryptoSpec.from_string("AES-256-CBC")
    with pytest.raises(InvalidArgument):
        crypto.new_cipher(spec, b"\x00" * 16, b"\x00" * 16)

def test_bad_iv_is_invalid():
    spec = CryptoSpec.from_string("AES-128-CBC")
    with pytest.raises(InvalidArgument):
        crypto.new_cipher(spec, b"\x00" * 16, b"\x00" * 3)

def test_mac_algorithm():
    assert isinstance(crypto.mac_algorithm(CryptoSpec.from_string("AES-128-CBC", mac="SHA384")), hashes.SHA384)

def test_derive_key_argon2id_type_checks():
    with pytest.raises(TypeError):
        crypto.derive_key_argon2id("pw", b"saltsalt", 16, 8 * 1024, 1, 1)
    with pytest.raises(TypeError):
        crypto.derive_key_argon2id(b"pw", "saltsalt", 16, 8 * 1024, 1, 1)

def test_argon2_rejection_becomes_invalid_argument():
    with pytest.raises(InvalidArgument):
        crypto.derive_key_argon2id(b"pw", b"saltsalt", 16, 1024, 1, 1)
