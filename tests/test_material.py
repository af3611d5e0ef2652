# tests/test_material.py
from datetime import datetime, timezone
import pytest
from distkey.core.clock import FixedClock
from distkey.core.cryptospec import CryptoSpec
from distkey.core.errors import InvalidArgument
from distkey.core.material import KeyMaterial

SPEC = CryptoSpec.from_string("AES-128-CBC")

def test_reconstruction_keeps_fields():
    km = KeyMaterial(SPEC, 1000, b"\xab" * 16)
    assert km.crypto_spec is SPEC
    assert km.expiration_time == 1000
    assert km.key_bytes == b"\xab" * 16

def test_bytes_like_input_is_frozen_into_bytes():
    buf = bytearray(b"\x01" * 16)
    km = KeyMaterial(SPEC, 1, buf)
    buf[0] = 0xFF
    assert isinstance(km.key_bytes, bytes)
    assert km.key_bytes == b"\x01" * 16

def test_missing_crypto_spec_is_invalid():
    with pytest.raises(InvalidArgument):
        KeyMaterial(None, 1000, b"\x00" * 16)
    with pytest.raises(InvalidArgument):
        KeyMaterial.issue(None, 1000)

@pytest.mark.parametrize("exp", [-1, 1.5, "1000", True])
def test_bad_expiration_is_invalid(exp):
    with pytest.raises(InvalidArgument):
        KeyMaterial(SPEC, exp, b"\x00" * 16)

def test_issue_computes_absolute_expiration():
    c = FixedClock(1_700_000_000_000)
    km = KeyMaterial.issue(SPEC, 3_600_000, clock=c)
    assert km.expiration_time == 1_700_003_600_000
    assert len(km.key_bytes) == 16
    # clock moving later does not change the stored instant
    c.advance(10_000)
    assert km.expiration_time == 1_700_003_600_000

def test_issue_uses_given_key_bytes():
    km = KeyMaterial.issue(SPEC, 0, key_bytes=b"\x11" * 16, clock=FixedClock(5))
    assert km.key_bytes == b"\x11" * 16
    assert km.expiration_time == 5
    assert km.is_expired(5)

def test_issue_rejects_negative_validity():
    with pytest.raises(InvalidArgument):
        KeyMaterial.issue(SPEC, -1, clock=FixedClock(0))

def test_random_keys_differ():
    c = FixedClock(0)
    assert KeyMaterial.issue(SPEC, 1, clock=c).key_bytes != KeyMaterial.issue(SPEC, 1, clock=c).key_bytes

def test_expiration_is_monotonic_and_inclusive():
    km = KeyMaterial(SPEC, 1000, b"\x00" * 16)
    assert km.is_expired(0) is False
    assert km.is_expired(999) is False
    assert km.is_expired(1000) is True
    assert km.is_expired(1001) is True

def test_is_expired_now_and_remaining():
    km = KeyMaterial(SPEC, 1000, b"\x00" * 16)
    c = FixedClock(400)
    assert km.is_expired_now(c) is False
    assert km.remaining_millis(400) == 600
    c.set(1000)
    assert km.is_expired_now(c) is True
    assert km.remaining_millis(2000) == 0

def test_expiration_datetime_is_utc():
    km = KeyMaterial(SPEC, 1_500, b"\x00" * 16)
    assert km.expiration_datetime == datetime(1970, 1, 1, 0, 0, 1, 500000, tzinfo=timezone.utc)

def test_with_expiration_builds_new_object():
    km = KeyMaterial(SPEC, 1000, b"\x00" * 16)
    km2 = km.with_expiration(2000)
    assert km.expiration_time == 1000
    assert km2.expiration_time == 2000
    assert km2.key_bytes == km.key_bytes
    with pytest.raises(AttributeError):
        km.expiration_time = 3000

def test_repr_does_not_leak_key():
    km = KeyMaterial(SPEC, 1000, b"\xab" * 16)
    text = repr(km)
    assert "ab" * 16 not in text
    assert km.fingerprint() in text
    assert "16 bytes" in text

def test_expiration_datetime_saturates_past_datetime_range():
    from distkey.core.material import MAX_DATETIME_MILLIS
    last = KeyMaterial(SPEC, MAX_DATETIME_MILLIS, b"\x00" * 16)
    assert last.expiration_datetime.year == 9999
    beyond = KeyMaterial(SPEC, MAX_DATETIME_MILLIS + 1, b"\x00" * 16)
    assert beyond.expiration_datetime == datetime.max.replace(tzinfo=timezone.utc)
