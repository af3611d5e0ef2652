# src/distkey/core/io.py
from __future__ import annotations
import os
from contextlib import contextmanager
from pathlib import Path

from distkey.core import encoding
from distkey.core.cryptospec import CryptoSpec
from distkey.core.distribution import DistributionKey
from distkey.core.errors import MalformedEncoding
from distkey.utils.naming import next_collision_free

@contextmanager
def _atomic_writer(final_path: Path, tmp_suffix: str = ".tmp"):
    """
    Yields (file, tmp_path); the temp file replaces final_path only if the block succeeds.
    """
    final_path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = final_path.with_suffix(final_path.suffix + tmp_suffix)
    f = open(tmp_path, "wb")
    try:
        yield f, tmp_path
        f.flush()
        os.fsync(f.fileno())
    except BaseException:
        f.close()
        tmp_path.unlink(missing_ok=True)
        raise
    f.close()
    os.replace(tmp_path, final_path)

def write_key_file(path: str, key: DistributionKey, overwrite: bool = False, logger=None) -> str:
    """
    Store the DKE-1 body of key at path. Without overwrite an existing file is kept
    and the key goes to 'name (1).ext', 'name (2).ext', ...
    """
    dst = Path(path)
    if not overwrite:
        dst = next_collision_free(dst)
    with _atomic_writer(dst) as (fout, tmp_path):
        fout.write(key.serialize())
    if logger:
        logger.info(f"[io] wrote distribution key sha256:{key.fingerprint()} to {dst}")
    return str(dst)

def read_key_file(path: str, crypto_spec: CryptoSpec, logger=None) -> DistributionKey:
    src = Path(path)
    if not src.is_file():
        raise FileNotFoundError(f"Not a file: {src}")
    size = src.stat().st_size
    expected = encoding.encoded_length(crypto_spec)
    if size != expected:
        raise MalformedEncoding(f"{src}: {size} bytes, {crypto_spec.name} key file must be {expected}")
    with open(src, "rb") as fin:
        key = DistributionKey.read(fin, crypto_spec)
    if logger:
        logger.debug(f"[io] read distribution key sha256:{key.fingerprint()} from {src}")
    return key
