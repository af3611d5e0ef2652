# src/distkey/main.py
import argparse
import logging
import os
import sys
from getpass import getpass
from pathlib import Path

from distkey.config import manager as cfgman
from distkey.core import io as keyio
from distkey.core.cryptospec import CryptoSpec
from distkey.core.distribution import DistributionKey
from distkey.core.errors import DistKeyError, InvalidArgument, MalformedEncoding
from distkey.utils.duration import parse_duration_millis

def parse_args(argv):
    p = argparse.ArgumentParser(prog="distkey", description="Issue and inspect DKE-1 distribution keys")
    g = p.add_mutually_exclusive_group(required=True)
    g.add_argument("--issue", metavar="PATH", help="Issue a new distribution key into PATH")
    g.add_argument("--inspect", nargs="+", metavar="PATH", help="Show expiration/fingerprint of key files")
    p.add_argument("--config", help="Path to config.json (default: $DISTKEY_HOME/config.json)")
    p.add_argument("--cipher", help="e.g. AES-128-CBC (overrides config)")
    p.add_argument("--mac", help="e.g. SHA256 (overrides config)")
    p.add_argument("--validity", help="e.g. 1*hour, 30*minute or plain milliseconds")
    p.add_argument("--passphrase", help="Derive key with Argon2id: PROMPT, ENV:NAME or literal")
    p.add_argument("--salt", help="Hex salt for --passphrase (random if omitted)")
    p.add_argument("--overwrite", action="store_true")
    p.add_argument("--log-file", help="Write log to this file instead of stderr")
    p.add_argument("-v", "--verbose", action="store_true")
    return p.parse_args(argv)

def _passphrase_resolver(opt: str | None):
    if opt is None:
        return None
    if opt.upper().startswith("ENV:"):
        envname = opt.split(":", 1)[1]
        pw = os.getenv(envname, "")
        return lambda: pw.encode("utf-8")
    if opt.upper() == "PROMPT":
        return lambda: getpass("Passphrase: ").encode("utf-8")
    return lambda: opt.encode("utf-8")

def _setup_logging(ns) -> logging.Logger:
    level = logging.DEBUG if ns.verbose else logging.WARNING
    kwargs = {"filename": ns.log_file} if ns.log_file else {"stream": sys.stderr}
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s", **kwargs)
    return logging.getLogger("distkey")

def _crypto_spec(ns, cfg) -> CryptoSpec:
    spec = cfgman.crypto_spec_from_config(cfg)
    if ns.cipher or ns.mac:
        spec = CryptoSpec.from_string(ns.cipher or spec.name, mac=ns.mac or spec.mac)
    return spec

def _issue(ns, cfg, logger) -> int:
    spec = _crypto_spec(ns, cfg)
    validity = parse_duration_millis(ns.validity) if ns.validity else cfgman.validity_from_config(cfg)
    pw = _passphrase_resolver(ns.passphrase)
    if ns.salt and pw is None:
        raise InvalidArgument("--salt only applies together with --passphrase")
    if pw is None:
        key = DistributionKey.issue(spec, validity)
    else:
        salt = bytes.fromhex(ns.salt) if ns.salt else os.urandom(16)
        a = cfg.get("argon2", cfgman.DEFAULTS["argon2"])
        key = DistributionKey.derive(spec, validity, pw(), salt, m_cost=a["m"], t_cost=a["t"], parallelism=a["p"])
        print(f"[INFO] salt: {salt.hex()}")
    out = keyio.write_key_file(ns.issue, key, overwrite=ns.overwrite, logger=logger)
    print(f"[OK] ISSUE: {out} ({spec}) {key.describe()}")
    return 0

def _inspect(ns, cfg, logger) -> int:
    spec = _crypto_spec(ns, cfg)
    rc = 0
    for raw in ns.inspect:
        path = Path(raw)
        try:
            key = keyio.read_key_file(str(path), spec, logger=logger)
        except (MalformedEncoding, OSError) as e:
            print(f"[ERROR] {path}: {e}")
            rc = 1
            continue
        if key.is_expired_now():
            print(f"[EXPIRED] {path}: {key.describe()}")
            rc = 1
        else:
            print(f"[OK] {path}: {key.describe()}")
    return rc

def run_cli(ns) -> int:
    logger = _setup_logging(ns)
    try:
        cfg = cfgman.load_config(Path(ns.config) if ns.config else None)
        if ns.issue:
            return _issue(ns, cfg, logger)
        return _inspect(ns, cfg, logger)
    except (DistKeyError, OSError, ValueError) as e:
        logger.debug("distkey failed", exc_info=True)
        print(f"[ERROR] {e}")
        return 2

def main() -> int:
    ns = parse_args(sys.argv[1:])
    return run_cli(ns)

if __name__ == "__main__":
    raise SystemExit(main())
