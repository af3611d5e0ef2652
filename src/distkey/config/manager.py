from pathlib import Path
import copy, json, os

from distkey.core.cryptospec import CryptoSpec
from distkey.utils.duration import parse_duration_millis

APP_DIR = Path(os.getenv('DISTKEY_HOME', '.distkey'))
CFG_PATH = APP_DIR / 'config.json'

DEFAULTS = {
  "crypto": {"cipher": "AES-128-CBC", "mac": "SHA256"},
  "distribution": {"validity": "1*hour"},
  "argon2": {"m": 67108864, "t": 3, "p": 1}
}

def get_config_path() -> Path: return CFG_PATH

def _merge(base: dict, override: dict) -> dict:
    out = copy.deepcopy(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _merge(out[k], v)
        else:
            out[k] = v
    return out

def load_config(path: Path | None = None) -> dict:
    path = path or CFG_PATH
    try:
        return _merge(DEFAULTS, json.loads(path.read_text(encoding='utf-8')))
    except FileNotFoundError:
        save_config(DEFAULTS, path)
        return copy.deepcopy(DEFAULTS)

def save_config(cfg: dict, path: Path | None = None) -> None:
    path = path or CFG_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(cfg, ensure_ascii=False, indent=2), encoding='utf-8')

def crypto_spec_from_config(cfg: dict) -> CryptoSpec:
    return CryptoSpec.from_dict(cfg.get("crypto", DEFAULTS["crypto"]))

def validity_from_config(cfg: dict) -> int:
    return parse_duration_millis(cfg.get("distribution", {}).get("validity", DEFAULTS["distribution"]["validity"]))
