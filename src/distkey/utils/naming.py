# src/distkey/utils/naming.py
from __future__ import annotations
from pathlib import Path

def numbered_variant(path: Path, n: int) -> Path:
    return path.parent / f"{path.stem} ({n}){path.suffix}"

def next_collision_free(path: Path) -> Path:
    """First of path, 'stem (1).ext', 'stem (2).ext', ... that does not exist yet."""
    n = 0
    candidate = path
    while candidate.exists():
        n += 1
        candidate = numbered_variant(path, n)
    return candidate
