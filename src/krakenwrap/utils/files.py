# src/krakenwrap/utils/files.py
from __future__ import annotations

from pathlib import Path
from typing import List

KREPORT_EXT = ".kreport"
KRAK2_EXT = ".krak2"
KRAKEN2_EXT = ".kraken2"
KRONA_EXT = ".krona"
KRONAGRAM_NAME = "kronagram.html"


def is_nonempty(path: Path) -> bool:
    """True when `path` is a file with at least one byte (shell `test -s`)."""
    try:
        return path.is_file() and path.stat().st_size > 0
    except OSError:
        return False


def with_suffix(path: Path, ext: str) -> Path:
    """Swap the last extension: a.krak2 -> a.kraken2 (shell ${file%.*}.ext)."""
    return path.with_suffix(ext)


def sample_output(out_dir: Path, sample: str, ext: str) -> Path:
    return out_dir / f"{sample}{ext}"


def list_outputs(out_dir: Path, ext: str) -> List[Path]:
    """Sorted files in out_dir ending with `ext`; empty when out_dir is absent."""
    if not out_dir.is_dir():
        return []
    return sorted(p for p in out_dir.iterdir() if p.is_file() and p.name.endswith(ext))
