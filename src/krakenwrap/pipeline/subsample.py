# src/krakenwrap/pipeline/subsample.py
from __future__ import annotations

import gzip
import random
from itertools import zip_longest
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Tuple

from krakenwrap.errors import ExecutionError, InputError, InvocationError
from krakenwrap.utils.files import is_nonempty
from krakenwrap.utils.logger import get_logger

LOG = get_logger("subsample")

TMP_R1_NAME = "tmp_1.fastq.gz"
TMP_R2_NAME = "tmp_2.fastq.gz"

Record = Tuple[str, str, str, str]


def parse_depth(value: str) -> Optional[int]:
    """'all' -> None (no subsampling); otherwise a positive read-pair count."""
    text = str(value).strip()
    if text.lower() == "all":
        return None
    try:
        depth = int(text)
    except ValueError:
        raise InvocationError(f"Subsampling depth must be an integer or 'all', got {value!r}") from None
    if depth <= 0:
        raise InvocationError(f"Subsampling depth must be positive, got {depth}")
    return depth


def iter_fastq(path: Path) -> Iterator[Record]:
    """Yield 4-line FASTQ records from a gzip file."""
    try:
        with gzip.open(path, "rt", encoding="utf-8") as fh:
            while True:
                header = fh.readline()
                if not header:
                    return
                seq, plus, qual = fh.readline(), fh.readline(), fh.readline()
                if not qual:
                    raise InputError(f"{path} ends with a truncated FASTQ record.")
                yield (header, seq, plus, qual)
    except (OSError, EOFError, UnicodeDecodeError) as e:
        raise InputError(f"{path} could not be read as gzipped FASTQ. Exiting...") from e


def iter_pairs(reads_1: Path, reads_2: Path) -> Iterator[Tuple[Record, Record]]:
    for r1, r2 in zip_longest(iter_fastq(reads_1), iter_fastq(reads_2)):
        if r1 is None or r2 is None:
            raise InputError(f"{reads_1} and {reads_2} contain different numbers of reads.")
        yield r1, r2


def sample_pairs(
    reads_1: Path,
    reads_2: Path,
    depth: int,
    *,
    rng: random.Random,
) -> List[Tuple[Record, Record]]:
    """Reservoir-sample `depth` pairs in one pass, holding at most `depth` in memory."""
    reservoir: List[Tuple[Record, Record]] = []
    seen = 0
    for pair in iter_pairs(reads_1, reads_2):
        if seen < depth:
            reservoir.append(pair)
        else:
            j = rng.randrange(seen + 1)
            if j < depth:
                reservoir[j] = pair
        seen += 1
    rng.shuffle(reservoir)
    LOG.debug("Sampled %d of %d read pairs", len(reservoir), seen)
    return reservoir


def _write_records(path: Path, records: Iterable[Record]) -> None:
    with gzip.open(path, "wt", encoding="utf-8") as fh:
        for rec in records:
            fh.writelines(rec)


def subsample_pairs(
    reads_1: Path,
    reads_2: Path,
    depth: int,
    out_dir: Path,
    *,
    rng: Optional[random.Random] = None,
) -> Tuple[Path, Path]:
    """
    Keep `depth` read pairs chosen uniformly at random, mates kept together.

    Writes <out_dir>/tmp_1.fastq.gz and tmp_2.fastq.gz and returns them.
    A file with fewer than `depth` pairs is kept whole.
    """
    picked = sample_pairs(reads_1, reads_2, depth, rng=rng or random.Random())

    tmp_1 = out_dir / TMP_R1_NAME
    tmp_2 = out_dir / TMP_R2_NAME
    _write_records(tmp_1, (r1 for r1, _ in picked))
    _write_records(tmp_2, (r2 for _, r2 in picked))

    if not picked or not is_nonempty(tmp_1):
        raise ExecutionError("something went wrong with subsampling sequences. Exiting...")
    return tmp_1, tmp_2


def cleanup_subsample(paths: Iterable[Path]) -> None:
    for p in paths:
        if p.exists():
            p.unlink()
            LOG.debug("Removed %s", p)
