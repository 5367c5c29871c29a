# src/krakenwrap/pipeline/dispatch.py
from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional

from krakenwrap.errors import InputError
from krakenwrap.pipeline.types import ASSEMBLY, PAIRED, InputUnit
from krakenwrap.utils.logger import get_logger

LOG = get_logger("dispatch")

R1_SUFFIX = "_1.fastq.gz"
R2_SUFFIX = "_2.fastq.gz"
ASSEMBLY_SUFFIXES = (".fa", ".fasta")


def mate_path(reads_1: Path) -> Path:
    """S1_1.fastq.gz -> S1_2.fastq.gz (replaces everything after the last '_')."""
    root, _, _ = reads_1.name.rpartition("_")
    return reads_1.with_name(f"{root}{R2_SUFFIX}")


def paired_sample_name(reads_1: Path) -> str:
    return reads_1.name.rpartition("_")[0]


def assembly_sample_name(path: Path) -> str:
    return path.stem


def classify_path(path: Path) -> Optional[str]:
    name = path.name
    if name.endswith(R1_SUFFIX):
        return PAIRED
    if name.endswith(ASSEMBLY_SUFFIXES):
        return ASSEMBLY
    return None


def dispatch_inputs(paths: Iterable[Path]) -> List[InputUnit]:
    """
    Turn positional arguments into input units, in argument order.

    *_1.fastq.gz becomes a read pair (its *_2.fastq.gz mate must exist);
    *.fa / *.fasta becomes an assembly; anything else, including bare
    *_2.fastq.gz arguments, is ignored. Every argument is checked before
    anything runs, so a missing mate aborts the whole run up front.
    """
    units: List[InputUnit] = []
    for raw in paths:
        path = Path(raw)
        kind = classify_path(path)
        if kind == PAIRED:
            reads_2 = mate_path(path)
            if not reads_2.exists():
                raise InputError(f"{reads_2} does not exist. Exiting...")
            units.append(InputUnit(paired_sample_name(path), PAIRED, path, reads_2))
        elif kind == ASSEMBLY:
            units.append(InputUnit(assembly_sample_name(path), ASSEMBLY, path))
        else:
            LOG.debug("Ignoring unrecognised input: %s", path)

    seen = {}
    for unit in units:
        if unit.sample in seen:
            LOG.warning(
                "Sample name %r is shared by %s and %s; outputs will overwrite each other.",
                unit.sample, seen[unit.sample], unit.reads_1,
            )
        seen[unit.sample] = unit.reads_1
    LOG.debug("Dispatched %d input unit(s)", len(units))
    return units
