# src/krakenwrap/pipeline/types.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Tuple

from krakenwrap.errors import ExecutionError

PAIRED = "paired"
ASSEMBLY = "assembly"


class Stage(str, Enum):
    INIT = "init"
    DISPATCH = "dispatch"
    CLASSIFY = "classify"
    TRANSLATE = "translate"
    VISUALIZE = "visualize"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class InputUnit:
    sample: str           # output file stem, e.g. "S1" for S1_1.fastq.gz
    kind: str             # PAIRED | ASSEMBLY
    reads_1: Path         # R1, or the contig file for assemblies
    reads_2: Optional[Path] = None

    @property
    def is_paired(self) -> bool:
        return self.kind == PAIRED

    @property
    def files(self) -> Tuple[Path, ...]:
        if self.reads_2 is not None:
            return (self.reads_1, self.reads_2)
        return (self.reads_1,)

    def describe(self) -> str:
        return " and ".join(str(p) for p in self.files)


@dataclass(frozen=True)
class StepResult:
    ok: bool
    message: str
    path: Optional[Path] = None
    skipped: bool = False

    @classmethod
    def success(cls, message: str, path: Optional[Path] = None, *, skipped: bool = False) -> "StepResult":
        return cls(True, message, path, skipped)

    @classmethod
    def failure(cls, message: str, path: Optional[Path] = None) -> "StepResult":
        return cls(False, message, path)

    def raise_for_failure(self) -> "StepResult":
        if not self.ok:
            raise ExecutionError(self.message)
        return self


@dataclass
class RunOptions:
    out_dir: Path
    threads: int = 1
    depth: Optional[int] = None   # None means classify all reads
    preload: bool = True
    seed: Optional[int] = None
    dry_run: bool = False
    show_tools: bool = True
