# src/krakenwrap/pipeline/classify.py
from __future__ import annotations

import random
from pathlib import Path
from typing import List, Sequence

from krakenwrap.config.schema import Settings
from krakenwrap.errors import NoInputsError
from krakenwrap.pipeline.subsample import cleanup_subsample, subsample_pairs
from krakenwrap.pipeline.types import InputUnit, RunOptions, StepResult
from krakenwrap.utils.files import (
    KRAK2_EXT,
    KREPORT_EXT,
    is_nonempty,
    list_outputs,
    sample_output,
)
from krakenwrap.utils.logger import comment, get_logger
from krakenwrap.utils.runner import ToolRunner

LOG = get_logger("classify")

NO_INPUTS_MESSAGE = "No fasta or fastq files detected! (must be in .fasta .fa .fastq.gz or .fq format)"


def build_kraken2_command(
    settings: Settings,
    unit: InputUnit,
    reads: Sequence[Path],
    out_dir: Path,
    *,
    threads: int = 1,
    preload: bool = True,
) -> List[str]:
    cmd: List[str] = [
        settings.kraken2_bin, "--use-names",
        "--db", str(settings.kraken2_db),
    ]
    if unit.is_paired:
        cmd.append("--paired")
    cmd += [
        "--threads", str(threads),
        "--report", str(sample_output(out_dir, unit.sample, KREPORT_EXT)),
        "--output", str(sample_output(out_dir, unit.sample, KRAK2_EXT)),
    ]
    if not preload:
        cmd.append("--memory-mapping")
    cmd += [str(r) for r in reads]
    return cmd


def classify_unit(
    unit: InputUnit,
    *,
    settings: Settings,
    runner: ToolRunner,
    options: RunOptions,
    rng: random.Random,
) -> StepResult:
    """
    Run kraken2 on one read pair or assembly.

    A non-empty <sample>.krak2 from an earlier run counts as done and
    nothing is executed. Subsampled temporaries are removed only after
    kraken2 succeeds.
    """
    out_dir = options.out_dir
    krak2 = sample_output(out_dir, unit.sample, KRAK2_EXT)
    comment(f"Now processing {unit.describe()} with {options.threads} threads")

    if is_nonempty(krak2):
        comment(f"{krak2} already exists - skipping running kraken2")
        return StepResult.success(f"{krak2} reused", krak2, skipped=True)

    reads: Sequence[Path] = unit.files
    temporaries: Sequence[Path] = ()
    if unit.is_paired and options.depth is not None and not options.dry_run:
        comment(f"subsampling down to {options.depth} reads...")
        temporaries = subsample_pairs(unit.reads_1, unit.reads_2, options.depth, out_dir, rng=rng)
        reads = temporaries
        comment("Subsampling done. Starting KRAKEN...")

    if not options.dry_run and not is_nonempty(reads[0]):
        return StepResult.failure(f"{reads[0]} doesnt exist. Exiting...")

    cmd = build_kraken2_command(
        settings, unit, reads, out_dir,
        threads=options.threads, preload=options.preload,
    )
    result = runner.run(cmd)
    failed = StepResult.failure(f"Something went wrong with running kraken2 on {unit.describe()} . Exiting...")
    if not result.ok:
        return failed
    if not options.dry_run and not is_nonempty(krak2):
        return failed

    cleanup_subsample(temporaries)
    return StepResult.success(f"kraken2 finished for {unit.sample}", krak2)


def classify_all(
    units: Sequence[InputUnit],
    *,
    settings: Settings,
    runner: ToolRunner,
    options: RunOptions,
) -> List[StepResult]:
    rng = random.Random(options.seed)
    results: List[StepResult] = []
    for unit in units:
        results.append(
            classify_unit(unit, settings=settings, runner=runner, options=options, rng=rng).raise_for_failure()
        )
    return results


def find_classification_outputs(out_dir: Path) -> List[Path]:
    found = list_outputs(out_dir, KRAK2_EXT)
    if not found:
        raise NoInputsError(NO_INPUTS_MESSAGE)
    return found
