# src/krakenwrap/pipeline/visualize.py
from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Sequence

from krakenwrap.config.schema import Settings
from krakenwrap.pipeline.types import StepResult
from krakenwrap.utils.files import KRONA_EXT, KRONAGRAM_NAME, is_nonempty, list_outputs, with_suffix
from krakenwrap.utils.logger import get_logger
from krakenwrap.utils.runner import ToolRunner

LOG = get_logger("visualize")


def summarize_file(
    kraken2: Path,
    *,
    settings: Settings,
    runner: ToolRunner,
    verify: bool = True,
) -> StepResult:
    """Collapse a .kraken2 lineage file into Krona text (stdout -> <sample>.krona)."""
    target = with_suffix(kraken2, KRONA_EXT)
    result = runner.run([str(settings.krona_script), str(kraken2)], stdout_path=target)
    if not result.ok or (verify and not is_nonempty(target)):
        return StepResult.failure(
            "Something went wrong with making krona file from kraken file. Exiting...", kraken2
        )
    return StepResult.success(f"summarised {kraken2.name}", target)


def build_kronagram(
    krona_files: Sequence[Path],
    out_dir: Path,
    *,
    settings: Settings,
    runner: ToolRunner,
    verify: bool = True,
) -> StepResult:
    """Merge every .krona summary into one interactive html report."""
    report = out_dir / KRONAGRAM_NAME
    cmd = [settings.kt_import_text_bin, "-o", str(report)] + [str(p) for p in krona_files]
    result = runner.run(cmd)
    if not result.ok or (verify and not is_nonempty(report)):
        return StepResult.failure(
            "Something went wrong with running KronaTools to make kronagram. Exiting...", report
        )
    return StepResult.success(f"kronagram written to {report}", report)


def visualize_all(
    kraken2_files: Iterable[Path],
    out_dir: Path,
    *,
    settings: Settings,
    runner: ToolRunner,
    verify: bool = True,
) -> Path:
    summarised: List[Path] = [
        summarize_file(p, settings=settings, runner=runner, verify=verify).raise_for_failure().path
        for p in kraken2_files
    ]
    # all .krona files in out_dir, earlier runs' included
    krona_files = sorted(set(list_outputs(out_dir, KRONA_EXT)) | set(summarised))
    LOG.info("Building kronagram from %d krona file(s)", len(krona_files))
    return build_kronagram(
        krona_files, out_dir, settings=settings, runner=runner, verify=verify
    ).raise_for_failure().path
