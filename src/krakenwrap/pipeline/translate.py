# src/krakenwrap/pipeline/translate.py
from __future__ import annotations

from pathlib import Path
from typing import Iterable, List

from krakenwrap.config.schema import Settings
from krakenwrap.pipeline.types import StepResult
from krakenwrap.utils.files import KRAKEN2_EXT, with_suffix
from krakenwrap.utils.logger import comment, get_logger
from krakenwrap.utils.runner import ToolRunner

LOG = get_logger("translate")


def translate_file(krak2: Path, *, settings: Settings, runner: ToolRunner) -> StepResult:
    """kraken2 per-read output -> <sample>.kraken2 taxonomic lineages."""
    comment(f"Translating {krak2}")
    target = with_suffix(krak2, KRAKEN2_EXT)
    cmd = [str(settings.translate_script), str(settings.kraken2_db), str(krak2), str(target)]
    if not runner.run(cmd).ok:
        return StepResult.failure("Something went wrong with running kraken-translate... Exiting.", krak2)
    return StepResult.success(f"translated {krak2.name}", target)


def translate_all(krak2_files: Iterable[Path], *, settings: Settings, runner: ToolRunner) -> List[Path]:
    return [
        translate_file(p, settings=settings, runner=runner).raise_for_failure().path
        for p in krak2_files
    ]
