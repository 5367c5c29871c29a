# src/krakenwrap/pipeline/run.py
from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from krakenwrap.config.schema import Settings
from krakenwrap.errors import NoInputsError
from krakenwrap.pipeline.classify import NO_INPUTS_MESSAGE, classify_all, find_classification_outputs
from krakenwrap.pipeline.dispatch import dispatch_inputs
from krakenwrap.pipeline.translate import translate_all
from krakenwrap.pipeline.types import InputUnit, RunOptions, Stage
from krakenwrap.pipeline.visualize import visualize_all
from krakenwrap.utils.files import KRAK2_EXT, KRAKEN2_EXT, list_outputs, sample_output
from krakenwrap.utils.logger import announcement, get_logger, success, warning
from krakenwrap.utils.runner import ToolRunner

LOG = get_logger("pipeline")


def prepare_output_dir(out_dir: Path, *, dry_run: bool = False) -> None:
    if out_dir.is_dir():
        warning(f"Warning: {out_dir} already exists.")
        return
    if dry_run:
        LOG.info("[dry-run] would create %s", out_dir)
        return
    out_dir.mkdir(parents=True)


class Pipeline:
    """
    kraken2 -> kraken2_translate.py -> kraken_to_krona.py -> ktImportText.

    Stages run strictly in order and one external process at a time.
    Any PipelineError leaves `stage` at FAILED and propagates to the caller.
    """

    def __init__(
        self,
        settings: Settings,
        options: RunOptions,
        runner: Optional[ToolRunner] = None,
    ) -> None:
        self.settings = settings
        self.options = options
        self.runner = runner or ToolRunner(dry_run=options.dry_run, show_output=options.show_tools)
        self.stage = Stage.INIT
        self.units: List[InputUnit] = []

    def _enter(self, stage: Stage) -> None:
        LOG.debug("stage %s -> %s", self.stage.value, stage.value)
        self.stage = stage

    def run(self, inputs: Iterable[Path]) -> Path:
        try:
            self.settings.validate_paths()
            self._enter(Stage.DISPATCH)
            self.units = dispatch_inputs(inputs)

            self._enter(Stage.CLASSIFY)
            krak2_files = self.classify()

            self._enter(Stage.TRANSLATE)
            kraken2_files = self.translate(krak2_files)

            self._enter(Stage.VISUALIZE)
            report = self.visualize(kraken2_files)
        except Exception:
            self._enter(Stage.FAILED)
            raise

        self._enter(Stage.DONE)
        announcement("FINISHED RUNNING KRAKEN2 PIPELINE!!!")
        success(f"Kronagram ready → {report}")
        return report

    # -------- stages ------------------------------------------------------

    def classify(self) -> List[Path]:
        announcement("RUNNING KRAKEN ON ALL FILES")
        out_dir = self.options.out_dir
        prepare_output_dir(out_dir, dry_run=self.options.dry_run)
        classify_all(self.units, settings=self.settings, runner=self.runner, options=self.options)
        if self.options.dry_run:
            if not self.units:
                raise NoInputsError(NO_INPUTS_MESSAGE)
            return [sample_output(out_dir, u.sample, KRAK2_EXT) for u in self.units]
        return find_classification_outputs(out_dir)

    def translate(self, krak2_files: Sequence[Path]) -> List[Path]:
        announcement("RUNNING KRAKEN-TRANSLATE ON OUTPUT")
        translated = translate_all(krak2_files, settings=self.settings, runner=self.runner)
        if self.options.dry_run:
            return translated
        return list_outputs(self.options.out_dir, KRAKEN2_EXT)

    def visualize(self, kraken2_files: Sequence[Path]) -> Path:
        announcement("MAKING KRONAGRAM OF ALL FILES")
        return visualize_all(
            kraken2_files,
            self.options.out_dir,
            settings=self.settings,
            runner=self.runner,
            verify=not self.options.dry_run,
        )
