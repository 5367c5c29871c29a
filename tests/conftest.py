import gzip
import pathlib
from typing import List, Optional, Sequence

import pytest

from krakenwrap.config.schema import KRONA_SCRIPT, TRANSLATE_SCRIPT, Settings
from krakenwrap.pipeline.types import RunOptions
from krakenwrap.utils.runner import CommandResult


def fastq_records(prefix: str, n: int) -> List[str]:
    return [f"@{prefix}{i}\nACGTACGT\n+\nIIIIIIII\n" for i in range(n)]


def write_fastq_gz(path: pathlib.Path, records: Sequence[str]) -> pathlib.Path:
    with gzip.open(path, "wt", encoding="utf-8") as fh:
        fh.writelines(records)
    return path


def read_fastq_headers(path: pathlib.Path) -> List[str]:
    with gzip.open(path, "rt", encoding="utf-8") as fh:
        lines = fh.read().splitlines()
    return lines[0::4]


class FakeRunner:
    """
    Stand-in for ToolRunner: records every command and writes the files
    kraken2 / the helper scripts / ktImportText would have produced.
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self.calls: List[List[str]] = []
        self.fail_on: Optional[str] = None      # tool name returning exit 1
        self.empty_output_for: Optional[str] = None  # tool name leaving an empty file

    def tool_of(self, cmd: Sequence[str]) -> str:
        exe = cmd[0]
        if exe == self.settings.kraken2_bin:
            return "kraken2"
        if exe == str(self.settings.translate_script):
            return "translate"
        if exe == str(self.settings.krona_script):
            return "krona"
        if exe == self.settings.kt_import_text_bin:
            return "ktImportText"
        raise AssertionError(f"unexpected command {cmd}")

    def calls_for(self, tool: str) -> List[List[str]]:
        return [c for c in self.calls if self.tool_of(c) == tool]

    def run(self, cmd, *, stdout_path=None) -> CommandResult:
        cmd = [str(c) for c in cmd]
        self.calls.append(cmd)
        tool = self.tool_of(cmd)
        if tool == self.fail_on:
            return CommandResult(cmd, 1)
        content = "" if tool == self.empty_output_for else f"{tool} output\n"

        if tool == "kraken2":
            pathlib.Path(cmd[cmd.index("--report") + 1]).write_text(content)
            pathlib.Path(cmd[cmd.index("--output") + 1]).write_text(content)
        elif tool == "translate":
            pathlib.Path(cmd[3]).write_text(content)
        elif tool == "krona":
            pathlib.Path(stdout_path).write_text(content)
        elif tool == "ktImportText":
            pathlib.Path(cmd[cmd.index("-o") + 1]).write_text(content)
        return CommandResult(cmd, 0)


@pytest.fixture
def settings(tmp_path: pathlib.Path) -> Settings:
    db = tmp_path / "kraken2_db"
    db.mkdir()
    soft = tmp_path / "scripts"
    soft.mkdir()
    (soft / TRANSLATE_SCRIPT).write_text("#!/usr/bin/env python\n")
    (soft / KRONA_SCRIPT).write_text("#!/usr/bin/env python\n")
    return Settings(kraken2_db=db, soft=soft)


@pytest.fixture
def fake_runner(settings: Settings) -> FakeRunner:
    return FakeRunner(settings)


@pytest.fixture
def out_dir(tmp_path: pathlib.Path) -> pathlib.Path:
    return tmp_path / "out"


@pytest.fixture
def options(out_dir: pathlib.Path) -> RunOptions:
    return RunOptions(out_dir=out_dir)


@pytest.fixture
def reads_dir(tmp_path: pathlib.Path) -> pathlib.Path:
    d = tmp_path / "reads"
    d.mkdir()
    return d


@pytest.fixture
def paired_reads(reads_dir: pathlib.Path):
    r1 = write_fastq_gz(reads_dir / "S1_1.fastq.gz", fastq_records("r", 10))
    r2 = write_fastq_gz(reads_dir / "S1_2.fastq.gz", fastq_records("r", 10))
    return r1, r2


@pytest.fixture
def assembly(reads_dir: pathlib.Path) -> pathlib.Path:
    p = reads_dir / "contigs.fasta"
    p.write_text(">c1\nACGT\n")
    return p
