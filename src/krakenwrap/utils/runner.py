# src/krakenwrap/utils/runner.py
from __future__ import annotations

import os
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Mapping, Optional, Sequence

from krakenwrap.utils.logger import get_logger

LOG = get_logger("runner")

# exit status a shell reports for an executable missing from PATH
EXIT_NOT_FOUND = 127


def run_command(
    cmd: Sequence[str],
    *,
    dry_run: bool = False,
    capture: bool = False,
    check: bool = True,
    stdout_path: Optional[Path] = None,
    cwd: Optional[Path] = None,
    env: Optional[Mapping[str, str]] = None,
) -> subprocess.CompletedProcess[str]:
    """
    Execute a subprocess with unified logging and error handling.

    - Logs the exact command line (with `> file` when stdout is redirected).
    - Respects dry_run (no execution).
    - capture=False streams output; capture=True buffers output.
    - stdout_path writes the child's stdout to that file instead.
    - Merges provided env with the current process environment (preserves PATH).
    - check=True raises CalledProcessError on failure (after logging stdout/stderr);
      check=False hands back the CompletedProcess whatever the exit status.
    """
    shown = " ".join(str(c) for c in cmd)
    if stdout_path is not None:
        shown += f" > {stdout_path}"
    LOG.info("Running: %s", shown)
    if dry_run:
        LOG.debug("[dry-run] command not executed")
        return subprocess.CompletedProcess(list(cmd), 0, "", "")

    # Merge env with current environment so PATH and friends are preserved
    env_dict = os.environ.copy()
    if env:
        env_dict.update({str(k): str(v) for k, v in env.items()})

    try:
        if stdout_path is not None:
            with Path(stdout_path).open("w", encoding="utf-8") as out_fh:
                result = subprocess.run(
                    [str(c) for c in cmd],
                    check=check,
                    cwd=str(cwd) if cwd else None,
                    env=env_dict,
                    text=True,
                    stdout=out_fh,
                    stderr=subprocess.PIPE if capture else None,
                )
        else:
            result = subprocess.run(
                [str(c) for c in cmd],
                check=check,
                cwd=str(cwd) if cwd else None,
                env=env_dict,
                text=True,
                capture_output=capture,
            )
    except FileNotFoundError:
        # Typically means the executable (e.g., 'kraken2') is not on PATH
        LOG.error("Executable not found: %s (PATH=%s)", cmd[0], env_dict.get("PATH", ""))
        raise
    except subprocess.CalledProcessError as e:
        _log_failure(e.returncode, e.stdout, e.stderr)
        raise

    if result.returncode != 0:
        _log_failure(result.returncode, result.stdout, result.stderr)
        return result

    LOG.info("Command completed successfully.")
    if capture and result.stdout:
        LOG.debug("Captured STDOUT:\n%s", result.stdout.strip())
    return result


def _log_failure(returncode: int, stdout: Optional[str], stderr: Optional[str]) -> None:
    if stdout:
        LOG.error("STDOUT:\n%s", stdout.strip())
    if stderr:
        LOG.error("STDERR:\n%s", stderr.strip())
    LOG.error("Command failed with exit code %s", returncode)


@dataclass(frozen=True)
class CommandResult:
    cmd: List[str]
    returncode: int

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class ToolRunner:
    """
    Runs external tools one at a time and reports their exit status.

    Pipeline stages receive an instance rather than calling subprocess
    themselves, so tests can hand in a fake that writes the expected
    output files instead of invoking kraken2 or KronaTools.
    """

    def __init__(self, *, dry_run: bool = False, show_output: bool = True) -> None:
        self.dry_run = dry_run
        self.show_output = show_output

    def run(self, cmd: Sequence[str], *, stdout_path: Optional[Path] = None) -> CommandResult:
        argv = [str(c) for c in cmd]
        try:
            proc = run_command(
                argv,
                dry_run=self.dry_run,
                capture=not self.show_output,
                check=False,
                stdout_path=stdout_path,
            )
        except FileNotFoundError:
            return CommandResult(argv, EXIT_NOT_FOUND)
        return CommandResult(argv, proc.returncode)
