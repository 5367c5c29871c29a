# src/krakenwrap/errors.py
from __future__ import annotations


class PipelineError(Exception):
    """Fatal pipeline failure; the CLI reports it and exits 1."""


class ConfigError(PipelineError):
    """Config file, scripts folder, helper script or kraken2 database missing."""


class InvocationError(PipelineError):
    """Malformed command-line value (e.g. a bad -s depth)."""


class InputError(PipelineError):
    """An input file (or its paired mate) is missing, empty or truncated."""


class ExecutionError(PipelineError):
    """An external tool failed or left an empty/missing output."""


class NoInputsError(PipelineError):
    """Nothing was classified: no recognised reads or assemblies."""
