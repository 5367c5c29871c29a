# src/krakenwrap/cli.py
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import NoReturn, Optional, Sequence

from krakenwrap import __version__
from krakenwrap.config.load import load_settings
from krakenwrap.errors import InvocationError, NoInputsError, PipelineError
from krakenwrap.pipeline.run import Pipeline
from krakenwrap.pipeline.subsample import parse_depth
from krakenwrap.pipeline.types import RunOptions
from krakenwrap.utils.logger import comment, error, get_logger, setup_logger

LOG = get_logger("cli")

EXIT_FAILURE = 1

DESCRIPTION = "Run on any number of fasta assembly files and/or or paired-end reads."
EPILOG = (
    "Note: you may pass any number of sequence files with the following extensions: "
    "*.fa *.fasta (assumed to be assembly files) or *_1.fastq.gz and *_2.fastq.gz "
    "(assumed to be paired)"
)


class _HelpOnErrorParser(argparse.ArgumentParser):
    """Print the full help and exit 1 on any usage error."""

    def error(self, message: str) -> NoReturn:
        self.print_help(sys.stderr)
        self.exit(EXIT_FAILURE, f"\n{self.prog}: error: {message}\n")


def _depth(value: str):
    try:
        return parse_depth(value)
    except InvocationError as e:
        raise argparse.ArgumentTypeError(str(e)) from None


def _positive_int(value: str) -> int:
    try:
        n = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected an integer, got {value!r}") from None
    if n < 1:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {n}")
    return n


def build_parser() -> argparse.ArgumentParser:
    p = _HelpOnErrorParser(
        prog="krakenwrap",
        usage="%(prog)s [options] -o output_dir assembly.fasta reads_1.fastq.gz reads_2.fastq.gz ...",
        description=DESCRIPTION,
        epilog=EPILOG,
        add_help=False,
    )
    p.add_argument("inputs", nargs="*", type=Path, metavar="FILE",
                   help="Assemblies (*.fa, *.fasta) and/or paired reads (*_1.fastq.gz, *_2.fastq.gz).")
    p.add_argument("-o", "--out", dest="out", type=Path, default=None, help="output directory")
    p.add_argument("-t", "--threads", type=_positive_int, default=1, help="number of threads")
    p.add_argument("-s", "--subsample", dest="depth", type=_depth, default=None, metavar="INT",
                   help="read subsampling number (default=all)")
    p.add_argument("--no-preload", dest="preload", action="store_false",
                   help="do not pre-load the kraken2 DB into memory (slower, but lower memory requirement)")
    p.set_defaults(preload=True)
    p.add_argument("--seed", type=int, default=None, help="random seed for -s subsampling")
    p.add_argument("--config", type=Path, default=None,
                   help="Config file with KRAKEN2_DB and SOFT (default: config-metawrap on PATH).")
    p.add_argument("--dry-run", action="store_true", help="Print commands without executing them.")
    p.add_argument("--show-tools", dest="show_tools", action="store_true",
                   help="Stream tool output live to console (default).")
    p.add_argument("--no-show-tools", dest="show_tools", action="store_false",
                   help="Capture tool output (printed on error).")
    p.set_defaults(show_tools=True)
    p.add_argument("-h", "--help", action="store_true", help="show this help message and exit")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return p


def main(argv: Optional[Sequence[str]] = None) -> None:
    logger = setup_logger()
    parser = build_parser()
    args = parser.parse_args(argv)
    logger.debug("Parsed args: %r", args)

    if args.help or args.out is None or not args.inputs:
        parser.print_help(sys.stderr)
        sys.exit(EXIT_FAILURE)

    options = RunOptions(
        out_dir=args.out,
        threads=args.threads,
        depth=args.depth,
        preload=args.preload,
        seed=args.seed,
        dry_run=args.dry_run,
        show_tools=args.show_tools,
    )

    try:
        settings = load_settings(args.config)
        Pipeline(settings, options).run(args.inputs)
    except NoInputsError as e:
        comment(str(e))
        parser.print_help(sys.stderr)
        sys.exit(EXIT_FAILURE)
    except PipelineError as e:
        error(str(e))
        sys.exit(EXIT_FAILURE)
