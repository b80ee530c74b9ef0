"""
pulso — CLI for the survey-feedback pipeline.

Usage:
  pulso [--verbose] <command> [options]

Commands:
  extract       Extracts per-unit comments from a survey-export PDF.
  analyze       Generates per-unit and regional AI reports from a PDF or a stored source.
  sources       Lists uploaded PDFs stored as data sources.
  apply-schema  Applies db/schema.sql to the database (idempotent).
  reset         Deletes pipeline-written rows (reports / sources / all).
"""

from __future__ import annotations

import argparse
import logging
import sys

from rich.logging import RichHandler

from pulso import __version__
from pulso.commands import analyze as cmd_analyze
from pulso.commands import apply_schema as cmd_apply_schema
from pulso.commands import extract as cmd_extract
from pulso.commands import reset as cmd_reset
from pulso.commands import sources as cmd_sources


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=verbose)],
        force=True,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pulso",
        description="Pulso — survey feedback to AI reports.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version", action="version", version=f"pulso {__version__}"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Log at DEBUG level (default: warnings only).",
    )

    subparsers = parser.add_subparsers(
        title="commands",
        metavar="<command>",
        dest="command",
    )
    subparsers.required = True

    cmd_extract.add_parser(subparsers)
    cmd_analyze.add_parser(subparsers)
    cmd_sources.add_parser(subparsers)
    cmd_apply_schema.add_parser(subparsers)
    cmd_reset.add_parser(subparsers)

    return parser


def main(argv: list[str] | None = None) -> None:
    # Windows: the terminal may use cp1252; force UTF-8 so Portuguese text in
    # comments and help strings prints correctly.
    for stream in (sys.stdout, sys.stderr):
        if hasattr(stream, "reconfigure"):
            stream.reconfigure(encoding="utf-8", errors="replace")

    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)
    args.func(args)


if __name__ == "__main__":
    main()
