"""Command: pulso extract — survey-export PDF to per-unit comments."""

from __future__ import annotations

import argparse
import datetime as dt
import json
from dataclasses import asdict
from pathlib import Path

import psycopg2
from rich.console import Console
from rich.table import Table
from rich import box

from data_model.units import ExtractionStrategy, FeedbackDocument

console = Console()


# ---------------------------------------------------------------------------
# JSON output
# ---------------------------------------------------------------------------

def document_to_json(doc: FeedbackDocument, with_surveys: bool = False) -> dict:
    units = []
    for code, extraction in doc.units.items():
        entry = {
            "unit_code":   code,
            "occurrences": extraction.span.occurrences,
            "strategy":    str(extraction.strategy),
            "comments":    list(extraction.comments),
        }
        if with_surveys:
            entry["surveys"] = [asdict(s) for s in extraction.surveys]
        units.append(entry)
    return {"text_length": len(doc.raw_text), "units": units}


def _write_json(doc: FeedbackDocument, json_path: Path, with_surveys: bool) -> None:
    data = document_to_json(doc, with_surveys)
    json_path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
    console.print(f"[green]JSON:[/green] {json_path}  ({len(doc.units)} units)")


# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------

def _write_db(doc: FeedbackDocument, filename: str, extraction_date: dt.date | None) -> None:
    from analysis.store import PgStore
    from pulso._db import get_connection

    try:
        conn = get_connection()
    except Exception as e:
        console.print(f"[red]Database connection error:[/red] {e}")
        raise SystemExit(1)

    try:
        source_id = PgStore(conn).save_source(filename, doc.raw_text, extraction_date)
    except psycopg2.Error as e:
        console.print(f"[red]Database error:[/red] {e}")
        raise SystemExit(1)
    finally:
        conn.close()

    console.print(f"[green]DB:[/green] data source [cyan]{source_id}[/cyan] ({len(doc.raw_text)} chars)")


# ---------------------------------------------------------------------------
# Terminal table
# ---------------------------------------------------------------------------

def _show_table(doc: FeedbackDocument) -> None:
    table = Table(
        box=box.SIMPLE_HEAD,
        show_header=True,
        header_style="bold white",
        row_styles=["", "dim"],
        expand=False,
    )
    table.add_column("UNIT",      no_wrap=True, style="bold cyan")
    table.add_column("OCC",       justify="right", no_wrap=True, style="dim")
    table.add_column("STRATEGY",  no_wrap=True)
    table.add_column("COMMENTS",  justify="right", no_wrap=True)
    table.add_column("SURVEYS",   justify="right", no_wrap=True)
    table.add_column("FIRST COMMENT", no_wrap=False, max_width=60)

    for code, extraction in doc.units.items():
        first = extraction.comments[0] if extraction.comments else "-"
        table.add_row(
            code,
            str(extraction.span.occurrences),
            str(extraction.strategy),
            str(len(extraction.comments)),
            str(len(extraction.surveys)),
            first[:80],
        )

    console.print()
    console.print(table)
    total = sum(len(u.comments) for u in doc.units.values())
    console.print(f"  [dim]{len(doc.units)} units, {total} comments[/dim]\n")


# ---------------------------------------------------------------------------
# Command
# ---------------------------------------------------------------------------

def run(args: argparse.Namespace) -> None:
    from pdf import DocumentParseError, process_pdf

    pdf_path = Path(args.pdf_file)
    if not pdf_path.exists():
        console.print(f"[red]File does not exist:[/red] {pdf_path}")
        raise SystemExit(1)
    if pdf_path.suffix.lower() != ".pdf":
        console.print(f"[red]Expected a .pdf file, got:[/red] {pdf_path.suffix}")
        raise SystemExit(1)

    console.print(f"Extracting [bold]{pdf_path}[/bold] (strategy=[cyan]{args.strategy}[/cyan]) …")

    try:
        doc = process_pdf(pdf_path, ExtractionStrategy(args.strategy))
    except DocumentParseError as e:
        console.print(f"[red]Cannot read PDF:[/red] {e}")
        raise SystemExit(1)

    if not doc.has_units:
        console.print("[yellow]No unit codes (SBRSP…) found in the document.[/yellow]")
        return

    console.print(f"Found [bold]{len(doc.units)}[/bold] units.")

    out = args.out  # "json" | "db" | "both" | "none"

    if out in ("json", "both"):
        _write_json(doc, pdf_path.with_suffix(".units.json"), args.surveys)

    if out in ("db", "both"):
        _write_db(doc, pdf_path.name, args.extraction_date)

    if args.show:
        _show_table(doc)


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "extract",
        help="Extracts per-unit comments from a survey-export PDF.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Reads a survey-export PDF, splits the text by unit code (SBRSP…) and
extracts the sanitized customer comments of every unit.

Examples:
  pulso extract relatorio.pdf --show
  pulso extract relatorio.pdf --strategy heuristic
  pulso extract relatorio.pdf --out both --extraction-date 2025-01-06
  pulso extract relatorio.pdf --surveys --out json
        """,
    )
    p.add_argument(
        "pdf_file",
        metavar="FILE.pdf",
        help="Path to the PDF file.",
    )
    p.add_argument(
        "--strategy",
        choices=[s.value for s in ExtractionStrategy],
        default=ExtractionStrategy.AUTO.value,
        help="Comment location strategy (default: auto).",
    )
    p.add_argument(
        "--out",
        choices=["json", "db", "both", "none"],
        default="json",
        help="Write to: json (<file>.units.json), db (data source), both or none (default: json).",
    )
    p.add_argument(
        "--show",
        action="store_true",
        help="Print a table of units in the terminal.",
    )
    p.add_argument(
        "--surveys",
        action="store_true",
        help="Include the per-respondent survey records in the JSON.",
    )
    p.add_argument(
        "--extraction-date",
        type=dt.date.fromisoformat,
        metavar="YYYY-MM-DD",
        default=None,
        help="Extraction date stored with the data source.",
    )
    p.set_defaults(func=run)
