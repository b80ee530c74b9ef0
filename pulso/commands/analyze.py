"""Command: pulso analyze — per-unit and regional AI reports for one export."""

from __future__ import annotations

import argparse
import datetime as dt
import signal
import threading
from pathlib import Path

import psycopg2
from rich.console import Console
from rich.table import Table
from rich import box

from data_model.reports import RunSummary, UnitContext, priority_for
from data_model.units import FeedbackDocument
from pulso.config import Settings

console = Console()


# ---------------------------------------------------------------------------
# Input: PDF or stored data source
# ---------------------------------------------------------------------------

def _load_document(args: argparse.Namespace, store) -> tuple[FeedbackDocument, str | None]:
    """Returns the processed document and the data_sources id it came from."""
    from pdf import DocumentParseError, process_pdf, process_text

    if args.source_id:
        source = store.load_source(args.source_id)
        if source is None:
            console.print(f"[red]No data source with id[/red] {args.source_id}")
            raise SystemExit(1)
        if not source.raw_text:
            console.print(f"[red]Data source {source.id} has no stored text; upload the PDF again.[/red]")
            raise SystemExit(1)
        console.print(f"Reprocessing [bold]{source.filename}[/bold] ({source.text_length} chars)")
        return process_text(source.raw_text), source.id

    pdf_path = Path(args.pdf_file)
    if not pdf_path.exists():
        console.print(f"[red]File does not exist:[/red] {pdf_path}")
        raise SystemExit(1)

    console.print(f"Extracting [bold]{pdf_path}[/bold] …")
    try:
        doc = process_pdf(pdf_path)
    except DocumentParseError as e:
        console.print(f"[red]Cannot read PDF:[/red] {e}")
        raise SystemExit(1)

    if args.dry_run or not doc.has_units:
        return doc, None
    source_id = store.save_source(pdf_path.name, doc.raw_text, args.report_date)
    return doc, source_id


def _prepare_units(args: argparse.Namespace, store) -> tuple[list[UnitContext], str | None] | None:
    """Document → registered units with NPS history; None when there is nothing to analyse."""
    from analysis import enrich_units

    doc, source_id = _load_document(args, store)
    if not doc.has_units:
        console.print("[yellow]No unit codes (SBRSP…) found in the document.[/yellow]")
        return None

    units, unknown = enrich_units(doc, store)
    if unknown:
        console.print(f"[yellow]Units not registered, ignored:[/yellow] {', '.join(unknown)}")
    if not units:
        console.print("[yellow]None of the units in the document is registered.[/yellow]")
        return None
    return units, source_id


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------

def _show_units(units: list[UnitContext], min_comments: int) -> None:
    table = Table(box=box.SIMPLE_HEAD, header_style="bold white", show_header=True)
    table.add_column("UNIT",     style="cyan", no_wrap=True)
    table.add_column("CODE",     style="dim", no_wrap=True)
    table.add_column("NPS",      justify="right")
    table.add_column("VAR",      justify="right", style="dim")
    table.add_column("COMMENTS", justify="right")
    table.add_column("PRIORITY", no_wrap=True)
    table.add_column("RUN",      no_wrap=True)
    for u in units:
        table.add_row(
            u.name[:40],
            u.code,
            f"{u.current_nps:.1f}" if u.current_nps is not None else "-",
            f"{u.nps_variation:+.1f}" if u.nps_variation is not None else "-",
            str(len(u.comments)),
            str(priority_for(u.current_nps)),
            "yes" if len(u.comments) >= min_comments else "[yellow]skip[/yellow]",
        )
    console.print(table)


def _print_summary(summary: RunSummary) -> None:
    console.print()
    if summary.cancelled:
        console.print("[yellow]Run cancelled by the operator.[/yellow]")

    status = (
        "[green]Done[/green]"
        if summary.skipped_count == 0
        else f"[yellow]Done, {summary.skipped_count} units skipped[/yellow]"
    )
    console.print(f"{status}: {summary.saved} unit reports saved")
    for skipped in summary.skipped:
        console.print(f"    [dim]- {skipped}[/dim]")

    if summary.regional_saved:
        console.print("[green]Regional report saved.[/green]")
    elif summary.regional_error:
        console.print(f"[red]Regional report failed:[/red] {summary.regional_error}")


# ---------------------------------------------------------------------------
# Command
# ---------------------------------------------------------------------------

def run(args: argparse.Namespace) -> None:
    from analysis import AnalysisRunner, PgStore, RunOptions
    from llm_query import GeminiClient
    from pulso._db import get_connection

    settings = Settings.from_env()
    min_comments = args.min_comments if args.min_comments is not None else settings.min_comments
    delay = args.delay if args.delay is not None else settings.call_delay

    try:
        conn = get_connection(settings)
    except Exception as e:
        console.print(f"[red]Database connection error:[/red] {e}")
        raise SystemExit(1)

    try:
        store = PgStore(conn)
        try:
            prepared = _prepare_units(args, store)
        except psycopg2.Error as e:
            console.print(f"[red]Database error:[/red] {e}")
            raise SystemExit(1)
        if prepared is None:
            return
        units, source_id = prepared

        _show_units(units, min_comments)

        if args.dry_run:
            console.print("[dim](--dry-run: not calling Gemini)[/dim]")
            return

        try:
            generator = GeminiClient.from_settings(settings, model=args.model)
        except ValueError as e:
            console.print(f"[red]{e}[/red]")
            raise SystemExit(1)

        cancel_event = threading.Event()

        def _on_sigint(signum, frame) -> None:
            if cancel_event.is_set():
                raise KeyboardInterrupt
            console.print("[yellow]Cancelling after the current unit (Ctrl+C again to abort).[/yellow]")
            cancel_event.set()

        def _on_unit_start(i: int, total: int, unit: UnitContext) -> None:
            console.print(
                f"[{i}/{total}] [bold cyan]{unit.name[:50]}[/bold cyan]"
                f"  {len(unit.comments)} comments"
            )

        runner = AnalysisRunner(
            generator,
            store,
            RunOptions(
                report_date=args.report_date,
                min_comments=min_comments,
                inter_call_delay=delay,
                source_id=source_id,
            ),
            cancel_event=cancel_event,
            on_unit_start=_on_unit_start,
        )

        previous = signal.signal(signal.SIGINT, _on_sigint)
        try:
            summary = runner.run(units)
        finally:
            signal.signal(signal.SIGINT, previous)
    finally:
        conn.close()

    _print_summary(summary)


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "analyze",
        help="Generates per-unit and regional AI reports.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Extracts comments per unit, joins them with the unit's NPS history and asks
Gemini for a report per unit plus one regional report. Reports are saved to
qualitative_reports. Ctrl+C stops after the unit being analysed.

Examples:
  pulso analyze relatorio.pdf
  pulso analyze relatorio.pdf --dry-run
  pulso analyze --source-id 7c0e… --report-date 2025-01-06
  pulso analyze relatorio.pdf --min-comments 5 --delay 3 --model gemini-2.5-pro
        """,
    )
    src = p.add_mutually_exclusive_group(required=True)
    src.add_argument(
        "pdf_file",
        metavar="FILE.pdf",
        nargs="?",
        help="Path to the PDF file.",
    )
    src.add_argument(
        "--source-id",
        metavar="ID",
        help="Reprocess the raw text of a stored data source.",
    )
    p.add_argument(
        "--report-date",
        type=dt.date.fromisoformat,
        metavar="YYYY-MM-DD",
        default=dt.date.today(),
        help="Date the reports are filed under (default: today).",
    )
    p.add_argument(
        "--min-comments",
        type=int,
        metavar="N",
        default=None,
        help="Skip units with fewer than N comments (default: PULSO_MIN_COMMENTS or 3).",
    )
    p.add_argument(
        "--delay",
        type=float,
        metavar="SEC",
        default=None,
        help="Delay in seconds between unit calls (default: PULSO_CALL_DELAY or 1.0).",
    )
    p.add_argument(
        "--model", "-m",
        metavar="MODEL",
        help="Gemini model (default: GEMINI_MODEL or gemini-2.5-flash).",
    )
    p.add_argument(
        "--dry-run",
        action="store_true",
        help="Show the units that would be analysed, do not call Gemini.",
    )
    p.set_defaults(func=run)
