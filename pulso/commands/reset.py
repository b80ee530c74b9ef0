"""Command: pulso reset — deletes rows written by the pipeline."""

from __future__ import annotations

import argparse

from rich.console import Console

from pulso._db import get_connection

console = Console()


def _table_exists(cur, table: str) -> bool:
    cur.execute(
        """
        SELECT 1 FROM information_schema.tables
        WHERE table_schema = 'public' AND table_name = %s
        """,
        (table,),
    )
    return cur.fetchone() is not None


def _reset_reports(cur) -> None:
    if not _table_exists(cur, "qualitative_reports"):
        console.print("[yellow]Table [bold]qualitative_reports[/bold] does not exist, skipped.[/yellow]")
        return
    cur.execute("DELETE FROM qualitative_reports")
    console.print(f"[green]Deleted {cur.rowcount} rows from [bold]qualitative_reports[/bold][/green]")


def _reset_sources(cur) -> None:
    # nps_metrics rows imported from CSV sources are left alone
    if not _table_exists(cur, "data_sources"):
        console.print("[yellow]Table [bold]data_sources[/bold] does not exist, skipped.[/yellow]")
        return
    cur.execute("DELETE FROM data_sources WHERE file_type = 'pdf'")
    console.print(f"[green]Deleted {cur.rowcount} PDF rows from [bold]data_sources[/bold][/green]")


def run(args: argparse.Namespace) -> None:
    target: str = args.target

    try:
        conn = get_connection()
    except Exception as e:
        console.print(f"[red]Database connection error:[/red] {e}")
        raise SystemExit(1)

    try:
        with conn, conn.cursor() as cur:
            if target in ("reports", "all"):
                _reset_reports(cur)
            if target in ("sources", "all"):
                _reset_sources(cur)
    finally:
        conn.close()


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "reset",
        help="Deletes pipeline-written rows (no confirmation).",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Deletes rows written by the pipeline. Runs immediately, without confirmation.

Targets:
  reports   All AI reports (qualitative_reports).
  sources   Uploaded PDFs (data_sources with file_type 'pdf'); their reports
            go with them (ON DELETE CASCADE).
  all       Both of the above.

Examples:
  pulso reset reports
  pulso reset all
        """,
    )
    p.add_argument(
        "target",
        metavar="TARGET",
        choices=["reports", "sources", "all"],
        help="What to delete: reports | sources | all",
    )
    p.set_defaults(func=run)
