"""Command: pulso sources — lists uploaded PDFs stored as data sources."""

from __future__ import annotations

import argparse

from rich.console import Console
from rich.table import Table
from rich import box

from analysis.store import PgStore
from pulso._db import get_connection

console = Console()


def run(args: argparse.Namespace) -> None:
    try:
        conn = get_connection()
    except Exception as e:
        console.print(f"[red]Database connection error:[/red] {e}")
        raise SystemExit(1)

    try:
        sources = PgStore(conn).list_sources(args.limit)
    finally:
        conn.close()

    if not sources:
        console.print("[yellow]No data sources.[/yellow]")
        return

    table = Table(
        box=box.SIMPLE_HEAD,
        show_header=True,
        header_style="bold white",
        row_styles=["", "dim"],
        expand=False,
    )
    table.add_column("ID",        style="cyan", no_wrap=True)
    table.add_column("FILE",      no_wrap=False, max_width=50)
    table.add_column("EXTRACTED", justify="center", no_wrap=True)
    table.add_column("UPLOADED",  no_wrap=True, style="dim")
    table.add_column("TEXT",      justify="right", no_wrap=True)

    for s in sources:
        table.add_row(
            s.id,
            s.filename,
            s.extraction_date or "-",
            s.created_at[:19],
            f"{s.text_length} chars" if s.text_length else "[yellow]no text[/yellow]",
        )

    console.print()
    console.print(table)
    console.print(f"  [dim]{len(sources)} sources[/dim]\n")


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "sources",
        help="Lists uploaded PDFs stored as data sources.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Lists the most recent PDF uploads in data_sources, newest first. Sources
with stored text can be reprocessed with `pulso analyze --source-id ID`.

Examples:
  pulso sources
  pulso sources --limit 50
        """,
    )
    p.add_argument(
        "--limit", "-n",
        type=int,
        default=20,
        metavar="N",
        help="Show at most N sources (default: 20).",
    )
    p.set_defaults(func=run)
