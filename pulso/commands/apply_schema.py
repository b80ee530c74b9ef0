"""Command: pulso apply-schema — applies db/schema.sql to the database."""

from __future__ import annotations

import argparse
import pathlib

from rich.console import Console

from pulso._db import get_connection

console = Console()

ROOT        = pathlib.Path(__file__).resolve().parent.parent.parent
SCHEMA_PATH = ROOT / "db" / "schema.sql"


def split_statements(sql: str) -> list[str]:
    """
    Splits SQL into single statements, keeping $$...$$ blocks whole.

    A statement ends with a semicolon at the end of a line (outside $$).
    Empty results are dropped.
    """
    stmts: list[str] = []
    buf:   list[str] = []
    in_dollar = False

    for line in sql.splitlines(keepends=True):
        buf.append(line)
        # Every $$ toggles dollar-quote mode
        if line.count("$$") % 2 == 1:
            in_dollar = not in_dollar
        # End of statement: line ends with ; outside a $$ block
        if not in_dollar and line.rstrip().endswith(";"):
            stmt = "".join(buf).strip()
            if stmt:
                stmts.append(stmt)
            buf = []

    remaining = "".join(buf).strip()
    if remaining:
        stmts.append(remaining)

    return stmts


def run(args: argparse.Namespace) -> None:
    if not SCHEMA_PATH.exists():
        console.print(f"[red]Schema file missing:[/red] {SCHEMA_PATH}")
        raise SystemExit(1)

    sql = SCHEMA_PATH.read_text(encoding="utf-8")

    try:
        conn = get_connection()
    except Exception as e:
        console.print(f"[red]Database connection error:[/red] {e}")
        raise SystemExit(1)

    # Each statement commits on its own; schema.sql is idempotent.
    conn.autocommit = True
    stmts = split_statements(sql)
    try:
        with conn.cursor() as cur:
            for stmt in stmts:
                cur.execute(stmt)
    except Exception as e:
        console.print(f"[red]Schema execution error:[/red] {e}")
        conn.close()
        raise SystemExit(1)

    conn.close()
    console.print(f"[green]Schema applied:[/green] {SCHEMA_PATH} ({len(stmts)} statements)")


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "apply-schema",
        help="Applies db/schema.sql to the database (idempotent).",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Runs db/schema.sql against the configured PostgreSQL database (PG* variables).

Every statement uses IF NOT EXISTS, so it is safe to run repeatedly.

Example:
  pulso apply-schema
        """,
    )
    p.set_defaults(func=run)
