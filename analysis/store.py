"""
analysis/store.py — PostgreSQL access for the analysis run.

Tables (db/schema.sql):
  units                (id, name, code)
  nps_metrics          (unit_id, week_start_date, nps_score, responses_count)
  data_sources         (id, filename, file_type, extraction_date, raw_text, created_at)
  qualitative_reports  (id, unit_id NULL for regional, source_id, report_date, ai_summary)

Every call runs in its own transaction (`with conn`): writes commit on their
own, so reports saved before a failure or a cancellation stay in the
database, and a failed query is rolled back instead of leaving the
connection in an aborted transaction.

Public API:
  PgStore(conn)   — ReportStore over a psycopg2 connection
  ReportStore     — protocol used by enrich_units() and AnalysisRunner
"""

from __future__ import annotations

import datetime as dt
from typing import Any, Protocol

import psycopg2.extras

from data_model.reports import NpsRow, SourceRow, UnitRow


class ReportStore(Protocol):
    def find_unit(self, code: str) -> UnitRow | None:
        ...

    def recent_nps(self, unit_id: str, limit: int = 2) -> list[NpsRow]:
        ...

    def save_report(
        self,
        unit_id: str | None,
        report_date: dt.date,
        summary: dict[str, Any],
        source_id: str | None = None,
    ) -> str:
        ...


def _iso(value: Any) -> str | None:
    if value is None:
        return None
    return value.isoformat() if hasattr(value, "isoformat") else str(value)


class PgStore:
    """ReportStore plus data-source bookkeeping over one psycopg2 connection."""

    def __init__(self, conn) -> None:
        self.conn = conn

    # -- units / metrics ----------------------------------------------------

    def find_unit(self, code: str) -> UnitRow | None:
        with self.conn, self.conn.cursor() as cur:
            cur.execute(
                "SELECT id, name, code FROM units WHERE upper(code) = %s",
                (code.upper(),),
            )
            row = cur.fetchone()
        if row is None:
            return None
        return UnitRow(id=str(row[0]), name=row[1], code=row[2].upper())

    def recent_nps(self, unit_id: str, limit: int = 2) -> list[NpsRow]:
        """Latest metric rows of a unit, newest week first."""
        with self.conn, self.conn.cursor() as cur:
            cur.execute(
                """
                SELECT nps_score, week_start_date, responses_count
                FROM nps_metrics
                WHERE unit_id = %s
                ORDER BY week_start_date DESC
                LIMIT %s
                """,
                (unit_id, limit),
            )
            rows = cur.fetchall()
        return [
            NpsRow(
                nps_score=float(r[0]) if r[0] is not None else None,
                week_start_date=_iso(r[1]) or "",
                responses_count=r[2] or 0,
            )
            for r in rows
        ]

    # -- reports ------------------------------------------------------------

    def save_report(
        self,
        unit_id: str | None,
        report_date: dt.date,
        summary: dict[str, Any],
        source_id: str | None = None,
    ) -> str:
        with self.conn, self.conn.cursor() as cur:
            cur.execute(
                """
                INSERT INTO qualitative_reports (unit_id, source_id, report_date, ai_summary)
                VALUES (%s, %s, %s, %s)
                RETURNING id
                """,
                (unit_id, source_id, report_date, psycopg2.extras.Json(summary)),
            )
            return str(cur.fetchone()[0])

    # -- data sources -------------------------------------------------------

    def save_source(
        self,
        filename: str,
        raw_text: str,
        extraction_date: dt.date | None = None,
    ) -> str:
        """Stores upload metadata with the verbatim extracted text."""
        with self.conn, self.conn.cursor() as cur:
            cur.execute(
                """
                INSERT INTO data_sources (filename, file_type, extraction_date, raw_text)
                VALUES (%s, 'pdf', %s, %s)
                RETURNING id
                """,
                (filename, extraction_date, raw_text),
            )
            return str(cur.fetchone()[0])

    def load_source(self, source_id: str) -> SourceRow | None:
        with self.conn, self.conn.cursor() as cur:
            cur.execute(
                """
                SELECT id, filename, extraction_date, created_at, raw_text
                FROM data_sources
                WHERE id = %s
                """,
                (source_id,),
            )
            row = cur.fetchone()
        if row is None:
            return None
        return SourceRow(
            id=str(row[0]),
            filename=row[1],
            extraction_date=_iso(row[2]),
            created_at=_iso(row[3]) or "",
            raw_text=row[4],
            text_length=len(row[4] or ""),
        )

    def list_sources(self, limit: int = 20) -> list[SourceRow]:
        with self.conn, self.conn.cursor() as cur:
            cur.execute(
                """
                SELECT id, filename, extraction_date, created_at, length(raw_text)
                FROM data_sources
                WHERE file_type = 'pdf'
                ORDER BY created_at DESC
                LIMIT %s
                """,
                (limit,),
            )
            rows = cur.fetchall()
        return [
            SourceRow(
                id=str(r[0]),
                filename=r[1],
                extraction_date=_iso(r[2]),
                created_at=_iso(r[3]) or "",
                text_length=r[4] or 0,
            )
            for r in rows
        ]
