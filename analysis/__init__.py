"""
analysis — joins extracted units with the database and runs the AI reports.

Public API:
  enrich_units(doc, store)                           -> (list[UnitContext], missing codes)
  AnalysisRunner(generator, store, options).run(units) -> RunSummary
  PgStore(conn)                                      — psycopg2-backed ReportStore
"""

from .store import PgStore, ReportStore
from .enrich import enrich_unit, enrich_units
from .runner import AnalysisRunner, RunOptions, UnitAnalysisFailed

__all__ = [
    "PgStore",
    "ReportStore",
    "enrich_unit",
    "enrich_units",
    "AnalysisRunner",
    "RunOptions",
    "UnitAnalysisFailed",
]
