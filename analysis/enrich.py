"""
analysis/enrich.py — joins extracted units with their database rows.

For every unit of the document: look up units.code, then the two latest
nps_metrics rows (current and previous week). Codes with no units row are
reported back and left out of the analysis.
"""

from __future__ import annotations

import logging

from analysis.store import ReportStore
from data_model.reports import UnitContext
from data_model.units import FeedbackDocument, UnitExtraction

log = logging.getLogger(__name__)


def enrich_unit(extraction: UnitExtraction, store: ReportStore) -> UnitContext | None:
    row = store.find_unit(extraction.unit_code)
    if row is None:
        return None

    metrics = store.recent_nps(row.id, limit=2)
    current = metrics[0].nps_score if metrics else None
    previous = metrics[1].nps_score if len(metrics) > 1 else None
    variation = current - previous if current is not None and previous is not None else None

    return UnitContext(
        unit_id=row.id,
        code=row.code,
        name=row.name,
        comments=list(extraction.comments),
        surveys=list(extraction.surveys),
        current_nps=current,
        previous_nps=previous,
        nps_variation=variation,
        feedback_count=metrics[0].responses_count if metrics else 0,
    )


def enrich_units(
    doc: FeedbackDocument,
    store: ReportStore,
) -> tuple[list[UnitContext], list[str]]:
    """
    Returns (units found in the database, codes that are not registered).

    Order follows the first occurrence of each code in the document.
    """
    units: list[UnitContext] = []
    unknown: list[str] = []
    for code, extraction in doc.units.items():
        unit = enrich_unit(extraction, store)
        if unit is None:
            log.warning("Unit %s not found in the units table", code)
            unknown.append(code)
            continue
        units.append(unit)
    return units, unknown
