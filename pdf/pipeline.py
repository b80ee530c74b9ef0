"""
pdf/pipeline.py — PDF → per-unit comments and surveys.

  extract_text() → segment_units() → extract_unit() per span → FeedbackDocument

process_text() starts from stored raw text, so a document can be
reprocessed without the original PDF.
"""

from __future__ import annotations

import logging
from pathlib import Path

from data_model.units import (
    Comment,
    ExtractionStrategy,
    FeedbackDocument,
    SurveyRecord,
    UnitCode,
)
from pdf.comments import extract_unit
from pdf.extractor import extract_text
from pdf.segmenter import segment_units

log = logging.getLogger(__name__)


def process_text(
    raw_text: str,
    strategy: ExtractionStrategy = ExtractionStrategy.AUTO,
) -> FeedbackDocument:
    doc = FeedbackDocument(raw_text=raw_text)
    for span in segment_units(raw_text):
        extraction = extract_unit(span, strategy)
        doc.units[span.unit_code] = extraction
        log.debug(
            "%s: %d comments, %d surveys (%s)",
            span.unit_code, len(extraction.comments), len(extraction.surveys), extraction.strategy,
        )
    return doc


def process_pdf(
    source: bytes | str | Path,
    strategy: ExtractionStrategy = ExtractionStrategy.AUTO,
) -> FeedbackDocument:
    """Raises DocumentParseError when the PDF cannot be read."""
    return process_text(extract_text(source), strategy)


def comments_by_unit(doc: FeedbackDocument) -> dict[UnitCode, list[Comment]]:
    return {code: u.comments for code, u in doc.units.items()}


def surveys_by_unit(doc: FeedbackDocument) -> dict[UnitCode, list[SurveyRecord]]:
    return {code: u.surveys for code, u in doc.units.items()}
