"""
pdf — survey-export PDF feedback extraction.

Public API:
  extract_text(source)                 -> str
  segment_units(text)                  -> list[UnitSpan]
  split_text_by_unit(text)             -> dict[str, str]
  extract_unit(span, strategy)         -> UnitExtraction
  extract_comments(text, strategy)     -> list[str]
  extract_surveys(text, unit_code)     -> list[SurveyRecord]
  sanitize_comments(candidates)        -> list[str]
  process_pdf(source, strategy)        -> FeedbackDocument
  process_text(raw_text, strategy)     -> FeedbackDocument
"""

from .extractor import DocumentParseError, extract_text
from .segmenter import normalise_unit_code, segment_units, split_text_by_unit
from .comments import extract_comments, extract_surveys, extract_unit
from .sanitizer import sanitize_comments
from .pipeline import comments_by_unit, process_pdf, process_text, surveys_by_unit

__all__ = [
    "DocumentParseError",
    "extract_text",
    "normalise_unit_code",
    "segment_units",
    "split_text_by_unit",
    "extract_comments",
    "extract_surveys",
    "extract_unit",
    "sanitize_comments",
    "comments_by_unit",
    "process_pdf",
    "process_text",
    "surveys_by_unit",
]
