"""
data_model/units.py — per-unit artifacts derived from a survey-export PDF.

UnitSpan is the slice of the document text attributed to one unit code;
UnitExtraction holds what the survey/comment extractor found in that slice.
All of these are recomputed from the raw text on every run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

# ---------------------------------------------------------------------------
# Type aliases
# ---------------------------------------------------------------------------

# Pattern: ^SBRSP[A-Z0-9]+$, always stored uppercase, e.g. "SBRSPCBNF01"
type UnitCode = str

# A sanitized free-text comment (> 10 chars, not numeric, not a bare label).
type Comment = str

# Rendered in place of a missing comment when a record goes into a prompt.
NO_COMMENT = "[Sem Comentário]"


class ExtractionStrategy(StrEnum):
    """How comments are located inside one unit span."""
    AUTO      = "auto"       # anchors first, heuristic only when none match
    ANCHOR    = "anchor"     # "Comentário:" anchors only
    HEURISTIC = "heuristic"  # noise stripping + splitting only


# ---------------------------------------------------------------------------
# UnitSpan
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class UnitSpan:
    """
    Text from a unit-code occurrence to the next occurrence of any code.

    - unit_code:   normalised (uppercase) code
    - text:        span text; repeated codes are space-joined in document order
    - occurrences: how many code matches contributed to the span
    """
    unit_code: UnitCode
    text: str
    occurrences: int = 1


# ---------------------------------------------------------------------------
# SurveyRecord
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class SurveyRecord:
    """
    One respondent's entry found by the anchor-based extractor.

    - unit_code:       unit the record belongs to
    - nps_score:       0–10 score, None when not parseable
    - comment:         sanitized comment, None when the respondent left none
    - leader_feedback: text of the trailing "Feedback N:" field ("" if absent)
    - survey_id:       digits of the "#12345" record id, when present
    """
    unit_code: UnitCode
    nps_score: float | None
    comment: Comment | None
    leader_feedback: str = ""
    survey_id: str | None = None

    @property
    def display_comment(self) -> str:
        return self.comment if self.comment is not None else NO_COMMENT


# ---------------------------------------------------------------------------
# UnitExtraction
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class UnitExtraction:
    """Result of the survey/comment extractor for one UnitSpan."""
    span: UnitSpan
    strategy: ExtractionStrategy
    comments: list[Comment] = field(default_factory=list)
    surveys: list[SurveyRecord] = field(default_factory=list)

    @property
    def unit_code(self) -> UnitCode:
        return self.span.unit_code


@dataclass(slots=True)
class FeedbackDocument:
    """
    Whole-document output of the pipeline.

    units preserves the first-occurrence order of unit codes in the text.
    """
    raw_text: str
    units: dict[UnitCode, UnitExtraction] = field(default_factory=dict)

    @property
    def has_units(self) -> bool:
        return bool(self.units)
