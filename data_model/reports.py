"""
data_model/reports.py — structures of the AI analysis run.

UnitContext joins one UnitExtraction with the unit's database row and its
latest NPS metrics; RunSummary is what the operator sees at the end of a run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

from .units import Comment, SurveyRecord, UnitCode


class PriorityLevel(StrEnum):
    """Stored in ai_summary.priority_level; values are read by the dashboard."""
    CRITICAL = "critica"
    HIGH     = "alta"
    MEDIUM   = "media"


class Sentiment(StrEnum):
    """Stored in ai_summary.overall_sentiment of the regional report."""
    POSITIVE = "positivo"
    NEUTRAL  = "neutro"
    NEGATIVE = "negativo"


# NPS target the prompts measure units against.
NPS_GOAL = 75.0


def priority_for(nps: float | None) -> PriorityLevel:
    if nps is None:
        return PriorityLevel.MEDIUM
    if nps < 50:
        return PriorityLevel.CRITICAL
    if nps < 70:
        return PriorityLevel.HIGH
    return PriorityLevel.MEDIUM


def sentiment_for(avg_nps: float) -> Sentiment:
    if avg_nps >= 70:
        return Sentiment.POSITIVE
    if avg_nps >= 50:
        return Sentiment.NEUTRAL
    return Sentiment.NEGATIVE


# ---------------------------------------------------------------------------
# Database rows
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class UnitRow:
    id: str
    name: str
    code: UnitCode


@dataclass(slots=True)
class NpsRow:
    nps_score: float | None
    week_start_date: str
    responses_count: int = 0


@dataclass(slots=True)
class SourceRow:
    id: str
    filename: str
    extraction_date: str | None
    created_at: str
    raw_text: str | None = None
    text_length: int = 0


# ---------------------------------------------------------------------------
# UnitContext
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class UnitContext:
    """
    Everything the unit prompt needs.

    - feedback_count: responses_count of the most recent metric row
    - nps_variation:  current_nps - previous_nps when both are known
    """
    unit_id: str
    code: UnitCode
    name: str
    comments: list[Comment] = field(default_factory=list)
    surveys: list[SurveyRecord] = field(default_factory=list)
    current_nps: float | None = None
    previous_nps: float | None = None
    nps_variation: float | None = None
    feedback_count: int = 0


def total_feedbacks(units: list[UnitContext]) -> int:
    return sum(u.feedback_count for u in units)


def average_nps(units: list[UnitContext]) -> float:
    """Mean NPS over units that have a score; 0.0 when none has one."""
    scored = [u.current_nps for u in units if u.current_nps is not None]
    return sum(scored) / len(scored) if scored else 0.0


# ---------------------------------------------------------------------------
# RunSummary
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class SkippedUnit:
    name: str
    reason: str

    def __str__(self) -> str:
        return f"{self.name} ({self.reason})"


@dataclass(slots=True)
class RunSummary:
    """
    End-of-run report.

    - saved:          unit reports written to the store
    - skipped:        units not analysed, with the reason
    - regional_saved: True when the regional report was written
    - regional_error: message of a failed regional step (None otherwise)
    - cancelled:      True when the run stopped between units on request
    """
    saved: int = 0
    skipped: list[SkippedUnit] = field(default_factory=list)
    regional_saved: bool = False
    regional_error: str | None = None
    cancelled: bool = False

    @property
    def skipped_count(self) -> int:
        return len(self.skipped)
