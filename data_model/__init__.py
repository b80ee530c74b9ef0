"""
data_model — data structures shared by the pdf, llm_query and analysis layers.

Usage:
  from data_model import UnitSpan, SurveyRecord, UnitContext, ...

Modules:
  units   — UnitCode, Comment, UnitSpan, SurveyRecord, UnitExtraction,
            FeedbackDocument, ExtractionStrategy, NO_COMMENT
  reports — UnitRow, NpsRow, SourceRow, UnitContext, SkippedUnit,
            RunSummary, PriorityLevel, Sentiment, priority_for, sentiment_for,
            average_nps, total_feedbacks
"""

from .units import (
    NO_COMMENT,
    Comment,
    ExtractionStrategy,
    FeedbackDocument,
    SurveyRecord,
    UnitCode,
    UnitExtraction,
    UnitSpan,
)
from .reports import (
    NPS_GOAL,
    NpsRow,
    PriorityLevel,
    RunSummary,
    Sentiment,
    SkippedUnit,
    SourceRow,
    UnitContext,
    UnitRow,
    average_nps,
    priority_for,
    sentiment_for,
    total_feedbacks,
)

__all__ = [
    # units
    "NO_COMMENT",
    "Comment",
    "ExtractionStrategy",
    "FeedbackDocument",
    "SurveyRecord",
    "UnitCode",
    "UnitExtraction",
    "UnitSpan",
    # reports
    "NPS_GOAL",
    "NpsRow",
    "PriorityLevel",
    "RunSummary",
    "Sentiment",
    "SkippedUnit",
    "SourceRow",
    "UnitContext",
    "UnitRow",
    "average_nps",
    "priority_for",
    "sentiment_for",
    "total_feedbacks",
]
