"""
analysis/runner.py — per-unit and regional AI reports.

Run, in order:
  1. units with fewer than min_comments comments are skipped (not an error)
  2. for each remaining unit: prompt → text generator → save report;
     a failing unit is recorded as skipped and the loop moves on
  3. a fixed delay between successive unit calls, success or not
  4. if at least one unit report was saved, the regional report

Cancellation is cooperative: the event is checked before each unit, so
the unit in flight finishes and its report is kept; the regional step is
not run after a cancellation, including one requested during the last unit.

Public API:
  AnalysisRunner(generator, store, options).run(units) -> RunSummary
"""

from __future__ import annotations

import datetime as dt
import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

from analysis.store import ReportStore
from data_model.reports import (
    RunSummary,
    SkippedUnit,
    UnitContext,
    average_nps,
    priority_for,
    sentiment_for,
    total_feedbacks,
)
from llm_query.gemini import TextGenerator
from llm_query.prompt import build_regional_prompt, build_unit_prompt

log = logging.getLogger(__name__)

DEFAULT_MIN_COMMENTS = 3
DEFAULT_CALL_DELAY   = 1.0


class UnitAnalysisFailed(RuntimeError):
    """The report for one unit could not be generated; other units go on."""

    def __init__(self, unit_name: str, reason: str) -> None:
        super().__init__(f"{unit_name}: {reason}")
        self.unit_name = unit_name
        self.reason = reason


@dataclass(slots=True)
class RunOptions:
    """
    - report_date:      date the reports are filed under
    - min_comments:     units with fewer comments are not analysed
    - inter_call_delay: seconds between successive unit calls
    - source_id:        data_sources row the reports derive from, if stored
    """
    report_date: dt.date
    min_comments: int = DEFAULT_MIN_COMMENTS
    inter_call_delay: float = DEFAULT_CALL_DELAY
    source_id: str | None = None


class AnalysisRunner:
    def __init__(
        self,
        generator: TextGenerator,
        store: ReportStore,
        options: RunOptions,
        sleep: Callable[[float], None] = time.sleep,
        cancel_event: threading.Event | None = None,
        on_unit_start: Callable[[int, int, UnitContext], None] | None = None,
    ) -> None:
        self.generator = generator
        self.store = store
        self.options = options
        self._sleep = sleep
        self._cancel = cancel_event or threading.Event()
        self._on_unit_start = on_unit_start

    def cancel(self) -> None:
        """Stops the run after the unit currently being analysed."""
        self._cancel.set()

    # -- run ----------------------------------------------------------------

    def run(self, units: list[UnitContext]) -> RunSummary:
        summary = RunSummary()
        eligible: list[UnitContext] = []
        for unit in units:
            if len(unit.comments) < self.options.min_comments:
                log.info("Unit %s has %d comments, not analysed", unit.name, len(unit.comments))
                summary.skipped.append(SkippedUnit(unit.name, f"{len(unit.comments)} comentários"))
            else:
                eligible.append(unit)

        for i, unit in enumerate(eligible):
            if self._cancel.is_set():
                log.warning("Run cancelled, %d units not analysed", len(eligible) - i)
                summary.cancelled = True
                break
            if self._on_unit_start is not None:
                self._on_unit_start(i + 1, len(eligible), unit)

            try:
                self.analyze_unit(unit)
                summary.saved += 1
            except UnitAnalysisFailed as exc:
                log.error("Unit %s skipped: %s", exc.unit_name, exc.reason)
                summary.skipped.append(SkippedUnit(unit.name, exc.reason))

            if i < len(eligible) - 1:
                self._sleep(self.options.inter_call_delay)

        if self._cancel.is_set():
            summary.cancelled = True

        if summary.saved > 0 and not summary.cancelled:
            self._run_regional(units, summary)

        return summary

    # -- unit ---------------------------------------------------------------

    def analyze_unit(self, unit: UnitContext) -> str:
        """Generates and saves one unit report; returns the report id."""
        log.info(
            "Analysing %s (NPS %s, variation %s, %d comments)",
            unit.name, unit.current_nps, unit.nps_variation, len(unit.comments),
        )
        try:
            report = self.generator.generate(build_unit_prompt(unit))
        except Exception as exc:
            raise UnitAnalysisFailed(unit.name, f"erro IA: {exc}") from exc

        summary = {
            "type":            "unit",
            "unit_name":       unit.name,
            "unit_code":       unit.code,
            "feedback_count":  len(unit.comments),
            "survey_count":    len(unit.surveys),
            "nps_score":       unit.current_nps,
            "nps_variation":   unit.nps_variation,
            "markdown_report": report,
            "priority_level":  str(priority_for(unit.current_nps)),
        }
        try:
            return self.store.save_report(
                unit.unit_id, self.options.report_date, summary, self.options.source_id,
            )
        except Exception as exc:
            raise UnitAnalysisFailed(unit.name, f"erro banco: {exc}") from exc

    # -- regional -----------------------------------------------------------

    def _run_regional(self, units: list[UnitContext], summary: RunSummary) -> None:
        log.info("Generating regional report over %d units", len(units))
        avg = average_nps(units)
        try:
            report = self.generator.generate(build_regional_prompt(units))
            self.store.save_report(
                None,
                self.options.report_date,
                {
                    "type":              "regional",
                    "total_feedbacks":   total_feedbacks(units),
                    "overall_sentiment": str(sentiment_for(avg)),
                    "avg_nps":           avg,
                    "markdown_report":   report,
                },
                self.options.source_id,
            )
        except Exception as exc:
            log.error("Regional report failed: %s", exc)
            summary.regional_error = str(exc)
            return
        summary.regional_saved = True
