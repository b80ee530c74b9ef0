"""Test helpers: in-memory PDFs, a fake store and a fake text generator."""

from __future__ import annotations

import datetime as dt
from typing import Any

import fitz
from data_model.reports import NpsRow, UnitContext, UnitRow


def make_pdf(*pages: str, **save_options: Any) -> bytes:
    """PDF with one page per argument; "" makes a blank page."""
    doc = fitz.open()
    for text in pages:
        page = doc.new_page()
        if text:
            page.insert_text((72, 72), text, fontsize=10)
    data = doc.tobytes(**save_options)
    doc.close()
    return data


# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------

class FakeStore:
    """ReportStore over dicts; save_report may be made to fail per unit."""

    def __init__(
        self,
        units: dict[str, UnitRow] | None = None,
        metrics: dict[str, list[NpsRow]] | None = None,
        fail_for: set[str | None] | None = None,
    ) -> None:
        self.units = units or {}
        self.metrics = metrics or {}
        self.fail_for = fail_for or set()
        self.reports: list[dict[str, Any]] = []

    def find_unit(self, code: str) -> UnitRow | None:
        return self.units.get(code.upper())

    def recent_nps(self, unit_id: str, limit: int = 2) -> list[NpsRow]:
        return self.metrics.get(unit_id, [])[:limit]

    def save_report(
        self,
        unit_id: str | None,
        report_date: dt.date,
        summary: dict[str, Any],
        source_id: str | None = None,
    ) -> str:
        if unit_id in self.fail_for:
            raise RuntimeError("connection lost")
        self.reports.append({
            "unit_id": unit_id,
            "report_date": report_date,
            "summary": summary,
            "source_id": source_id,
        })
        return f"report-{len(self.reports)}"


class FakeGenerator:
    """Returns a canned report; raises for prompts mentioning a failing marker."""

    def __init__(self, fail_markers: tuple[str, ...] = (), regional_error: Exception | None = None):
        self.fail_markers = fail_markers
        self.regional_error = regional_error
        self.prompts: list[str] = []

    def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        for marker in self.fail_markers:
            if marker in prompt:
                raise RuntimeError(f"model refused {marker}")
        if self.regional_error is not None and "DADOS CONSOLIDADOS" in prompt:
            raise self.regional_error
        return f"## Relatório {len(self.prompts)}"


def make_unit(
    code: str,
    n_comments: int = 3,
    nps: float | None = 72.0,
    variation: float | None = None,
    feedback_count: int = 10,
) -> UnitContext:
    return UnitContext(
        unit_id=f"id-{code}",
        code=code,
        name=f"Unidade {code[-2:]}",
        comments=[f"Comentário número {i} sobre o atendimento" for i in range(n_comments)],
        current_nps=nps,
        nps_variation=variation,
        feedback_count=feedback_count,
    )
