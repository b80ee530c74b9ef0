"""
llm_query/prompt.py — prompts for the per-unit and regional reports.

Templates live in llm_query/templates/ and use {{PLACEHOLDER}} markers.
Evidence is embedded as numbered items: survey records when the anchor
extractor produced them, plain sanitized comments otherwise.

Public API:
  build_unit_prompt(unit, template_path)       -> str
  build_regional_prompt(units, template_path)  -> str
  format_nps_context(unit)                     -> str
"""

from __future__ import annotations

import pathlib

from data_model.reports import NPS_GOAL, UnitContext, average_nps, total_feedbacks

TEMPLATES_DIR          = pathlib.Path(__file__).resolve().parent / "templates"
UNIT_TEMPLATE_PATH     = TEMPLATES_DIR / "unit-report.md"
REGIONAL_TEMPLATE_PATH = TEMPLATES_DIR / "regional-report.md"

_NO_EVIDENCE = "Nenhum comentário extraído."

# Comments per unit quoted in the regional prompt.
REGIONAL_COMMENTS_PER_UNIT = 2


def _load_template(template_path: pathlib.Path) -> str:
    """Reads a template and strips its ```text / ``` fence."""
    if not template_path.exists():
        raise FileNotFoundError(f"Missing template: {template_path}")
    body = template_path.read_text(encoding="utf-8").strip()
    if body.startswith("```text"):
        body = body[len("```text"):].lstrip("\n")
    if body.endswith("```"):
        body = body[: body.rfind("```")].rstrip()
    return body


def _fill(body: str, values: dict[str, str]) -> str:
    for key, value in values.items():
        body = body.replace("{{" + key + "}}", value)
    return body


# ---------------------------------------------------------------------------
# Unit prompt
# ---------------------------------------------------------------------------

def format_nps_context(unit: UnitContext) -> str:
    if unit.current_nps is None:
        return "NPS: Dados não disponíveis"

    context = f"NPS ATUAL: {unit.current_nps:.1f}"
    if unit.nps_variation is not None:
        if unit.nps_variation > 0:
            context += f" (SUBIU {unit.nps_variation:.1f} pontos)"
        elif unit.nps_variation < 0:
            context += f" (CAIU {abs(unit.nps_variation):.1f} pontos)"
        else:
            context += " (ESTÁVEL)"
    return context


def _format_evidence(unit: UnitContext) -> str:
    if unit.surveys:
        lines = []
        for i, survey in enumerate(unit.surveys, 1):
            score = "-" if survey.nps_score is None else f"{survey.nps_score:g}"
            line = f'{i}. Nota: {score} | Comentário: "{survey.display_comment}"'
            if survey.leader_feedback:
                line += f" | Feedback do líder: {survey.leader_feedback}"
            lines.append(line)
        return "\n".join(lines)

    if unit.comments:
        return "\n".join(f'{i}. "{c}"' for i, c in enumerate(unit.comments, 1))

    return _NO_EVIDENCE


def build_unit_prompt(
    unit: UnitContext,
    template_path: pathlib.Path = UNIT_TEMPLATE_PATH,
) -> str:
    return _fill(_load_template(template_path), {
        "UNIT_NAME":      unit.name,
        "UNIT_CODE":      unit.code,
        "NPS_CONTEXT":    format_nps_context(unit),
        "FEEDBACK_COUNT": str(unit.feedback_count),
        "COMMENT_COUNT":  str(len(unit.comments)),
        "EVIDENCE":       _format_evidence(unit),
        "NPS_GOAL":       f"{NPS_GOAL:g}",
    })


# ---------------------------------------------------------------------------
# Regional prompt
# ---------------------------------------------------------------------------

def build_regional_prompt(
    units: list[UnitContext],
    template_path: pathlib.Path = REGIONAL_TEMPLATE_PATH,
) -> str:
    evidence = "\n\n".join(
        f"UNIDADE {u.name}:\n"
        + "\n".join(f'- "{c}"' for c in u.comments[:REGIONAL_COMMENTS_PER_UNIT])
        for u in units
        if u.comments
    )
    return _fill(_load_template(template_path), {
        "TOTAL_FEEDBACKS": str(total_feedbacks(units)),
        "AVG_NPS":         f"{average_nps(units):.1f}",
        "UNIT_COUNT":      str(len(units)),
        "EVIDENCE":        evidence or _NO_EVIDENCE,
    })
