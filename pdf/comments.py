"""
pdf/comments.py — locates surveys and comments inside one unit span.

Two strategies, one interface:

  anchor     "Comentário: <body>" anchors; the body runs up to the next
             "Feedback N", "#digits", unit code or end of span. When the
             anchors are there, surveys (score, comment, leader feedback)
             are parsed around them as well.
  heuristic  used when no anchor matches: strip codes, dates, times,
             labels and contact-status phrases, then split on line breaks
             or 3+ whitespace (wide table gaps in the text layer).

In AUTO mode the anchor result wins outright for a unit; the two are never
merged, or the same text would be counted twice. Nothing here raises on
malformed text: no match means no comments.

Public API:
  extract_unit(span, strategy)        -> UnitExtraction
  extract_comments(text, strategy)    -> list[str]
  extract_surveys(text, unit_code)    -> list[SurveyRecord]
  anchored_candidates(text)           -> list[str]
  heuristic_candidates(text)          -> list[str]
"""

from __future__ import annotations

from data_model.units import (
    ExtractionStrategy,
    SurveyRecord,
    UnitCode,
    UnitExtraction,
    UnitSpan,
)
from pdf.patterns import (
    COMMENT_ANCHOR_RE,
    DATE_RE,
    FEEDBACK_LABEL_RE,
    IGNORED_PHRASE_RES,
    RECORD_ID_RE,
    RECORD_SEPARATOR_RE,
    RECORD_SPLIT_RE,
    SCORE_LABEL_RE,
    SCORE_TOKEN_RE,
    SYSTEM_LABEL_RES,
    TICKET_RE,
    TIME_RE,
    UNIT_CODE_RE,
    UNIT_SPLIT_RE,
)
from pdf.sanitizer import clean_comment, is_informative, sanitize_comments

# ---------------------------------------------------------------------------
# Candidates
# ---------------------------------------------------------------------------

def _collapse(text: str) -> str:
    return " ".join(text.split())


def anchored_candidates(text: str) -> list[str]:
    """Bodies of every "Comentário:" anchor, whitespace collapsed."""
    return [_collapse(m.group(1)) for m in COMMENT_ANCHOR_RE.finditer(text)]


def heuristic_candidates(text: str) -> list[str]:
    clean = UNIT_CODE_RE.sub("", text)
    clean = DATE_RE.sub("", clean)
    clean = TIME_RE.sub("", clean)
    for label_re in SYSTEM_LABEL_RES:
        clean = label_re.sub("", clean)
    for phrase_re in IGNORED_PHRASE_RES:
        clean = phrase_re.sub("", clean)

    fragments = (f.strip() for f in RECORD_SEPARATOR_RE.split(clean))
    return [f for f in fragments if f]


def _select_candidates(
    text: str,
    strategy: ExtractionStrategy,
) -> tuple[list[str], ExtractionStrategy]:
    if strategy is not ExtractionStrategy.HEURISTIC:
        anchored = anchored_candidates(text)
        if anchored or strategy is ExtractionStrategy.ANCHOR:
            return anchored, ExtractionStrategy.ANCHOR
    return heuristic_candidates(text), ExtractionStrategy.HEURISTIC


def extract_comments(
    text: str,
    strategy: ExtractionStrategy = ExtractionStrategy.AUTO,
) -> list[str]:
    candidates, _ = _select_candidates(text, strategy)
    return sanitize_comments(candidates)


# ---------------------------------------------------------------------------
# Surveys
# ---------------------------------------------------------------------------

def _record_regions(text: str) -> list[str]:
    """Splits a span into per-respondent regions (by survey id, else by code)."""
    splitter = RECORD_SPLIT_RE if RECORD_ID_RE.search(text) else UNIT_SPLIT_RE
    return [r for r in splitter.split(text) if r.strip()]


def _parse_score(header: str) -> float | None:
    """
    Score of a record from the text preceding its comment anchor.

    A labelled value ("NPS: 9", "Nota: 8,5") wins; otherwise the last isolated
    0–10 integer once dates, times, codes and ids are removed.
    """
    header = DATE_RE.sub(" ", header)
    header = TIME_RE.sub(" ", header)
    header = UNIT_CODE_RE.sub(" ", header)
    header = TICKET_RE.sub(" ", header)

    for m in reversed(list(SCORE_LABEL_RE.finditer(header))):
        value = float(m.group(1).replace(",", "."))
        if 0 <= value <= 10:
            return value

    tokens = SCORE_TOKEN_RE.findall(header)
    if tokens:
        return float(tokens[-1])
    return None


def _leader_feedback(tail: str) -> str:
    """Text after the first "Feedback N:" label; later labels become separators."""
    parts = FEEDBACK_LABEL_RE.split(tail)
    if len(parts) < 2:
        return ""
    return " ".join(_collapse(p) for p in parts[1:] if p.strip())


def extract_surveys(text: str, unit_code: UnitCode) -> list[SurveyRecord]:
    """
    One SurveyRecord per comment anchor.

    Score and leader feedback are associated positionally: the score from
    the header before the anchor, the feedback from the nearest following
    "Feedback N:" field before the next anchor, both within the same region.
    """
    records: list[SurveyRecord] = []
    for region in _record_regions(text):
        id_match = RECORD_ID_RE.search(region)
        survey_id = id_match.group(1) if id_match else None

        anchors = list(COMMENT_ANCHOR_RE.finditer(region))
        header_start = 0
        for k, anchor in enumerate(anchors):
            next_start = anchors[k + 1].start() if k + 1 < len(anchors) else len(region)
            comment = clean_comment(_collapse(anchor.group(1)))

            records.append(SurveyRecord(
                unit_code=unit_code,
                nps_score=_parse_score(region[header_start:anchor.start()]),
                comment=comment if is_informative(comment) else None,
                leader_feedback=_leader_feedback(region[anchor.end():next_start]),
                survey_id=survey_id,
            ))
            header_start = anchor.end()

    return records


# ---------------------------------------------------------------------------
# Unit-level entry point
# ---------------------------------------------------------------------------

def extract_unit(
    span: UnitSpan,
    strategy: ExtractionStrategy = ExtractionStrategy.AUTO,
) -> UnitExtraction:
    candidates, used = _select_candidates(span.text, strategy)
    surveys = (
        extract_surveys(span.text, span.unit_code)
        if used is ExtractionStrategy.ANCHOR
        else []
    )
    return UnitExtraction(
        span=span,
        strategy=used,
        comments=sanitize_comments(candidates),
        surveys=surveys,
    )
