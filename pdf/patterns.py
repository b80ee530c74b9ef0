"""
pdf/patterns.py — regex catalogue for survey-export PDFs.

The export has a single structural anchor, the unit code (SBRSP + [A-Z0-9]+).
Everything else is recognised by labels ("Comentário:", "Feedback 1:", …)
or stripped as noise (dates, times, ticket numbers, system phrases).

Labels exist in the Portuguese form the exporter writes and in the English
form some exports use; both are listed.
"""

from __future__ import annotations

import re


def _p(pattern: str, flags: int = 0) -> re.Pattern[str]:
    return re.compile(pattern, flags | re.UNICODE)


def _i(pattern: str) -> re.Pattern[str]:
    return _p(pattern, re.IGNORECASE)


def _literal(text: str) -> re.Pattern[str]:
    """Case-insensitive regex for a literal label, matched anywhere."""
    return _i(re.escape(text))


# ---------------------------------------------------------------------------
# Unit codes and record ids
# ---------------------------------------------------------------------------

# Case-sensitive on purpose: lowercase "sbrsp…" is not a unit code.
UNIT_CODE_RE = _p(r"SBRSP[A-Z0-9]+")

# Record boundaries when the export carries no survey ids.
UNIT_SPLIT_RE = _p(r"(?=SBRSP[A-Z0-9]+)")

# "#12345": survey id opening a record in the export.
RECORD_ID_RE = _p(r"#(\d{5,})")
RECORD_SPLIT_RE = _p(r"(?=#\d{5,})")

# "#12": any residual ticket/reference number.
TICKET_RE = _p(r"#\d+")

# "(/surveys/…)", "(/people/…)": internal URL fragments leaking from the export.
PATH_FRAGMENT_RE = _p(r"\(/(?:surveys|people)/[^)]*\)")

# ---------------------------------------------------------------------------
# Dates and times
# ---------------------------------------------------------------------------

DATE_RE = _p(r"\d{2}/\d{2}/\d{2,4}")
TIME_RE = _p(r"\d{2}:\d{2}(?::\d{2})?")

# ---------------------------------------------------------------------------
# Anchors
# ---------------------------------------------------------------------------

# "Comentário: <body>": only the labelled form (colon required), so the word
# "comentário" inside a respondent's text is not an anchor. The body ends
# before the next "Feedback N", "#digits", unit code, or the end of the span.
COMMENT_ANCHOR_RE = _p(
    r"(?:Coment[aá]rio|Comment)\s*:\s*"
    r"(.*?)"
    r"(?=Feedback\s*\d|Feedback\s*:|#\d+|SBRSP|\Z)",
    re.IGNORECASE | re.DOTALL,
)

# "Feedback:" / "Feedback 1:": leader follow-up field.
FEEDBACK_LABEL_RE = _i(r"Feedback\s*\d*\s*:")

# "NPS: 9", "Nota: 8,5", "Score: 10"
SCORE_LABEL_RE = _i(r"(?:NPS|Nota|Score)\s*:\s*(\d{1,2}(?:[.,]\d+)?)")

# Isolated 0–10 integer; the last one before an anchor is the score.
SCORE_TOKEN_RE = _p(r"\b(10|[0-9])\b")

# ---------------------------------------------------------------------------
# Boilerplate
# ---------------------------------------------------------------------------

# Longer labels first so "Comentário:" is removed before "Comentário".
SYSTEM_LABELS: tuple[str, ...] = (
    "Feedback 1:", "Feedback 2:", "Feedback 3:", "Feedback 4:", "Feedback 5:",
    "Comentário:", "Comentário",
    "NPS:", "Nota:", "Data:", "Unidade:", "Cliente:", "CPF:", "E-mail:", "Telefone:",
    "Comment:", "Comment",
    "Score:", "Date:", "Unit:", "Client:", "ID number:", "Email:", "Phone:",
)
SYSTEM_LABEL_RES: tuple[re.Pattern[str], ...] = tuple(_literal(t) for t in SYSTEM_LABELS)

# Contact-status phrases the exporter writes instead of (or next to) feedback.
IGNORED_PHRASES: tuple[str, ...] = (
    "Cliente não autorizou contato",
    "Não houve contato",
    "Usuário não deixou",
    "Obtive contato",
    "Sem contato",
)
IGNORED_PHRASE_RES: tuple[re.Pattern[str], ...] = tuple(_literal(t) for t in IGNORED_PHRASES)

# Substrings that disqualify a candidate outright (lowercase).
DISQUALIFYING_SUBSTRINGS: tuple[str, ...] = (
    "usuário não deixou",
    "cliente não autorizou",
)

# Leaked NPS classification column.
SENTIMENT_LABEL_RE = _i(r"^(?:Promotor|Detrator|Neutro|Promoter|Detractor|Neutral)$")

NUMERIC_RE = _p(r"^\d+$")

# Table cells collapse to wide gaps in the text layer: 3+ whitespace is a break.
RECORD_SEPARATOR_RE = _p(r"[\n\r]+|\s{3,}")

LINE_BREAK_RE = _p(r"[\n\r]+")
MULTI_SPACE_RE = _p(r"\s{2,}")
