"""
pdf/sanitizer.py — final filter for extracted comment candidates.

Applied to every candidate, in order:
  1. strip "#digits" ticket numbers
  2. strip "(/surveys/…)" and "(/people/…)" URL fragments
  3. strip contact-status phrases ("Sem contato", …)
  4. trim
  5. drop ≤ 10 characters
  6. drop purely numeric
  7. drop bare sentiment labels (Promotor / Detrator / Neutro)
  8. drop anything still containing "usuário não deixou" / "cliente não autorizou"
  9. dedupe, first occurrence wins

The result is idempotent: sanitizing a sanitized list returns it unchanged.

Public API:
  sanitize_comments(candidates) -> list[str]
  clean_comment(candidate)      -> str
  is_informative(comment)       -> bool
"""

from __future__ import annotations

from collections.abc import Iterable

from pdf.patterns import (
    DISQUALIFYING_SUBSTRINGS,
    IGNORED_PHRASE_RES,
    NUMERIC_RE,
    PATH_FRAGMENT_RE,
    SENTIMENT_LABEL_RE,
    TICKET_RE,
)

# Candidates this short are table fragments, not feedback.
MIN_COMMENT_LENGTH = 10


def clean_comment(candidate: str) -> str:
    """
    Steps 1–4: strip noise tokens and trim.

    Stripping repeats until nothing changes: removing one token can join the
    pieces of another ("#(/surveys/1)42" becomes "#42").
    """
    text = candidate
    while True:
        stripped = _strip_noise(text)
        if stripped == text:
            return text.strip()
        text = stripped


def _strip_noise(text: str) -> str:
    text = TICKET_RE.sub("", text)
    text = PATH_FRAGMENT_RE.sub("", text)
    for phrase_re in IGNORED_PHRASE_RES:
        text = phrase_re.sub("", text)
    return text


def is_informative(comment: str) -> bool:
    """Steps 5–8 on an already cleaned comment."""
    if len(comment) <= MIN_COMMENT_LENGTH:
        return False
    if NUMERIC_RE.match(comment):
        return False
    if SENTIMENT_LABEL_RE.match(comment):
        return False
    lowered = comment.lower()
    return not any(s in lowered for s in DISQUALIFYING_SUBSTRINGS)


def sanitize_comments(candidates: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    result: list[str] = []
    for candidate in candidates:
        comment = clean_comment(candidate)
        if not is_informative(comment) or comment in seen:
            continue
        seen.add(comment)
        result.append(comment)
    return result
