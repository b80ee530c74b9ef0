"""
pdf/segmenter.py — partitions the flat document text into per-unit spans.

Every unit-code occurrence opens a span that runs up to the next occurrence
of any code (or the end of the text). Text before the first code is a cover
page / header and is dropped. The exporter restarts a section per response,
so the same code may open several spans; those are space-joined in document
order into one span per unit.

Codes are normalised to uppercase when inserted into the map, so one logical
unit never yields two entries.

Public API:
  segment_units(text)       -> list[UnitSpan]
  split_text_by_unit(text)  -> dict[str, str]
  normalise_unit_code(code) -> str
"""

from __future__ import annotations

import logging

from data_model.units import UnitCode, UnitSpan
from pdf.patterns import UNIT_CODE_RE

log = logging.getLogger(__name__)


def normalise_unit_code(code: str) -> UnitCode:
    return code.strip().upper()


def segment_units(text: str) -> list[UnitSpan]:
    """
    Returns one UnitSpan per distinct code, in order of first occurrence.

    An empty list means no unit code was recognised: a valid outcome
    (wrong file / unknown layout) that callers must report, not an error.
    """
    matches = list(UNIT_CODE_RE.finditer(text))
    if not matches:
        log.warning("No unit codes found in document text (%d chars)", len(text))
        return []

    spans: dict[UnitCode, UnitSpan] = {}
    for i, match in enumerate(matches):
        end = matches[i + 1].start() if i + 1 < len(matches) else len(text)
        code = normalise_unit_code(match.group())
        chunk = text[match.start():end]

        span = spans.get(code)
        if span is None:
            spans[code] = UnitSpan(unit_code=code, text=chunk)
        else:
            span.text = f"{span.text} {chunk}"
            span.occurrences += 1

    log.debug("Segmented %d code occurrences into %d units", len(matches), len(spans))
    return list(spans.values())


def split_text_by_unit(text: str) -> dict[UnitCode, str]:
    """Mapping form of segment_units(): code → concatenated span text."""
    return {span.unit_code: span.text for span in segment_units(text)}
