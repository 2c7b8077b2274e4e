# business rules: find "day°/night°" pairs in free text and average each column
# pure functions only, no i/o, safe to call from any number of threads

from __future__ import annotations
import re
from typing import List
from .models import ExtractionResult, TemperaturePair, mean

DEGREE = "°"
ALT_DEGREE = "º"  # masculine ordinal often typed in place of the degree sign

# [0-9] rather than \d so only ascii digits count
STRICT_PAIR_RE = re.compile(rf"([0-9]+){DEGREE}/([0-9]+){DEGREE}")
LENIENT_PAIR_RE = re.compile(rf"([0-9]+)[{DEGREE}{ALT_DEGREE}]/([0-9]+)[{DEGREE}{ALT_DEGREE}]")

def pair_pattern(accept_alt_degree_glyph: bool = True) -> re.Pattern:
    return LENIENT_PAIR_RE if accept_alt_degree_glyph else STRICT_PAIR_RE

# transform raw forecast text into typed pairs, left to right, non-overlapping
def extract_pairs(text: str, accept_alt_degree_glyph: bool = True) -> List[TemperaturePair]:
    if not text:
        return []
    pattern = pair_pattern(accept_alt_degree_glyph)
    return [
        TemperaturePair(day=int(m.group(1)), night=int(m.group(2)))
        for m in pattern.finditer(text)
    ]

# text -> pairs -> averages; anything that does not match is simply skipped
def compute_averages(text: str, accept_alt_degree_glyph: bool = True) -> ExtractionResult:
    pairs = extract_pairs(text, accept_alt_degree_glyph)
    return ExtractionResult(
        count=len(pairs),
        day_average=mean([p.day for p in pairs]),
        night_average=mean([p.night for p in pairs]),
    )
