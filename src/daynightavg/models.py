# models and tiny stats helper to keep data shapes explicit and reusable across the app

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional

@dataclass(frozen=True)
class TemperaturePair:
    # one matched "day°/night°" token, lives only until aggregation
    day: int
    night: int

@dataclass(frozen=True)
class ExtractionResult:
    # averages stay unrounded here, rendering rounds to one decimal
    count: int
    day_average: float
    night_average: float

@dataclass(frozen=True)
class HandlerOptions:
    # the two deployed behaviours are presets of these flags, see LENIENT / MINIMAL
    strict_validation: bool = True
    accept_alt_degree_glyph: bool = True
    include_count_in_json: bool = True
    negotiate_html: bool = True
    parse_content_type: bool = True

LENIENT = HandlerOptions()
MINIMAL = HandlerOptions(
    strict_validation=False,
    accept_alt_degree_glyph=False,
    include_count_in_json=False,
    negotiate_html=False,
    parse_content_type=False,
)

@dataclass(frozen=True)
class IncomingRequest:
    # what the hosting layer hands us: method, headers and the raw body
    method: str
    headers: Mapping[str, str] = field(default_factory=dict)
    body: bytes = b""

    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")

@dataclass(frozen=True)
class OutgoingResponse:
    # what the hosting layer writes back
    status_code: int
    body: str
    headers: Dict[str, str] = field(default_factory=dict)

    @property
    def content_type(self) -> Optional[str]:
        return self.headers.get("Content-Type")

def get_header(headers: Mapping[str, str], name: str, default: str = "") -> str:
    # http header names are case-insensitive
    wanted = name.lower()
    for key, value in headers.items():
        if key.lower() == wanted:
            return value
    return default

def mean(values: List[int]) -> float:
    # simple average that returns 0.0 on empty input to avoid zero division
    return sum(values) / len(values) if values else 0.0
