# request/response adapter: turns an IncomingRequest into an OutgoingResponse
# no hosting details live here, the flask app (and anything else) only translates
# its own request/response objects to the models in .models

from __future__ import annotations
import json
import logging
from decimal import Decimal, ROUND_HALF_UP
from pathlib import Path
from typing import Mapping
from urllib.parse import unquote_plus
from jinja2 import Environment, FileSystemLoader, select_autoescape
from .models import (
    ExtractionResult,
    HandlerOptions,
    IncomingRequest,
    OutgoingResponse,
    LENIENT,
    get_header,
)
from .service import compute_averages

logger = logging.getLogger(__name__)

HTML_CONTENT_TYPE = "text/html; charset=utf-8"
JSON_CONTENT_TYPE = "application/json"
ALLOWED_METHODS = ("GET", "HEAD", "POST")

MISSING_INPUT_MESSAGE = (
    "No input provided. Send the forecast as raw text, as JSON "
    '{"input": "..."} or as a form field named "input".'
)

# autoescape is what keeps the echoed input inert in the result page
_templates = Environment(
    loader=FileSystemLoader(str(Path(__file__).resolve().parent / "templates")),
    autoescape=select_autoescape(["html"]),
)

class MissingInputError(ValueError):
    # the only user-visible error, POST resolved to empty or blank text
    pass

def extract_input(body: str, headers: Mapping[str, str]) -> str:
    # json bodies use their string "input" field, form bodies their "input" field,
    # anything else is plain text. malformed json falls back to the raw body
    content_type = get_header(headers, "Content-Type").lower()

    if "application/json" in content_type:
        try:
            doc = json.loads(body)
        except (ValueError, RecursionError):
            # deep nesting like "[[[[..." exhausts the decoder, still just text
            logger.debug("body is not valid json, using it as plain text")
            return body
        if isinstance(doc, dict) and isinstance(doc.get("input"), str):
            return doc["input"]
        logger.debug("json body has no string 'input' field, using it as plain text")
        return body

    if "application/x-www-form-urlencoded" in content_type:
        for segment in body.split("&"):
            key, _, value = segment.partition("=")
            if key == "input":
                return unquote_plus(value)
        return ""

    return body.strip()

def wants_html(headers: Mapping[str, str]) -> bool:
    return "text/html" in get_header(headers, "Accept").lower()

# halves round away from zero (1.25 -> 1.3), not to even as round() does
def round_half_up(value: float) -> Decimal:
    return Decimal(repr(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)

def render_json(result: ExtractionResult, include_count: bool = True) -> str:
    payload = {
        "dayAvg": float(round_half_up(result.day_average)),
        "nightAvg": float(round_half_up(result.night_average)),
    }
    if include_count:
        payload["count"] = result.count
    return json.dumps(payload)

def render_result_page(result: ExtractionResult, input_text: str) -> str:
    return _templates.get_template("result.html").render(
        count=result.count,
        day_avg=str(round_half_up(result.day_average)),
        night_avg=str(round_half_up(result.night_average)),
        input_text=input_text,
    )

def render_form_page() -> str:
    return _templates.get_template("form.html").render()

def error_response(status_code: int, message: str, headers=None) -> OutgoingResponse:
    merged = {"Content-Type": JSON_CONTENT_TYPE}
    merged.update(headers or {})
    return OutgoingResponse(status_code=status_code, body=json.dumps({"error": message}), headers=merged)

def handle(request: IncomingRequest, options: HandlerOptions = LENIENT) -> OutgoingResponse:
    method = request.method.upper()

    if method in ("GET", "HEAD"):
        return OutgoingResponse(200, render_form_page(), {"Content-Type": HTML_CONTENT_TYPE})

    if method != "POST":
        return error_response(
            405, f"Method {method} not allowed", {"Allow": ", ".join(ALLOWED_METHODS)}
        )

    try:
        input_text = _resolve_input(request, options)
    except MissingInputError as exc:
        logger.info("rejecting POST without usable input")
        return error_response(400, str(exc))

    result = compute_averages(input_text, options.accept_alt_degree_glyph)
    logger.debug("found %d pair(s) in %d chars of input", result.count, len(input_text))

    if options.negotiate_html and wants_html(request.headers):
        return OutgoingResponse(
            200, render_result_page(result, input_text), {"Content-Type": HTML_CONTENT_TYPE}
        )
    return OutgoingResponse(
        200, render_json(result, options.include_count_in_json), {"Content-Type": JSON_CONTENT_TYPE}
    )

def _resolve_input(request: IncomingRequest, options: HandlerOptions) -> str:
    if options.parse_content_type:
        input_text = extract_input(request.text(), request.headers)
    else:
        input_text = request.text()
    if options.strict_validation and not input_text.strip():
        raise MissingInputError(MISSING_INPUT_MESSAGE)
    return input_text
