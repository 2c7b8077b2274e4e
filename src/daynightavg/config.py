# environment driven settings for the app, the cli and the remote client
# the handler itself never reads the environment, it only gets a HandlerOptions

from __future__ import annotations
import os
from dataclasses import replace
from typing import Mapping, Optional
from dotenv import load_dotenv
from .models import HandlerOptions, LENIENT, MINIMAL

load_dotenv()  # in production, environment variables are injected by the hosting platform

VARIANTS = {
    "lenient": LENIENT,
    "minimal": MINIMAL,
}

# env var -> HandlerOptions field, applied on top of the selected variant
FLAG_VARS = {
    "DAYNIGHT_STRICT_VALIDATION": "strict_validation",
    "DAYNIGHT_ACCEPT_ALT_GLYPH": "accept_alt_degree_glyph",
    "DAYNIGHT_INCLUDE_COUNT": "include_count_in_json",
    "DAYNIGHT_NEGOTIATE_HTML": "negotiate_html",
    "DAYNIGHT_PARSE_CONTENT_TYPE": "parse_content_type",
}

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}

def parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f"{name} must be a boolean (got {raw!r})")

def variant_options(name: str) -> HandlerOptions:
    try:
        return VARIANTS[name.strip().lower()]
    except KeyError:
        raise ValueError(
            f"unknown variant {name!r}, expected one of: {', '.join(sorted(VARIANTS))}"
        ) from None

def options_from_env(environ: Optional[Mapping[str, str]] = None) -> HandlerOptions:
    env = os.environ if environ is None else environ
    options = variant_options(env.get("DAYNIGHT_VARIANT", "lenient"))

    overrides = {
        attr: parse_bool(var, env[var])
        for var, attr in FLAG_VARS.items()
        if env.get(var, "").strip()
    }
    return replace(options, **overrides) if overrides else options

def endpoint_from_env(environ: Optional[Mapping[str, str]] = None) -> Optional[str]:
    env = os.environ if environ is None else environ
    return env.get("DAYNIGHT_ENDPOINT") or None

def function_key_from_env(environ: Optional[Mapping[str, str]] = None) -> Optional[str]:
    env = os.environ if environ is None else environ
    return env.get("DAYNIGHT_FUNCTION_KEY") or None
