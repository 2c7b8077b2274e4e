# connects input (files or stdin) to the service, a remote endpoint or the web app
# and prints the result in a fixed one-line format

from __future__ import annotations
import argparse
import logging
import sys
from typing import Dict, List, Optional
from .client import TemperatureAverageAPIError, TemperatureAverageClient, average_all
from .config import options_from_env, variant_options
from .handler import MISSING_INPUT_MESSAGE, render_json, round_half_up
from .service import compute_averages

STDIN_NAME = "<stdin>"

def format_line(day_avg: float, night_avg: float, count: Optional[int] = None) -> str:
    line = f"Day Average: {round_half_up(day_avg)}  Night Average: {round_half_up(night_avg)}"
    if count is not None:
        line += f"  (n={count})"
    return line

def read_texts(paths: List[str]) -> Dict[str, str]:
    if not paths:
        return {STDIN_NAME: sys.stdin.read()}
    texts = {}
    for path in paths:
        with open(path, encoding="utf-8") as fh:
            texts[path] = fh.read()
    return texts

def _prefix(name: str, many: bool) -> str:
    return f"{name}: " if many else ""

def cmd_compute(args) -> int:
    try:
        options = variant_options(args.variant) if args.variant else options_from_env()
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    texts = read_texts(args.files)
    many = len(texts) > 1
    status = 0
    for name, text in texts.items():
        if options.strict_validation and not text.strip():
            print(f"{_prefix(name, many)}{MISSING_INPUT_MESSAGE}", file=sys.stderr)
            status = 2
            continue
        result = compute_averages(text, options.accept_alt_degree_glyph)
        if args.json:
            out = render_json(result, options.include_count_in_json)
        else:
            out = format_line(result.day_average, result.night_average, result.count)
        print(f"{_prefix(name, many)}{out}")
    return status

def cmd_remote(args) -> int:
    texts = read_texts(args.files)
    try:
        client = TemperatureAverageClient(endpoint=args.endpoint)
        results = average_all(texts, client=client, max_workers=args.workers)
    except TemperatureAverageAPIError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    many = len(texts) > 1
    for name, data in results:
        print(f"{_prefix(name, many)}{format_line(data['dayAvg'], data['nightAvg'], data.get('count'))}")
    return 0

def cmd_serve(args) -> int:
    from .app import create_app

    try:
        app = create_app()
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    app.run(host=args.host, port=args.port)
    return 0

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="daynightavg",
        description="Average day/night temperature pairs (25°/14°) found in forecast text",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command")

    compute_p = sub.add_parser("compute", help="Compute averages locally")
    compute_p.add_argument("files", nargs="*", help="Forecast text files (default: stdin)")
    compute_p.add_argument("--variant", choices=["lenient", "minimal"], help="Override DAYNIGHT_VARIANT")
    compute_p.add_argument("--json", action="store_true", help="Print the JSON rendering")
    compute_p.set_defaults(func=cmd_compute)

    remote_p = sub.add_parser("remote", help="Post the text to a deployed endpoint")
    remote_p.add_argument("files", nargs="*", help="Forecast text files (default: stdin)")
    remote_p.add_argument("--endpoint", help="Endpoint URL (default: DAYNIGHT_ENDPOINT)")
    remote_p.add_argument("--workers", type=int, default=3, help="Concurrent requests")
    remote_p.set_defaults(func=cmd_remote)

    serve_p = sub.add_parser("serve", help="Run the web app")
    serve_p.add_argument("--host", default="127.0.0.1")
    serve_p.add_argument("--port", type=int, default=5000)
    serve_p.set_defaults(func=cmd_serve)

    return parser

def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        return 1
    return args.func(args)

if __name__ == "__main__":
    sys.exit(main())
