# related_pages/cli.py
from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from .config import LOG_LEVEL, PRESETS, VAULT_DIR, build_options, configure_logging
from .errors import ConfigurationError
from .render import render_results
from .scoring import compute_related
from .trace import MarkdownTraceSink
from .vault import load_csv_store, load_vault


def _decode_value(text: str) -> Any:
    """Read one value the way front matter would (``1`` -> int, ``0.5`` -> float), else keep the text."""
    try:
        value = yaml.safe_load(text)
    except yaml.YAMLError:
        return text
    if isinstance(value, (str, int, float)) and not isinstance(value, bool):
        return value
    return text


def parse_criterion(text: str) -> tuple[str, Any]:
    """
    ``field=true`` -> use current value, ``field=false`` -> ignore,
    ``field=a`` -> explicit scalar, ``field=a,b`` -> explicit list.
    """
    if "=" not in text:
        raise argparse.ArgumentTypeError(f"expected field=value, got {text!r}")
    name, raw = text.split("=", 1)
    name, raw = name.strip(), raw.strip()
    if not name:
        raise argparse.ArgumentTypeError(f"missing field name in {text!r}")
    low = raw.lower()
    if low == "true":
        return name, True
    if low in ("false", "none", ""):
        return name, False
    values = [_decode_value(v.strip()) for v in raw.split(",") if v.strip()]
    if not values:
        return name, False
    return name, values if len(values) > 1 else values[0]


def parse_include_path(text: str) -> Union[bool, str]:
    low = text.strip().lower()
    if low == "strict":
        return "strict"
    if low in ("true", "yes", "1"):
        return True
    if low in ("false", "no", "0"):
        return False
    raise argparse.ArgumentTypeError(f"include-path must be true, false or strict, got {text!r}")


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="List pages related to one note of a vault.")
    ap.add_argument("--vault", type=Path, default=VAULT_DIR,
                    help="Vault root directory (or a CSV export with a 'path' column)")
    ap.add_argument("--page", required=True, help="Vault-relative path of the reference note")
    ap.add_argument("--criteria", type=parse_criterion, action="append", default=None,
                    metavar="FIELD=VALUE", help="Match rule; repeatable")
    ap.add_argument("--include-path", type=parse_include_path, default=None)
    ap.add_argument("--strict-path", action="store_true", default=None)
    ap.add_argument("--min-score", type=float, default=None)
    ap.add_argument("--max-results", type=int, default=None)
    ap.add_argument("--score-multiplier", type=float, default=None)
    ap.add_argument("--preset", choices=sorted(PRESETS), default=None)
    ap.add_argument("--header", default="Related Pages")
    ap.add_argument("--debug", action="store_true", help="Print the scoring report")
    ap.add_argument("--log-level", default=LOG_LEVEL)
    return ap


def options_from_args(args: argparse.Namespace) -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    if args.criteria:
        overrides["match_criteria"] = dict(args.criteria)
    for key in ("include_path", "strict_path", "min_score", "max_results", "score_multiplier"):
        value = getattr(args, key)
        if value is not None:
            overrides[key] = value
    return overrides


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    try:
        if args.vault.is_file():
            store = load_csv_store(args.vault)
        else:
            store = load_vault(args.vault)
    except (FileNotFoundError, NotADirectoryError) as e:
        print(f"error: {e}")
        return 2

    try:
        reference = store.get_by_path(args.page)
    except KeyError as e:
        print(f"error: {e.args[0]}")
        return 2

    try:
        opts = build_options(PRESETS.get(args.preset), options_from_args(args))
    except ConfigurationError as e:
        print(f"error: invalid options: {e}")
        return 2

    tracer = MarkdownTraceSink() if args.debug else None
    results = compute_related(reference, store, opts, tracer=tracer)

    if tracer is not None:
        print(tracer.render())
        print()
    print(render_results(results, header_text=args.header))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
