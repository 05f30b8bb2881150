from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from visgram.core.errors import VisgramError
from visgram.core.hashing import hash_spec
from visgram.core.serde import json_dumps_pretty
from visgram.io.config import VisSettings
from visgram.io.errors import IoError
from visgram.io.read import load_spec

log = logging.getLogger(__name__)


def _configure_logging(level: str | None) -> None:
    level = (level or VisSettings.load().log_level).upper()
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def _base_parser(prog: str, description: str) -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog=prog, description=description)
    p.add_argument("path", type=str, help="Path to a saved spec (JSON).")
    p.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default from settings).",
    )
    return p


def _cmd_show(argv: list[str]) -> int:
    p = _base_parser("show", "Print a saved spec, optionally only some top-level pieces.")
    p.add_argument(
        "--pieces",
        nargs="+",
        default=None,
        help="Top-level keys to print, e.g. --pieces scales marks.",
    )
    args = p.parse_args(argv)
    _configure_logging(args.log_level)

    spec = load_spec(Path(args.path)).to_dict()
    if args.pieces:
        unknown = [k for k in args.pieces if k not in spec]
        if unknown:
            print(f"[ERROR] unknown pieces {unknown}; choose from {list(spec)}", file=sys.stderr)
            return 1
        spec = {k: spec[k] for k in args.pieces}
    print(json_dumps_pretty(spec, indent=VisSettings.load().json_indent))
    return 0


def _cmd_validate(argv: list[str]) -> int:
    p = _base_parser("validate", "Validate a saved spec and print a short summary.")
    args = p.parse_args(argv)
    _configure_logging(args.log_level)

    spec = load_spec(Path(args.path))
    print(
        f"[INFO] {args.path}: {len(spec.data)} datasets, {len(spec.scales)} scales, "
        f"{len(spec.marks)} marks, {len(spec.axes)} axes, {len(spec.legends)} legends"
    )
    print(f"[INFO] sha256 {hash_spec(spec.to_dict())}")
    return 0


def build_argparser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="visgram", description="visgram spec utilities CLI.")
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("show")
    sub.add_parser("validate")
    return p


def main(argv: list[str] | None = None) -> None:
    argv = list(sys.argv[1:] if argv is None else argv)
    if not argv:
        build_argparser().print_help()
        return
    cmd, rest = argv[0], argv[1:]
    try:
        if cmd == "show":
            code = _cmd_show(rest)
        elif cmd == "validate":
            code = _cmd_validate(rest)
        else:
            print(f"Unknown command: {cmd}", file=sys.stderr)
            code = 2
    except (VisgramError, IoError, FileNotFoundError) as exc:
        log.debug("command %s failed", cmd, exc_info=True)
        print(f"[ERROR] {exc}", file=sys.stderr)
        code = 1
    raise SystemExit(code)


if __name__ == "__main__":
    main()
