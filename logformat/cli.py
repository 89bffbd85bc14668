from __future__ import annotations

import argparse
import logging
import sys

from .config import Config, load_config
from .locales import available_languages
from .processor import Processor


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="logformat", description="Check log line formats against sample lines.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    check = sub.add_parser("check", help="Parse the first lines of a log with a format profile")
    check.add_argument("profile", type=str, help="Path to YAML format profile")
    check.add_argument("input", type=str, nargs="?", default="-", help="Log file path or '-' for stdin")
    check.add_argument("-o", "--output", type=str, default="-", help="Output file path or '-' for stdout")
    check.add_argument("--format", dest="line_format", type=str, default=None, help="Line format overriding the profile's")
    check.add_argument("--locale", type=str, default=None, help="Locale overriding the profile's")
    check.add_argument("--lines", type=int, default=None, help="Number of sample lines to check")

    sub.add_parser("locales", help="List languages and their locale identifiers")
    return parser


def _check(args: argparse.Namespace) -> int:
    try:
        cfg: Config = load_config(args.profile)
        overrides = {"locale": args.locale, "sample_lines": args.lines}
        cfg = cfg.model_copy(update={k: v for k, v in overrides.items() if v is not None})
        if cfg.sample_lines < 1:
            raise ValueError("--lines must be at least 1")
        processor = Processor(config=cfg)
    except (OSError, ValueError) as e:
        logging.getLogger("logformat").error("%s", e)
        return 2

    src = dst = None
    try:
        src = sys.stdin if args.input == "-" else open(args.input, "r", encoding="utf-8")
        dst = sys.stdout if args.output == "-" else open(args.output, "w", encoding="utf-8")
    except OSError as e:
        if src is not None and src is not sys.stdin:
            src.close()
        logging.getLogger("logformat").error("%s", e)
        return 2

    try:
        report = processor.process_stream(src, dst, template=args.line_format)
    finally:
        if src is not sys.stdin:
            src.close()
        if dst is not sys.stdout:
            dst.close()
    if report.error:
        return 2
    return 0 if report.ok else 1


def _locales() -> int:
    for name, identifier in available_languages().items():
        print(f"{name}\t{identifier}")
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )
    if args.command == "locales":
        return _locales()
    return _check(args)


if __name__ == "__main__":
    raise SystemExit(main())
