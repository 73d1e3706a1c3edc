"""Command-line entry point for the Guardrails annotator."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List

from .config import DEFAULT_CONFIG_FILENAME, load_config
from .errors import ConfigError
from .pipeline import annotate
from .reporting import FORMATTERS
from .result import AnnotationResult
from .rules import load_catalog
from .utils import configure_logging, read_text_file

STDIN_MARKER = "-"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="guardrails-annotate",
        description="Annotate a SAM/CloudFormation template with its most important best-practice findings.",
    )
    parser.add_argument(
        "template",
        nargs="?",
        help="Path to the template to annotate, or '-' to read standard input.",
    )
    parser.add_argument(
        "--config",
        default=None,
        help=f"YAML configuration file (defaults to {DEFAULT_CONFIG_FILENAME} when present).",
    )
    parser.add_argument(
        "--max-annotations",
        type=int,
        default=None,
        help="Maximum number of annotations to emit (defaults to 3).",
    )
    parser.add_argument(
        "--disable",
        dest="disabled_rules",
        action="append",
        default=[],
        help="Rule identifier to skip (repeatable).",
    )
    parser.add_argument(
        "--format",
        choices=sorted(FORMATTERS),
        default="text",
        help="Output format (defaults to text).",
    )
    parser.add_argument(
        "--out",
        "--output",
        dest="output_path",
        type=str,
        default=None,
        help="Write the report to this path instead of standard output.",
    )
    parser.add_argument(
        "--list-rules",
        action="store_true",
        help="List the built-in rules in catalog order and exit.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase log verbosity (repeatable).",
    )
    return parser


def list_rules() -> str:
    lines = []
    for rule in load_catalog():
        lines.append(f"{rule.id:<28} {rule.importance.value:<9} {rule.title}")
    return "\n".join(lines)


def write_output(report: str, output_path: str | None) -> None:
    if output_path:
        output_file = Path(output_path)
        output_file.parent.mkdir(parents=True, exist_ok=True)
        output_file.write_text(report + "\n", encoding="utf-8")
        print(f"Report written to {output_path}")
    else:
        print(report)


def run(template: str, config_path: str | None, max_annotations: int | None, disabled: List[str]) -> AnnotationResult:
    config = load_config(Path(config_path) if config_path else None)
    config = config.with_overrides(
        max_annotations=max_annotations,
        disabled_rules=(config.disabled_rules | frozenset(disabled)) if disabled else None,
    )
    if template == STDIN_MARKER:
        text = sys.stdin.read()
    else:
        template_path = Path(template)
        if not template_path.is_file():
            raise SystemExit(f"Failed to load template: {template}")
        text = read_text_file(template_path)
    return annotate(text, load_catalog, config)


def main(argv: List[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    if args.list_rules:
        print(list_rules())
        return 0
    if not args.template:
        parser.error("the template argument is required")

    try:
        result = run(args.template, args.config, args.max_annotations, args.disabled_rules)
    except ConfigError as exc:
        parser.error(str(exc))

    path = "<stdin>" if args.template == STDIN_MARKER else args.template
    write_output(FORMATTERS[args.format](result, path), args.output_path)
    return result.exit_code()


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
