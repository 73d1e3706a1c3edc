"""Render annotation results for the console, JSON files and CI logs."""

from __future__ import annotations

import json
from typing import List

from .result import AnnotationResult
from .severity import Severity

GITHUB_LEVELS = {
    Severity.CRITICAL: "error",
    Severity.HIGH: "error",
    Severity.MEDIUM: "warning",
    Severity.LOW: "notice",
    Severity.INFO: "notice",
}


def format_text(result: AnnotationResult, path: str = "<stdin>") -> str:
    """Create a human-readable summary table for console output."""

    lines: List[str] = []
    lines.append("Annotation Summary")
    lines.append("=" * 40)
    header = f"{'Severity':<10} | {'Count':>5}"
    lines.append(header)
    lines.append("-" * len(header))
    for severity, count in result.summary.as_rows():
        lines.append(f"{severity:<10} | {count:>5}")
    lines.append("-" * len(header))
    status = "PASS" if result.passed else "FAIL"
    lines.append(f"Status    : {status}")
    lines.append(f"Findings  : {result.total_findings} ({len(result.annotations)} shown)")

    if result.annotations:
        lines.append("")
        lines.append("Annotations")
        lines.append("-" * 40)
        for annotation in result.annotations:
            lines.append(f"{path}:{annotation.line}: [{annotation.severity.value}] {annotation.rule_id} {annotation.message}")
            lines.append(f"  {annotation.title}")

    if result.diagnostics:
        lines.append("")
        lines.append("Diagnostics")
        lines.append("-" * 40)
        for diagnostic in result.diagnostics:
            owner = f" {diagnostic.rule_id}" if diagnostic.rule_id else ""
            lines.append(f"[{diagnostic.kind}]{owner} {diagnostic.message}")
    return "\n".join(lines)


def format_json(result: AnnotationResult, path: str = "<stdin>") -> str:
    payload = {"path": path}
    payload.update(result.to_dict())
    return json.dumps(payload, indent=2)


def _escape_data(value: str) -> str:
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def _escape_property(value: str) -> str:
    return _escape_data(value).replace(":", "%3A").replace(",", "%2C")


def format_github(result: AnnotationResult, path: str = "<stdin>") -> str:
    """Emit one GitHub Actions workflow command per annotation."""

    commands = []
    for annotation in result.annotations:
        level = GITHUB_LEVELS[annotation.severity]
        commands.append(
            f"::{level} file={_escape_property(path)},line={annotation.line},"
            f"title={_escape_property(annotation.rule_id)}::{_escape_data(annotation.message)}"
        )
    for diagnostic in result.diagnostics:
        commands.append(f"::debug::{_escape_data(f'{diagnostic.kind}: {diagnostic.message}')}")
    return "\n".join(commands)


FORMATTERS = {
    "text": format_text,
    "json": format_json,
    "github": format_github,
}
