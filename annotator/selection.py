"""Order findings by importance and keep the most important few."""

from __future__ import annotations

from typing import Callable, Iterable, List, Set, Tuple

from .result import RawFinding


def dedupe_findings(findings: Iterable[RawFinding]) -> List[RawFinding]:
    """Collapse findings with the same rule and range, keeping the first."""

    seen: Set[Tuple[str, int, int]] = set()
    unique: List[RawFinding] = []
    for finding in findings:
        if finding.key in seen:
            continue
        seen.add(finding.key)
        unique.append(finding)
    return unique


def select_findings(
    findings: Iterable[RawFinding],
    limit: int,
    rank: Callable[[RawFinding], int],
) -> List[RawFinding]:
    """Return at most ``limit`` findings, most important first.

    ``rank`` maps a finding to its importance (lower is more important). The
    sort is stable, so equal ranks keep the order the findings arrived in,
    which is catalog order and then the order each rule produced them.
    """

    ordered = sorted(dedupe_findings(findings), key=rank)
    return ordered[: max(limit, 0)]
