"""Drop findings anchored on lines silenced by an ignore-next-line directive."""

from __future__ import annotations

from typing import AbstractSet, Iterable, List

from .result import RawFinding


def filter_suppressed(findings: Iterable[RawFinding], suppressed: AbstractSet[int]) -> List[RawFinding]:
    """Return ``findings`` minus those whose first line is suppressed.

    Suppression is decided by the start line alone and removes the whole
    finding, however many lines it spans.
    """

    return [finding for finding in findings if finding.start_line not in suppressed]
