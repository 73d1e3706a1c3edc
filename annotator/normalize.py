"""Turn selected findings into single-line annotations."""

from __future__ import annotations

from typing import Callable, Iterable, List

from .result import Annotation, RawFinding
from .rules import RuleCatalog
from .severity import Severity


def normalize_findings(
    findings: Iterable[RawFinding],
    catalog: RuleCatalog,
    importance_of: Callable[[Severity], int],
) -> List[Annotation]:
    """Anchor each finding on its first line and attach rule metadata."""

    annotations: List[Annotation] = []
    for finding in findings:
        rule = catalog.get(finding.rule_id)
        severity = rule.importance if rule is not None else Severity.INFO
        annotations.append(
            Annotation(
                line=finding.start_line,
                rule_id=finding.rule_id,
                title=getattr(rule, "title", finding.rule_id),
                severity=severity,
                importance=importance_of(severity),
                message=finding.message,
                recommendation=getattr(rule, "recommendation", ""),
            )
        )
    return annotations
