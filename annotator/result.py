"""Core result data structures for the annotator."""

from __future__ import annotations

from dataclasses import dataclass, field, asdict
from typing import Dict, List, Optional, Tuple

from .severity import SEVERITY_ORDER, Severity


@dataclass(frozen=True)
class RawFinding:
    """A rule match anchored to a contiguous, 1-based line range."""

    rule_id: str
    start_line: int
    end_line: int
    message: str

    @property
    def key(self) -> Tuple[str, int, int]:
        return (self.rule_id, self.start_line, self.end_line)


@dataclass(frozen=True)
class Annotation:
    """Final, single-line unit handed to an output sink."""

    line: int
    rule_id: str
    title: str
    severity: Severity
    importance: int
    message: str
    recommendation: str = ""

    def to_dict(self) -> Dict[str, object]:
        data = asdict(self)
        data["severity"] = self.severity.value
        return data


@dataclass(frozen=True)
class Diagnostic:
    """Record a contained failure that did not abort the run."""

    kind: str
    message: str
    rule_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Optional[str]]:
        return asdict(self)


@dataclass
class Summary:
    """Aggregate annotation counts by severity."""

    critical: int = 0
    high: int = 0
    medium: int = 0
    low: int = 0
    info: int = 0

    def increment(self, severity: Severity) -> None:
        attr = severity.value.lower()
        setattr(self, attr, getattr(self, attr) + 1)

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)

    def as_rows(self) -> List[Tuple[str, int]]:
        """Return severity/count pairs ordered for reporting."""

        return [(severity.value, getattr(self, severity.value.lower())) for severity in SEVERITY_ORDER]

    @property
    def total(self) -> int:
        return sum(getattr(self, severity.value.lower()) for severity in SEVERITY_ORDER)


@dataclass
class AnnotationResult:
    """Bundle the emitted annotations with the diagnostics side-channel."""

    annotations: List[Annotation] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)
    total_findings: int = 0

    @property
    def summary(self) -> Summary:
        summary = Summary()
        for annotation in self.annotations:
            summary.increment(annotation.severity)
        return summary

    @property
    def passed(self) -> bool:
        return self.exit_code() == 0

    @property
    def degraded(self) -> bool:
        return bool(self.diagnostics)

    def exit_code(self) -> int:
        return max((annotation.severity.exit_priority for annotation in self.annotations), default=0)

    def to_dict(self) -> Dict[str, object]:
        return {
            "summary": self.summary.to_dict(),
            "annotations": [annotation.to_dict() for annotation in self.annotations],
            "diagnostics": [diagnostic.to_dict() for diagnostic in self.diagnostics],
            "total_findings": self.total_findings,
            "passed": self.passed,
        }
