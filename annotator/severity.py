"""Severity definitions for annotations."""

from __future__ import annotations

from enum import Enum
from typing import Sequence


class Severity(str, Enum):
    """Enumerate the supported severity levels for rules."""

    CRITICAL = "CRITICAL"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"
    INFO = "INFO"

    @property
    def exit_priority(self) -> int:
        """Return an integer ranking to drive exit code decisions."""

        ordering = {
            Severity.CRITICAL: 2,
            Severity.HIGH: 2,
            Severity.MEDIUM: 1,
            Severity.LOW: 0,
            Severity.INFO: 0,
        }
        return ordering[self]

    @classmethod
    def parse(cls, value: str) -> "Severity":
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise ValueError(f"Unknown severity: {value!r}") from None


SEVERITY_ORDER: Sequence[Severity] = (
    Severity.CRITICAL,
    Severity.HIGH,
    Severity.MEDIUM,
    Severity.LOW,
    Severity.INFO,
)
