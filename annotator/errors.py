"""Exception hierarchy for the annotator."""

from __future__ import annotations

from typing import Optional


class AnnotatorError(Exception):
    """Base exception for all annotator errors."""


class CatalogError(AnnotatorError):
    """Raised when the rule catalog cannot be loaded or is inconsistent."""


class RuleEvaluationError(AnnotatorError):
    """Raised when a single rule fails while evaluating a document."""

    def __init__(self, message: str, rule_id: Optional[str] = None) -> None:
        self.rule_id = rule_id
        super().__init__(message)


class ConfigError(AnnotatorError, ValueError):
    """Raised when annotator configuration is invalid."""
