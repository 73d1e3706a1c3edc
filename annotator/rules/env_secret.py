"""Detect hardcoded secrets in Lambda environment variables."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Iterator, Optional

import yaml

from annotator.result import RawFinding
from annotator.severity import Severity
from annotator.utils.iac import (
    FUNCTION_TYPES,
    is_intrinsic,
    iter_mapping,
    iter_resources,
    mapping_path,
    node_span,
)

if TYPE_CHECKING:
    from annotator.lines import IndexedDocument

KEY_PATTERN = re.compile(r"(?i)(secret|token|api[_-]?key|password|passwd|access[_-]?key|private|credential|auth)")
LONG_TOKEN_PATTERN = re.compile(r"[A-Za-z0-9_\-]{24,}")
AWS_ACCESS_KEY_PATTERN = re.compile(r"(?:A3T|AKIA|ASIA)[0-9A-Z]{16}")
JWT_PATTERN = re.compile(r"eyJ[A-Za-z0-9_\-]+?\.[A-Za-z0-9_\-]+?\.[A-Za-z0-9_\-]+")
PLACEHOLDER_HINTS = ("dummy", "example", "placeholder", "sample", "changeme", "resolve:")

INDICATOR_LABELS = {
    "aws_access_key": "an AWS access key",
    "jwt": "a JSON Web Token",
    "long_token": "a long secret-like token",
}


def classify_value(name: str, value: str) -> Optional[str]:
    """Return the kind of secret ``value`` resembles, or ``None``.

    Long opaque tokens only count when the variable name also suggests a
    secret; key ids and JWTs count on their own.
    """

    lowered = value.lower()
    if any(hint in lowered for hint in PLACEHOLDER_HINTS):
        return None
    if AWS_ACCESS_KEY_PATTERN.search(value):
        return "aws_access_key"
    if JWT_PATTERN.search(value):
        return "jwt"
    if LONG_TOKEN_PATTERN.search(value) and KEY_PATTERN.search(name):
        return "long_token"
    return None


class EnvSecretRule:
    """Flag suspicious environment secrets in function definitions."""

    id = "env-hardcoded-secret"
    title = "Hardcoded secret value in Lambda environment"
    importance = Severity.HIGH
    recommendation = (
        "Move sensitive values to AWS Secrets Manager or SSM Parameter Store with KMS encryption. "
        "Reference them via Ref/ImportValue or {{resolve:secretsmanager:...}} in templates, "
        "and load them at runtime instead of hardcoding."
    )

    def evaluate(self, document: "IndexedDocument") -> Iterator[RawFinding]:
        root = document.template
        globals_variables = mapping_path(root, "Globals", "Function", "Environment", "Variables")
        yield from self._scan_variables("Globals", globals_variables)

        for logical_id, _key_node, resource, resource_type in iter_resources(root):
            if resource_type not in FUNCTION_TYPES:
                continue
            variables = mapping_path(resource, "Properties", "Environment", "Variables")
            yield from self._scan_variables(logical_id, variables)

    def _scan_variables(self, owner: str, variables: Optional[yaml.Node]) -> Iterator[RawFinding]:
        for name, key_node, value_node in iter_mapping(variables):
            candidate = self._candidate_value(value_node)
            if candidate is None:
                continue
            indicator = classify_value(name, candidate)
            if indicator is None:
                continue
            start, end = node_span(value_node, key_node)
            yield RawFinding(
                rule_id=self.id,
                start_line=start,
                end_line=end,
                message=f"{owner}: environment variable {name} holds {INDICATOR_LABELS[indicator]}",
            )

    def _candidate_value(self, node: yaml.Node) -> Optional[str]:
        if is_intrinsic(node) or not isinstance(node, yaml.ScalarNode):
            return None
        return node.value

