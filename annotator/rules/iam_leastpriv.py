"""Detect overly permissive IAM policy statements in SAM/CloudFormation templates."""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterator, List, Tuple

import yaml

from annotator.result import RawFinding
from annotator.severity import Severity
from annotator.utils.iac import (
    iter_resources,
    iter_sequence,
    mapping_path,
    mapping_value,
    node_span,
    scalar_values,
)

if TYPE_CHECKING:
    from annotator.lines import IndexedDocument

SECURITY_CRITICAL_PREFIXES = (
    "iam:",
    "kms:",
    "sts:",
    "organizations:",
)
POLICY_DOCUMENT_TYPES = frozenset({"AWS::IAM::Policy", "AWS::IAM::ManagedPolicy"})

LEAST_PRIVILEGE_GUIDANCE = (
    "Adopt least privilege by scoping actions/resources and applying conditions. "
    "Reference NIST SP 800-53 AC-6, ISO/IEC 27001 A.9, and AWS Well-Architected (Security Pillar - IAM)."
)


def _statements_of(document_node: yaml.Node) -> Iterator[yaml.Node]:
    for statement in iter_sequence(mapping_value(document_node, "Statement")):
        if isinstance(statement, yaml.MappingNode):
            yield statement


def iter_policy_statements(root: yaml.Node) -> Iterator[Tuple[str, yaml.Node]]:
    """Yield ``(logical_id, statement_node)`` for every inline policy statement.

    Trust policies are left out; they grant ``sts:AssumeRole`` to principals
    rather than permissions to the role.
    """

    for logical_id, _key_node, resource, resource_type in iter_resources(root):
        properties = mapping_value(resource, "Properties")
        if resource_type == "AWS::Serverless::Function":
            for policy in iter_sequence(mapping_value(properties, "Policies")):
                # managed policy names and SAM policy templates are not analyzable here
                if isinstance(policy, yaml.MappingNode):
                    for statement in _statements_of(policy):
                        yield logical_id, statement
        elif resource_type == "AWS::IAM::Role":
            for policy in iter_sequence(mapping_value(properties, "Policies")):
                for statement in _statements_of(mapping_value(policy, "PolicyDocument")):
                    yield logical_id, statement
        elif resource_type in POLICY_DOCUMENT_TYPES:
            for statement in _statements_of(mapping_path(properties, "PolicyDocument")):
                yield logical_id, statement


def is_allow(statement: yaml.Node) -> bool:
    effect = mapping_value(statement, "Effect")
    if effect is None:
        return True
    return isinstance(effect, yaml.ScalarNode) and effect.value.upper() == "ALLOW"


def wildcard_actions(statement: yaml.Node) -> List[str]:
    flagged = []
    for action in scalar_values(mapping_value(statement, "Action")):
        lowered = action.lower()
        if lowered == "*":
            flagged.append(action)
        elif "*" in lowered and lowered.startswith(SECURITY_CRITICAL_PREFIXES):
            flagged.append(action)
    return flagged


class IamWildcardActionRule:
    """Warn when a statement grants every action or wildcards a security service."""

    id = "iam-wildcard-action"
    title = "IAM statement allows wildcard actions"
    importance = Severity.CRITICAL
    recommendation = LEAST_PRIVILEGE_GUIDANCE

    def evaluate(self, document: "IndexedDocument") -> Iterator[RawFinding]:
        for logical_id, statement in iter_policy_statements(document.template):
            if not is_allow(statement):
                continue
            actions = wildcard_actions(statement)
            if not actions:
                continue
            start, end = node_span(statement)
            yield RawFinding(
                rule_id=self.id,
                start_line=start,
                end_line=end,
                message=f"{logical_id}: Action allows wildcard or security-critical service scope ({', '.join(actions)})",
            )


class IamWildcardResourceRule:
    """Warn when an allow statement applies to every resource."""

    id = "iam-wildcard-resource"
    title = "IAM statement targets all resources"
    importance = Severity.HIGH
    recommendation = (
        LEAST_PRIVILEGE_GUIDANCE
        + " Replace Resource: '*' with the ARNs the function actually touches."
    )

    def evaluate(self, document: "IndexedDocument") -> Iterator[RawFinding]:
        for logical_id, statement in iter_policy_statements(document.template):
            if not is_allow(statement):
                continue
            resource_node = mapping_value(statement, "Resource")
            if "*" not in scalar_values(resource_node):
                continue
            start, end = node_span(statement)
            actions = list(scalar_values(mapping_value(statement, "Action")))
            yield RawFinding(
                rule_id=self.id,
                start_line=start,
                end_line=end,
                message=f"{logical_id}: Resource is wildcarded for actions {actions or ['*']}",
            )
