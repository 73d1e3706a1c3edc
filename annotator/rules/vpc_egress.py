"""Detect risky Lambda network exposure in SAM/CloudFormation templates."""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterator, Optional

import yaml

from annotator.result import RawFinding
from annotator.severity import Severity
from annotator.utils.iac import (
    FUNCTION_TYPES,
    is_intrinsic,
    iter_mapping,
    iter_resources,
    iter_sequence,
    mapping_path,
    mapping_value,
    node_span,
)

if TYPE_CHECKING:
    from annotator.lines import IndexedDocument

OPEN_CIDRS = {"CidrIp": "0.0.0.0/0", "CidrIpv6": "::/0"}
SECURITY_GROUP_DIRECTIONS = {"SecurityGroupEgress": "egress", "SecurityGroupIngress": "ingress"}
STANDALONE_RULE_TYPES = {
    "AWS::EC2::SecurityGroupEgress": "egress",
    "AWS::EC2::SecurityGroupIngress": "ingress",
}

RISK_GUIDANCE = (
    "Restrict Lambda egress paths. Use interface VPC endpoints for AWS APIs (Secrets Manager, SSM, STS), "
    "apply egress allow-lists in security groups or AWS Network Firewall, and favor proxy-controlled NAT flows. "
    "Aligned controls: NIST SP 800-53 SC-7, AWS Well-Architected Security - Network Controls."
)


def open_cidr(entry: yaml.Node) -> Optional[str]:
    for key, cidr in OPEN_CIDRS.items():
        node = mapping_value(entry, key)
        if isinstance(node, yaml.ScalarNode) and node.value == cidr:
            return cidr
    return None


class OpenEgressCidrRule:
    """Flag security group rules that reach or accept any address."""

    id = "open-egress-cidr"
    title = "Security group rule open to the internet"
    importance = Severity.HIGH
    recommendation = RISK_GUIDANCE

    def evaluate(self, document: "IndexedDocument") -> Iterator[RawFinding]:
        for logical_id, _key_node, resource, resource_type in iter_resources(document.template):
            properties = mapping_value(resource, "Properties")
            if resource_type == "AWS::EC2::SecurityGroup":
                for key, direction in SECURITY_GROUP_DIRECTIONS.items():
                    for entry in iter_sequence(mapping_value(properties, key)):
                        yield from self._check_entry(logical_id, direction, entry)
            elif resource_type in STANDALONE_RULE_TYPES:
                yield from self._check_entry(logical_id, STANDALONE_RULE_TYPES[resource_type], properties)

    def _check_entry(self, logical_id: str, direction: str, entry: Optional[yaml.Node]) -> Iterator[RawFinding]:
        if not isinstance(entry, yaml.MappingNode):
            return
        cidr = open_cidr(entry)
        if cidr is None:
            return
        start, end = node_span(entry)
        protocol = mapping_value(entry, "IpProtocol")
        protocol_label = protocol.value if isinstance(protocol, yaml.ScalarNode) else "-1"
        yield RawFinding(
            rule_id=self.id,
            start_line=start,
            end_line=end,
            message=f"{logical_id}: {direction} rule allows {cidr} (protocol {protocol_label})",
        )


class VpcSecurityGroupRule:
    """Ensure Lambda VPC attachments carry an explicit security group."""

    id = "vpc-missing-security-group"
    title = "No security group attached to Lambda VPC config"
    importance = Severity.MEDIUM
    recommendation = "Attach a restrictive security group with explicit egress allow-list before deployment. " + RISK_GUIDANCE

    def evaluate(self, document: "IndexedDocument") -> Iterator[RawFinding]:
        root = document.template
        yield from self._check_container("Globals", mapping_path(root, "Globals", "Function"))
        for logical_id, _key_node, resource, resource_type in iter_resources(root):
            if resource_type not in FUNCTION_TYPES:
                continue
            yield from self._check_container(logical_id, mapping_value(resource, "Properties"))

    def _check_container(self, owner: str, container: Optional[yaml.Node]) -> Iterator[RawFinding]:
        for name, key_node, vpc_config in iter_mapping(container):
            if name != "VpcConfig" or is_intrinsic(vpc_config):
                continue
            group_ids = mapping_value(vpc_config, "SecurityGroupIds")
            if group_ids is not None and (is_intrinsic(group_ids) or list(iter_sequence(group_ids))):
                continue
            start, end = node_span(vpc_config, key_node)
            yield RawFinding(
                rule_id=self.id,
                start_line=start,
                end_line=end,
                message=f"{owner}: VpcConfig has no SecurityGroupIds",
            )
