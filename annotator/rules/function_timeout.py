"""Flag functions that fall back to the platform default timeout."""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterator

from annotator.result import RawFinding
from annotator.severity import Severity
from annotator.utils.iac import FUNCTION_TYPES, iter_resources, mapping_path, mapping_value, node_span

if TYPE_CHECKING:
    from annotator.lines import IndexedDocument

DEFAULT_TIMEOUT_SECONDS = 3


class FunctionTimeoutRule:
    id = "function-missing-timeout"
    title = "Function relies on the default timeout"
    importance = Severity.LOW
    recommendation = (
        "Set Timeout explicitly on the function (or under Globals.Function for SAM) so slow "
        "dependencies fail fast and retries stay predictable."
    )

    def evaluate(self, document: "IndexedDocument") -> Iterator[RawFinding]:
        root = document.template
        global_timeout = mapping_path(root, "Globals", "Function", "Timeout")
        for logical_id, key_node, resource, resource_type in iter_resources(root):
            if resource_type not in FUNCTION_TYPES:
                continue
            if resource_type == "AWS::Serverless::Function" and global_timeout is not None:
                continue
            if mapping_value(mapping_value(resource, "Properties"), "Timeout") is not None:
                continue
            start, end = node_span(resource, key_node)
            yield RawFinding(
                rule_id=self.id,
                start_line=start,
                end_line=end,
                message=f"{logical_id}: no Timeout set, defaults to {DEFAULT_TIMEOUT_SECONDS} seconds",
            )
