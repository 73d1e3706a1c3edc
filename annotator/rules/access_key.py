"""Flag AWS access key identifiers written anywhere in the document."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Iterator

from annotator.result import RawFinding
from annotator.severity import Severity

if TYPE_CHECKING:
    from annotator.lines import IndexedDocument

AWS_ACCESS_KEY_PATTERN = re.compile(r"(?<![A-Z0-9])(?:A3T[A-Z0-9]|AKIA|ASIA)[0-9A-Z]{16}(?![A-Z0-9])")
DOCUMENTATION_MARKER = "EXAMPLE"


def mask_key(key: str) -> str:
    return f"{key[:4]}...{key[-4:]}"


class PlaintextAccessKeyRule:
    """Works line by line so it still fires on templates that fail to parse."""

    id = "plaintext-access-key"
    title = "AWS access key in plain text"
    importance = Severity.CRITICAL
    recommendation = (
        "Rotate the key immediately, remove it from the template and history, and grant access "
        "through the function execution role or a Secrets Manager reference instead."
    )

    def evaluate(self, document: "IndexedDocument") -> Iterator[RawFinding]:
        for source_line in document.lines:
            for match in AWS_ACCESS_KEY_PATTERN.finditer(source_line.text):
                key = match.group(0)
                if DOCUMENTATION_MARKER in key:
                    continue
                yield RawFinding(
                    rule_id=self.id,
                    start_line=source_line.line_number,
                    end_line=source_line.line_number,
                    message=f"Access key id {mask_key(key)} is committed in plain text",
                )
