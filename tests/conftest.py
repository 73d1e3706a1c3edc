from typing import Iterable, List, Optional, Tuple

import pytest

from annotator.result import RawFinding
from annotator.severity import Severity


class StubRule:
    """Rule double that returns fixed line ranges or raises."""

    def __init__(
        self,
        rule_id: str,
        importance: Severity,
        spans: Iterable[Tuple[int, int]] = (),
        error: Optional[Exception] = None,
    ) -> None:
        self.id = rule_id
        self.title = f"{rule_id} title"
        self.importance = importance
        self.recommendation = f"fix {rule_id}"
        self.spans: List[Tuple[int, int]] = list(spans)
        self.error = error
        self.calls = 0

    def evaluate(self, document):
        self.calls += 1
        for start, end in self.spans:
            yield RawFinding(self.id, start, end, f"{self.id} at {start}")
        if self.error is not None:
            raise self.error


@pytest.fixture
def make_rule():
    return StubRule


@pytest.fixture
def numbered_text():
    def build(count: int, overrides=None) -> str:
        overrides = overrides or {}
        return "\n".join(overrides.get(number, f"line {number}") for number in range(1, count + 1)) + "\n"

    return build
