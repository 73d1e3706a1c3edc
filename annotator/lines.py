"""Split documents into numbered lines and locate suppression directives."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from functools import cached_property
from typing import FrozenSet, Iterable, List, Optional, Tuple, Union

import yaml

from .utils.fileio import decode_text, strip_bom
from .utils.iac import compose_template

logger = logging.getLogger(__name__)

DEFAULT_SUPPRESSION_TOKEN = "# guardrails:ignore-next-line"

# the break set PyYAML counts when advancing node marks
_LINE_BREAK = re.compile("\r\n|[\r\n\x85\u2028\u2029]")


@dataclass(frozen=True)
class SourceLine:
    """One physical line of the document, numbered from 1."""

    line_number: int
    text: str


@dataclass
class IndexedDocument:
    """Immutable line view of a document shared by every rule in a run."""

    lines: Tuple[SourceLine, ...]
    suppressed: FrozenSet[int] = frozenset()
    text: str = field(default="", repr=False)

    def __len__(self) -> int:
        return len(self.lines)

    def line(self, line_number: int) -> SourceLine:
        if not 1 <= line_number <= len(self.lines):
            raise IndexError(f"Line {line_number} is outside 1..{len(self.lines)}")
        return self.lines[line_number - 1]

    def window(self, start: int, end: int) -> Tuple[SourceLine, ...]:
        """Return the lines in the inclusive 1-based range ``start..end``."""

        return self.lines[max(start, 1) - 1 : max(end, 0)]

    @cached_property
    def template(self) -> Optional[yaml.Node]:
        """Positioned YAML node tree, composed on first access.

        Parse errors propagate to the rule that asked for the tree.
        """

        return compose_template(self.text)


def split_lines(text: str) -> List[str]:
    """Split ``text`` on every YAML line break, keeping blank lines.

    A trailing newline terminates the last line instead of opening a new one.
    """

    if not text:
        return []
    parts = _LINE_BREAK.split(text)
    if parts and parts[-1] == "":
        parts.pop()
    return parts


def find_suppressed_lines(lines: Iterable[SourceLine], token: str = DEFAULT_SUPPRESSION_TOKEN) -> FrozenSet[int]:
    """Return the numbers of lines that directly follow a directive line.

    Only a line consisting solely of ``token`` (surrounding whitespace aside)
    counts. A directive on the final line has nothing to suppress.
    """

    materialized = tuple(lines)
    last = len(materialized)
    suppressed = set()
    for source_line in materialized:
        if source_line.text.strip() != token:
            continue
        target = source_line.line_number + 1
        if target <= last:
            suppressed.add(target)
        else:
            logger.debug("Directive on final line %d has no target", source_line.line_number)
    return frozenset(suppressed)


def index_document(
    text: Union[str, bytes],
    suppression_token: str = DEFAULT_SUPPRESSION_TOKEN,
) -> IndexedDocument:
    text = decode_text(text) if isinstance(text, bytes) else strip_bom(text)
    lines = tuple(SourceLine(number, content) for number, content in enumerate(split_lines(text), start=1))
    suppressed = find_suppressed_lines(lines, suppression_token)
    logger.debug("Indexed %d line(s), %d suppressed", len(lines), len(suppressed))
    return IndexedDocument(lines=lines, suppressed=suppressed, text=text)
