"""Evaluate every catalog rule against an indexed document."""

from __future__ import annotations

import logging
import time
from typing import Callable, List, Optional, Tuple

from .errors import RuleEvaluationError
from .lines import IndexedDocument
from .result import Diagnostic, RawFinding
from .rules import Rule, RuleCatalog

logger = logging.getLogger(__name__)


def _evaluate_rule(rule: Rule, document: IndexedDocument) -> List[RawFinding]:
    # materialize here so a rule failing halfway contributes nothing
    try:
        produced = list(rule.evaluate(document) or ())
    except Exception as exc:
        raise RuleEvaluationError(f"{type(exc).__name__}: {exc}", rule_id=rule.id) from exc
    for item in produced:
        if not isinstance(item, RawFinding):
            raise RuleEvaluationError(f"Expected RawFinding, got {type(item).__name__}", rule_id=rule.id)
        if not (isinstance(item.start_line, int) and isinstance(item.end_line, int)):
            raise RuleEvaluationError(f"Non-integer line range {item.start_line!r}-{item.end_line!r}", rule_id=rule.id)
    return produced


def _check_range(finding: RawFinding, line_count: int) -> Optional[RawFinding]:
    if not 1 <= finding.start_line <= line_count or finding.end_line < finding.start_line:
        return None
    if finding.end_line > line_count:
        return RawFinding(finding.rule_id, finding.start_line, line_count, finding.message)
    return finding


def match_rules(
    catalog: RuleCatalog,
    document: IndexedDocument,
    deadline: Optional[float] = None,
    clock: Callable[[], float] = time.monotonic,
) -> Tuple[List[RawFinding], List[Diagnostic]]:
    """Run each rule in catalog order and collect its findings.

    A failing rule is logged and recorded as a diagnostic; the remaining rules
    still run. When ``deadline`` (a ``clock`` timestamp) has passed, rules not
    yet started are skipped and reported together in one diagnostic.
    """

    findings: List[RawFinding] = []
    diagnostics: List[Diagnostic] = []
    rules = catalog.rules
    line_count = len(document)

    for index, rule in enumerate(rules):
        if deadline is not None and clock() >= deadline:
            skipped = [pending.id for pending in rules[index:]]
            logger.warning("Rule deadline reached, skipping %d rule(s): %s", len(skipped), ", ".join(skipped))
            diagnostics.append(
                Diagnostic(kind="deadline", message=f"Skipped after deadline: {', '.join(skipped)}")
            )
            break

        try:
            produced = _evaluate_rule(rule, document)
        except RuleEvaluationError as exc:
            logger.warning("Rule %s failed: %s", exc.rule_id, exc)
            diagnostics.append(Diagnostic(kind="rule_error", message=str(exc), rule_id=exc.rule_id))
            continue

        for finding in produced:
            checked = _check_range(finding, line_count)
            if checked is None:
                logger.debug("Dropping %s finding at %d-%d", rule.id, finding.start_line, finding.end_line)
                diagnostics.append(
                    Diagnostic(
                        kind="invalid_range",
                        message=f"Lines {finding.start_line}-{finding.end_line} outside 1-{line_count}",
                        rule_id=rule.id,
                    )
                )
                continue
            findings.append(checked)
        logger.debug("Rule %s produced %d finding(s)", rule.id, len(produced))

    return findings, diagnostics
