"""Annotation pipeline: index, match, suppress, select, normalize."""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Callable, Optional, Union

from .config import AnnotatorConfig
from .errors import CatalogError
from .lines import index_document
from .matcher import match_rules
from .normalize import normalize_findings
from .result import AnnotationResult, Diagnostic, RawFinding
from .rules import RuleCatalog
from .selection import select_findings
from .severity import Severity
from .suppression import filter_suppressed
from .utils import read_text_file

logger = logging.getLogger(__name__)

CatalogSource = Union[RuleCatalog, Callable[[], RuleCatalog]]


def _resolve_catalog(source: CatalogSource, config: AnnotatorConfig) -> RuleCatalog:
    if isinstance(source, RuleCatalog):
        catalog = source
    else:
        try:
            catalog = source()
        except CatalogError:
            raise
        except Exception as exc:
            raise CatalogError(f"Catalog loader failed: {type(exc).__name__}: {exc}") from exc
    if not isinstance(catalog, RuleCatalog):
        raise CatalogError(f"Catalog loader returned {type(catalog).__name__}, expected RuleCatalog")
    if config.disabled_rules:
        catalog = catalog.without(config.disabled_rules)
    return catalog


def annotate(
    text: Union[str, bytes],
    catalog: CatalogSource,
    config: Optional[AnnotatorConfig] = None,
    clock: Callable[[], float] = time.monotonic,
) -> AnnotationResult:
    """Annotate one document with the most important rule findings.

    ``catalog`` is either a loaded ``RuleCatalog`` or a zero-argument loader.
    Catalog and rule failures never escape: they are logged and reported in
    ``AnnotationResult.diagnostics`` next to whatever annotations survived.
    """

    config = config or AnnotatorConfig()
    result = AnnotationResult()

    try:
        rules = _resolve_catalog(catalog, config)
    except CatalogError as exc:
        logger.warning("Rule catalog unavailable: %s", exc)
        result.diagnostics.append(Diagnostic(kind="catalog_error", message=str(exc)))
        return result

    document = index_document(text, config.suppression_token)
    deadline = clock() + config.rule_timeout if config.rule_timeout is not None else None
    raw_findings, diagnostics = match_rules(rules, document, deadline=deadline, clock=clock)
    result.diagnostics.extend(diagnostics)

    findings = filter_suppressed(raw_findings, document.suppressed)
    result.total_findings = len(findings)

    def rank(finding: RawFinding) -> int:
        rule = rules.get(finding.rule_id)
        severity = rule.importance if rule is not None else Severity.INFO
        return config.importance_of(severity)

    selected = select_findings(findings, config.max_annotations, rank)
    result.annotations = normalize_findings(selected, rules, config.importance_of)
    logger.info(
        "Emitting %d of %d finding(s) across %d rule(s)",
        len(result.annotations),
        result.total_findings,
        len(rules),
    )
    return result


def annotate_file(
    path: Union[str, Path],
    catalog: CatalogSource,
    config: Optional[AnnotatorConfig] = None,
) -> AnnotationResult:
    """Read ``path`` as UTF-8 and annotate it; a missing file raises."""

    template_path = Path(path)
    if not template_path.is_file():
        raise FileNotFoundError(f"Template not found: {template_path}")
    return annotate(read_text_file(template_path), catalog, config)
