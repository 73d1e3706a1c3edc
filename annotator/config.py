"""Annotator configuration loaded from an optional YAML file."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, FrozenSet, Optional, Tuple

import yaml

from .errors import ConfigError
from .lines import DEFAULT_SUPPRESSION_TOKEN
from .severity import SEVERITY_ORDER, Severity
from .utils import read_yaml_file

DEFAULT_CONFIG_FILENAME = ".guardrails-annotator.yaml"
DEFAULT_MAX_ANNOTATIONS = 3

KNOWN_KEYS = frozenset(
    {"max_annotations", "suppression_token", "severity_order", "disabled_rules", "rule_timeout"}
)


@dataclass(frozen=True)
class AnnotatorConfig:
    """Options recognized by the annotation pipeline."""

    max_annotations: int = DEFAULT_MAX_ANNOTATIONS
    suppression_token: str = DEFAULT_SUPPRESSION_TOKEN
    severity_order: Tuple[Severity, ...] = tuple(SEVERITY_ORDER)
    disabled_rules: FrozenSet[str] = field(default_factory=frozenset)
    rule_timeout: Optional[float] = None

    def __post_init__(self) -> None:
        if isinstance(self.max_annotations, bool) or not isinstance(self.max_annotations, int):
            raise ConfigError(f"max_annotations must be an integer, got {self.max_annotations!r}")
        if self.max_annotations < 0:
            raise ConfigError("max_annotations must not be negative")
        if not isinstance(self.suppression_token, str) or not self.suppression_token.strip():
            raise ConfigError("suppression_token must be a non-empty string")
        if self.suppression_token != self.suppression_token.strip():
            raise ConfigError("suppression_token must not carry surrounding whitespace")
        order = tuple(self.severity_order)
        if set(order) != set(SEVERITY_ORDER) or len(order) != len(SEVERITY_ORDER):
            raise ConfigError("severity_order must list every severity exactly once")
        if self.rule_timeout is not None and self.rule_timeout <= 0:
            raise ConfigError("rule_timeout must be positive")

    def importance_of(self, severity: Severity) -> int:
        """Return the 1-based rank of ``severity``; 1 is the most important."""

        return self.severity_order.index(severity) + 1

    def with_overrides(self, **overrides: Any) -> "AnnotatorConfig":
        """Return a copy with every non-``None`` override applied."""

        changes = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **changes) if changes else self


def _parse_severity_order(raw: Any) -> Tuple[Severity, ...]:
    if not isinstance(raw, (list, tuple)):
        raise ConfigError("severity_order must be a list of severity names")
    try:
        return tuple(Severity.parse(item) for item in raw)
    except ValueError as exc:
        raise ConfigError(str(exc)) from exc


def _parse_rule_ids(raw: Any) -> FrozenSet[str]:
    if isinstance(raw, str):
        return frozenset({raw})
    if not isinstance(raw, (list, tuple, set)):
        raise ConfigError("disabled_rules must be a list of rule identifiers")
    return frozenset(str(item) for item in raw)


def config_from_mapping(data: Dict[str, Any]) -> AnnotatorConfig:
    unknown = sorted(set(data) - KNOWN_KEYS)
    if unknown:
        raise ConfigError(f"Unknown configuration key(s): {', '.join(unknown)}")

    kwargs: Dict[str, Any] = {}
    if "max_annotations" in data:
        kwargs["max_annotations"] = data["max_annotations"]
    if "suppression_token" in data:
        kwargs["suppression_token"] = data["suppression_token"]
    if "severity_order" in data:
        kwargs["severity_order"] = _parse_severity_order(data["severity_order"])
    if "disabled_rules" in data and data["disabled_rules"] is not None:
        kwargs["disabled_rules"] = _parse_rule_ids(data["disabled_rules"])
    if data.get("rule_timeout") is not None:
        try:
            kwargs["rule_timeout"] = float(data["rule_timeout"])
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"rule_timeout must be a number, got {data['rule_timeout']!r}") from exc
    return AnnotatorConfig(**kwargs)


def load_config(path: Optional[Path] = None) -> AnnotatorConfig:
    """Load configuration from ``path`` (default ``.guardrails-annotator.yaml``).

    A missing or empty file yields the defaults.
    """

    config_path = Path(path) if path is not None else Path(DEFAULT_CONFIG_FILENAME)
    try:
        data = read_yaml_file(config_path)
    except (yaml.YAMLError, OSError) as exc:
        raise ConfigError(f"Unable to read configuration {config_path}: {exc}") from exc
    if data is None:
        return AnnotatorConfig()
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration at {config_path} is not a mapping")
    return config_from_mapping(data)
