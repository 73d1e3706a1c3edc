import pytest

from annotator.config import AnnotatorConfig, load_config
from annotator.errors import ConfigError
from annotator.lines import DEFAULT_SUPPRESSION_TOKEN
from annotator.severity import Severity


def test_defaults_when_file_is_missing(tmp_path):
    config = load_config(tmp_path / "absent.yaml")

    assert config == AnnotatorConfig()
    assert config.max_annotations == 3
    assert config.suppression_token == DEFAULT_SUPPRESSION_TOKEN
    assert config.importance_of(Severity.CRITICAL) == 1
    assert config.importance_of(Severity.INFO) == 5


def test_values_are_loaded_from_yaml(tmp_path):
    path = tmp_path / "annotator.yaml"
    path.write_text(
        "\n".join(
            [
                "max_annotations: 5",
                "suppression_token: '# lint:skip-next'",
                "severity_order: [high, critical, medium, low, info]",
                "disabled_rules:",
                "  - function-missing-timeout",
                "rule_timeout: 2.5",
            ]
        ),
        encoding="utf-8",
    )

    config = load_config(path)

    assert config.max_annotations == 5
    assert config.suppression_token == "# lint:skip-next"
    assert config.importance_of(Severity.HIGH) == 1
    assert config.disabled_rules == frozenset({"function-missing-timeout"})
    assert config.rule_timeout == 2.5


@pytest.mark.parametrize(
    "content",
    [
        "max_annotations: many",
        "max_annotations: -1",
        "severity_order: [critical, high]",
        "severity_order: [critical, high, medium, low, urgent]",
        "suppression_token: ''",
        "rule_timeout: 0",
        "unexpected: true",
        "- just\n- a list",
    ],
)
def test_invalid_configuration_is_rejected(tmp_path, content):
    path = tmp_path / "bad.yaml"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(path)


def test_with_overrides_ignores_none():
    config = AnnotatorConfig()

    assert config.with_overrides(max_annotations=None) is config
    assert config.with_overrides(max_annotations=1).max_annotations == 1
