"""Guardrails annotator: ranked, line-anchored findings for IaC templates."""

from importlib.metadata import version, PackageNotFoundError

from .config import AnnotatorConfig, load_config
from .pipeline import annotate, annotate_file
from .result import Annotation, AnnotationResult
from .rules import RuleCatalog, load_catalog

try:
    __version__ = version("guardrails-annotator")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.1.0-dev"

__all__ = [
    "__version__",
    "AnnotatorConfig",
    "Annotation",
    "AnnotationResult",
    "RuleCatalog",
    "annotate",
    "annotate_file",
    "load_catalog",
    "load_config",
]
