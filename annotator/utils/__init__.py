"""Utility helpers for the annotator."""

from .fileio import decode_text, read_text_file, read_yaml_file, strip_bom
from .iac import compose_template, iter_mapping, iter_resources, mapping_value, node_span
from .logs import configure_logging

__all__ = [
    "decode_text",
    "strip_bom",
    "read_yaml_file",
    "read_text_file",
    "compose_template",
    "iter_mapping",
    "iter_resources",
    "mapping_value",
    "node_span",
    "configure_logging",
]
