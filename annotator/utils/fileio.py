"""Basic file IO helpers."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

UTF8_BOM = "\ufeff"


def decode_text(data: bytes) -> str:
    """Decode template bytes as UTF-8, dropping a BOM.

    Undecodable bytes become U+FFFD so a stray byte costs one character, not
    the whole document.
    """

    return data.decode("utf-8-sig", errors="replace")


def strip_bom(text: str) -> str:
    return text[1:] if text.startswith(UTF8_BOM) else text


def read_yaml_file(path: Path) -> Any:
    """Return the parsed YAML if the file exists, otherwise ``None``."""

    if not path.exists():
        return None
    with path.open("r", encoding="utf-8") as handle:
        return yaml.safe_load(handle)


def read_text_file(path: Path) -> str:
    """Return the file contents as text, or an empty string if missing."""

    if not path.exists():
        return ""
    return decode_text(path.read_bytes())
