"""File extension to tree-sitter grammar mapping."""

from __future__ import annotations

from pathlib import Path
from typing import Union

# Grammar name -> file suffixes parsed with it.
GRAMMAR_EXTENSIONS: dict[str, tuple[str, ...]] = {
    "javascript": (".js", ".jsx", ".mjs", ".cjs"),
    "typescript": (".ts", ".mts", ".cts"),
    "tsx": (".tsx",),
}

_EXTENSION_TO_LANGUAGE: dict[str, str] = {
    ext: lang for lang, exts in GRAMMAR_EXTENSIONS.items() for ext in exts
}


def detect_language(filepath: Union[str, Path]) -> str:
    """Detect grammar from file extension.

    Returns:
        Grammar name ("javascript", "typescript", "tsx") or "unknown"
    """
    return _EXTENSION_TO_LANGUAGE.get(Path(filepath).suffix.lower(), "unknown")
