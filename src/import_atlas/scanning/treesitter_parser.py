"""Tree-sitter parser wrapper.

Builds one parser per grammar (JavaScript, TypeScript, TSX) up front.

Usage:
    parser = TreeSitterParser()
    tree = parser.parse(code_bytes, "typescript")
"""

from __future__ import annotations

from types import ModuleType
from typing import Optional

import tree_sitter
import tree_sitter_javascript
import tree_sitter_typescript

from ..logging_config import get_logger

logger = get_logger(__name__)

# TSX is bundled with tree-sitter-typescript
_LANGUAGE_MODULES: dict[str, ModuleType] = {
    "javascript": tree_sitter_javascript,
    "typescript": tree_sitter_typescript,
    "tsx": tree_sitter_typescript,
}


def get_supported_languages() -> list[str]:
    """Get list of grammars this parser can load."""
    return list(_LANGUAGE_MODULES.keys())


class TreeSitterParser:
    """Wrapper around tree-sitter for the JavaScript family of grammars."""

    def __init__(self) -> None:
        self._parsers: dict[str, tree_sitter.Parser] = {}

        for lang_name, lang_module in _LANGUAGE_MODULES.items():
            # Some modules use language_<name>() instead of language()
            lang_fn = getattr(lang_module, f"language_{lang_name}", None)
            if lang_fn is None:
                lang_fn = getattr(lang_module, "language")

            # tree-sitter >= 0.23 returns PyCapsule; wrap in Language()
            lang_obj = tree_sitter.Language(lang_fn())
            self._parsers[lang_name] = tree_sitter.Parser(lang_obj)
            logger.debug(f"Loaded tree-sitter grammar: {lang_name}")

    def parse(self, code: bytes, language: str) -> Optional[tree_sitter.Tree]:
        """Parse code and return syntax tree.

        Args:
            code: Source code as bytes
            language: Grammar name (e.g., "typescript")

        Returns:
            Tree object, or None if the language is not supported
        """
        parser = self._parsers.get(language)
        if parser is None:
            return None
        return parser.parse(code)

    def is_language_supported(self, language: str) -> bool:
        """Check if a language is supported."""
        return language in self._parsers
