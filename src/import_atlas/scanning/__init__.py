"""Source discovery and reference extraction."""

from .languages import GRAMMAR_EXTENSIONS, detect_language
from .models import RefKind, Reference
from .references import ReferenceScanner
from .treesitter_parser import TreeSitterParser, get_supported_languages
from .walker import (
    DEFAULT_EXTENSIONS,
    DEFAULT_IGNORE_DIRS,
    collect_targets,
    iter_source_files,
)

__all__ = [
    # Models
    "RefKind",
    "Reference",
    # Parsing
    "TreeSitterParser",
    "ReferenceScanner",
    "GRAMMAR_EXTENSIONS",
    "detect_language",
    "get_supported_languages",
    # Discovery
    "DEFAULT_EXTENSIONS",
    "DEFAULT_IGNORE_DIRS",
    "collect_targets",
    "iter_source_files",
]
