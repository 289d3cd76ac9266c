"""Exception hierarchy for Import Atlas."""

from .analysis import (
    AnalysisError,
    FileAccessError,
    ParsingError,
    UnsupportedLanguageError,
)
from .base import ImportAtlasError
from .collaborators import CollaboratorError, SummarizerError
from .config import (
    ConfigurationError,
    InvalidConfigError,
    InvalidPathError,
)

__all__ = [
    "ImportAtlasError",
    "AnalysisError",
    "FileAccessError",
    "ParsingError",
    "UnsupportedLanguageError",
    "ConfigurationError",
    "InvalidPathError",
    "InvalidConfigError",
    "CollaboratorError",
    "SummarizerError",
]
