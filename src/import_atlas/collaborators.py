"""Interfaces for the tools that consume a finished graph.

Import Atlas only builds the graph. Turning it into prose (an LLM or any
other summarizer) and printing that prose (PDF, HTML) is left to
implementations of these interfaces. Anything an implementation needs,
such as API credentials or a model name, goes to its constructor.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from .graph.models import DependencyGraph


class Summarizer(ABC):
    """Turns a dependency graph into free-form descriptive text."""

    name = "summarizer"

    @abstractmethod
    def summarize(self, graph: DependencyGraph) -> str:
        """Return a description of ``graph``.

        Implementations raise any exception on failure; ``analyze`` wraps
        it in ``SummarizerError``.
        """
        pass


class DocumentRenderer(ABC):
    """Renders formatted text (typically Markdown) into a document."""

    @abstractmethod
    def render(self, text: str, output_path: Path) -> Path:
        """Write ``text`` to ``output_path`` and return the written path."""
        pass
