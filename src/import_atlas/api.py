"""Public API for Import Atlas.

Example:
    >>> from import_atlas import analyze
    >>>
    >>> result = analyze(["src"])
    >>> result.graph.stats.package_frequency
    {'react': 12, 'lodash': 3}
    >>> print(result.graph.to_json())
"""

from __future__ import annotations

import os
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional, Union

from .collaborators import DocumentRenderer, Summarizer
from .config import AtlasConfig
from .exceptions import (
    AnalysisError,
    ImportAtlasError,
    SummarizerError,
)
from .graph import DependencyGraph, ModuleResolver, build_dependency_graph
from .logging_config import get_logger
from .scanning import Reference, ReferenceScanner, collect_targets

logger = get_logger(__name__)

PathLike = Union[str, Path]


@dataclass(frozen=True)
class ScanFailure:
    """A file whose scan was aborted. The run continues without it."""

    file: str
    reason: str


@dataclass
class AnalysisResult:
    """Everything one run produced.

    Attributes:
        graph: The assembled dependency graph
        references: Raw references from all files, in discovery order
        failures: Files that could not be scanned
        files_scanned: Number of files handed to the scanner
        summary: Summarizer output, when a summarizer was given
    """

    graph: DependencyGraph
    references: list[Reference] = field(default_factory=list)
    failures: list[ScanFailure] = field(default_factory=list)
    files_scanned: int = 0
    summary: Optional[str] = None


def make_relativizer(cwd: PathLike) -> Callable[[str], str]:
    """Return a function rendering absolute paths relative to ``cwd``.

    A path equal to ``cwd`` keeps its absolute form rather than becoming
    an empty string.
    """
    base = os.path.abspath(cwd)

    def to_relative(abs_path: str) -> str:
        rel = os.path.relpath(abs_path, base)
        return abs_path if rel in ("", ".") else rel

    return to_relative


def scan_files(
    paths: Iterable[PathLike],
    scanner: Optional[ReferenceScanner] = None,
) -> tuple[list[Reference], list[ScanFailure]]:
    """Scan files one at a time, skipping (and recording) any that fail."""
    scanner = scanner or ReferenceScanner()
    return _scan_each(((Path(p), None) for p in paths), scanner)


def scan_sources(
    sources: Iterable[tuple[PathLike, str]],
    scanner: Optional[ReferenceScanner] = None,
) -> tuple[list[Reference], list[ScanFailure]]:
    """Scan in-memory ``(absolute path, text)`` pairs."""
    scanner = scanner or ReferenceScanner()
    return _scan_each(((Path(p), text) for p, text in sources), scanner)


def _scan_each(
    items: Iterable[tuple[Path, Optional[str]]],
    scanner: ReferenceScanner,
) -> tuple[list[Reference], list[ScanFailure]]:
    references: list[Reference] = []
    failures: list[ScanFailure] = []

    for path, text in items:
        try:
            if text is None:
                references.extend(scanner.scan_file(path))
            else:
                references.extend(scanner.scan(path, text))
        except AnalysisError as e:
            reason = getattr(e, "reason", str(e))
            logger.warning(f"Failed to scan {path}: {reason}")
            failures.append(ScanFailure(file=str(path), reason=reason))

    return references, failures


def analyze(
    targets: Sequence[PathLike],
    config: Optional[AtlasConfig] = None,
    cwd: Optional[PathLike] = None,
    summarizer: Optional[Summarizer] = None,
    scanner: Optional[ReferenceScanner] = None,
    resolver: Optional[ModuleResolver] = None,
) -> AnalysisResult:
    """Scan ``targets`` and build their dependency graph.

    Pipeline:
    1. Collect source files (walker applies extension and ignore filters)
    2. Scan each file; failures are logged and recorded, not raised
    3. Build the graph with paths relative to ``cwd``
    4. Optionally hand the graph to ``summarizer``

    Args:
        targets: Files and/or directories to analyze
        config: Scan configuration (default: AtlasConfig())
        cwd: Base for relative paths in the output (default: process cwd)
        summarizer: Optional collaborator producing a text summary
        scanner: Scanner to reuse across runs
        resolver: Resolver for relative specifiers

    Returns:
        AnalysisResult

    Raises:
        InvalidPathError: If a target does not exist
        SummarizerError: If the summarizer fails
    """
    config = config or AtlasConfig()
    base = Path(cwd) if cwd is not None else Path.cwd()

    files = collect_targets(
        [Path(t) for t in targets],
        extensions=config.extensions,
        ignore_dirs=config.ignore_dirs,
        include_dts=config.include_dts,
        max_file_size_bytes=config.max_file_size_bytes,
    )

    references, failures = scan_files(files, scanner)
    if failures:
        logger.warning(f"{len(failures)} of {len(files)} files could not be scanned")

    to_relative = make_relativizer(base)
    graph = build_dependency_graph(
        references,
        to_relative=to_relative,
        resolver=resolver or ModuleResolver(),
        project_root=to_relative(str(base.absolute())),
    )

    result = AnalysisResult(
        graph=graph,
        references=references,
        failures=failures,
        files_scanned=len(files),
    )

    if summarizer is not None and references:
        result.summary = summarize_graph(graph, summarizer)

    return result


def summarize_graph(graph: DependencyGraph, summarizer: Summarizer) -> str:
    """Run ``summarizer`` on ``graph``, normalizing its failures.

    Raises:
        SummarizerError: If the summarizer raises or returns empty text
    """
    name = getattr(summarizer, "name", summarizer.__class__.__name__)
    try:
        text = summarizer.summarize(graph)
    except ImportAtlasError:
        raise
    except Exception as e:
        raise SummarizerError(name, str(e)) from e

    if not text:
        raise SummarizerError(name, "empty response")
    return text


def render_summary(
    result: AnalysisResult, renderer: DocumentRenderer, output_path: PathLike
) -> Path:
    """Render ``result.summary`` to ``output_path``.

    Raises:
        ImportAtlasError: If the run produced no summary
    """
    if result.summary is None:
        raise ImportAtlasError("A document can't be rendered without a summary")

    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    written = renderer.render(result.summary, output)
    logger.info(f"Document written to: {written}")
    return written
