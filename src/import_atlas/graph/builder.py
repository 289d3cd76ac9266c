"""Dependency graph construction from scanned references."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Callable, Optional

from ..logging_config import get_logger
from ..scanning.models import Reference
from .models import (
    Category,
    DependencyGraph,
    FileImports,
    GraphEdges,
    GraphStats,
    ImportEntry,
)
from .resolver import is_relative_specifier

logger = get_logger(__name__)

Resolver = Callable[[str, str], Optional[str]]


def classify(specifier: str) -> Category:
    """Internal if the specifier is relative, external otherwise.

    Classification never depends on whether resolution succeeds.
    """
    return "internal" if is_relative_specifier(specifier) else "external"


def package_identity(specifier: str) -> str:
    """Strip sub-paths from an external specifier.

    "@scope/pkg/sub/path" -> "@scope/pkg"
    "lodash/debounce"     -> "lodash"
    """
    parts = specifier.split("/")
    if specifier.startswith("@"):
        return "/".join(parts[:2])
    return parts[0]


def build_dependency_graph(
    references: Iterable[Reference],
    to_relative: Callable[[str], str],
    resolver: Resolver,
    project_root: str = "",
) -> DependencyGraph:
    """Build the dependency graph from all references of a run.

    Files appear in the order they were first seen in ``references``;
    each file keeps its references in source order. Every reference yields
    exactly one entry in ``internal``, ``external`` or
    ``unresolved_internal``.

    Args:
        references: References from every scanned file, in discovery order
        to_relative: Maps an absolute path to its display form
        resolver: ``(from_file, specifier) -> absolute path | None``
        project_root: Recorded verbatim on the graph

    Returns:
        DependencyGraph; a pure function of the inputs and the filesystem
    """
    # Ordered map: first-seen file order + lookup table
    file_order: list[str] = []
    by_file: dict[str, list[Reference]] = {}
    for ref in references:
        if ref.file not in by_file:
            file_order.append(ref.file)
            by_file[ref.file] = []
        by_file[ref.file].append(ref)

    graph = DependencyGraph(project_root=project_root)
    edges = graph.edges
    package_counts: dict[str, int] = {}
    import_count = 0

    for abs_file in file_order:
        rel_file = to_relative(abs_file)
        entry = FileImports(file=rel_file)

        for ref in by_file[abs_file]:
            import_count += 1
            category = classify(ref.specifier)
            resolved: Optional[str] = None

            if category == "internal":
                resolved_abs = resolver(abs_file, ref.specifier)
                if resolved_abs is not None:
                    resolved = to_relative(resolved_abs)
                    edges.internal.append((rel_file, resolved))
                else:
                    edges.unresolved_internal.append((rel_file, ref.specifier))
            else:
                package = package_identity(ref.specifier)
                edges.external.append((rel_file, package))
                package_counts[package] = package_counts.get(package, 0) + 1

            entry.imports.append(
                ImportEntry(
                    kind=ref.kind,
                    specifier=ref.specifier,
                    category=category,
                    line=ref.line,
                    col=ref.col,
                    resolved=resolved,
                )
            )

        graph.files.append(entry)

    graph.stats = _compute_stats(graph, edges, import_count, package_counts)

    if edges.unresolved_internal:
        logger.info(f"{len(edges.unresolved_internal)} internal references did not resolve")
    logger.debug(
        f"Graph built: {len(graph.files)} files, {import_count} references, "
        f"{len(package_counts)} packages"
    )
    return graph


def _compute_stats(
    graph: DependencyGraph,
    edges: GraphEdges,
    import_count: int,
    package_counts: dict[str, int],
) -> GraphStats:
    # sorted() is stable: equal counts keep first-seen order
    frequency = dict(sorted(package_counts.items(), key=lambda item: -item[1]))
    return GraphStats(
        file_count=len(graph.files),
        import_count=import_count,
        internal_count=len(edges.internal) + len(edges.unresolved_internal),
        external_count=len(edges.external),
        unresolved_internal_count=len(edges.unresolved_internal),
        package_frequency=frequency,
    )
