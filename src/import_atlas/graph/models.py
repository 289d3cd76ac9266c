"""Data models for the assembled dependency graph.

The Python side uses snake_case attributes; ``to_dict`` produces the
camelCase wire shape consumed by downstream tools:

    {projectRoot, files: [{file, imports: [...]}],
     edges: {internal, external, unresolvedInternal},
     stats: {fileCount, importCount, internalCount, externalCount,
             unresolvedInternalCount, packageFrequency}}
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Literal, Optional

from ..scanning.models import RefKind

Category = Literal["internal", "external"]
Edge = tuple[str, str]


@dataclass(frozen=True)
class ImportEntry:
    """One reference as it appears in a file's import list."""

    kind: RefKind
    specifier: str
    category: Category
    line: int
    col: int
    resolved: Optional[str] = None

    def to_dict(self) -> dict:
        data: dict = {
            "kind": self.kind.value,
            "specifier": self.specifier,
            "category": self.category,
        }
        if self.resolved is not None:
            data["resolved"] = self.resolved
        data["line"] = self.line
        data["col"] = self.col
        return data


@dataclass
class FileImports:
    """A scanned file and its references, in source order."""

    file: str
    imports: list[ImportEntry] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"file": self.file, "imports": [imp.to_dict() for imp in self.imports]}


@dataclass
class GraphEdges:
    """Edge lists. Each is a multiset: one pair per reference, no dedup.

    internal: (file, resolved file)
    external: (file, package identity)
    unresolved_internal: (file, raw specifier)
    """

    internal: list[Edge] = field(default_factory=list)
    external: list[Edge] = field(default_factory=list)
    unresolved_internal: list[Edge] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "internal": [list(edge) for edge in self.internal],
            "external": [list(edge) for edge in self.external],
            "unresolvedInternal": [list(edge) for edge in self.unresolved_internal],
        }


@dataclass
class GraphStats:
    """Aggregate counts.

    ``package_frequency`` is ordered by descending count; ties keep the
    order in which the packages were first seen.
    """

    file_count: int = 0
    import_count: int = 0
    internal_count: int = 0
    external_count: int = 0
    unresolved_internal_count: int = 0
    package_frequency: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "fileCount": self.file_count,
            "importCount": self.import_count,
            "internalCount": self.internal_count,
            "externalCount": self.external_count,
            "unresolvedInternalCount": self.unresolved_internal_count,
            "packageFrequency": dict(self.package_frequency),
        }


@dataclass
class DependencyGraph:
    """Per-file references, classified edges and statistics for one run."""

    project_root: str = ""
    files: list[FileImports] = field(default_factory=list)
    edges: GraphEdges = field(default_factory=GraphEdges)
    stats: GraphStats = field(default_factory=GraphStats)

    def to_dict(self) -> dict:
        return {
            "projectRoot": self.project_root,
            "files": [entry.to_dict() for entry in self.files],
            "edges": self.edges.to_dict(),
            "stats": self.stats.to_dict(),
        }

    def to_json(self, indent: Optional[int] = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)
