"""Dependency graph assembly: resolution, classification, statistics."""

from .builder import build_dependency_graph, classify, package_identity
from .models import DependencyGraph, FileImports, GraphEdges, GraphStats, ImportEntry
from .resolver import RESOLVE_EXTENSIONS, ModuleResolver, is_relative_specifier

__all__ = [
    "DependencyGraph",
    "FileImports",
    "GraphEdges",
    "GraphStats",
    "ImportEntry",
    "ModuleResolver",
    "RESOLVE_EXTENSIONS",
    "build_dependency_graph",
    "classify",
    "is_relative_specifier",
    "package_identity",
]
