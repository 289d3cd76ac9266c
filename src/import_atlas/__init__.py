"""
Import Atlas - module-reference graphs for JavaScript and TypeScript projects

Scans source files with tree-sitter, records every import, re-export,
require and dynamic import, resolves relative specifiers against the
filesystem, and assembles a dependency graph with per-package statistics.
"""

__version__ = "0.1.0"

from .api import AnalysisResult, ScanFailure, analyze
from .graph import DependencyGraph, ModuleResolver, build_dependency_graph
from .scanning import RefKind, Reference, ReferenceScanner

__all__ = [
    "analyze",  # Main entry point
    "AnalysisResult",
    "ScanFailure",
    "DependencyGraph",
    "ModuleResolver",
    "build_dependency_graph",
    "RefKind",
    "Reference",
    "ReferenceScanner",
]
