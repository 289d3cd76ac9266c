"""Filesystem-probing resolution of relative module specifiers.

Mirrors the Node/bundler lookup for relative paths, without package
manifests or path aliases:

    ./b          -> ./b  (exact file)
                 -> ./b.ts, ./b.tsx, ./b.js, ./b.jsx
                 -> ./b/index.ts, ./b/index.tsx, ./b/index.js, ./b/index.jsx
"""

from __future__ import annotations

import os
from typing import Optional

from ..logging_config import get_logger

logger = get_logger(__name__)

RESOLVE_EXTENSIONS: tuple[str, ...] = (".ts", ".tsx", ".js", ".jsx")


def is_relative_specifier(specifier: str) -> bool:
    """Relative specifiers start with '.' (``./x``, ``../x``, ``.``)."""
    return specifier.startswith(".")


class ModuleResolver:
    """Maps (referencing file, relative specifier) to an existing file."""

    def __init__(self, extensions: tuple[str, ...] = RESOLVE_EXTENSIONS) -> None:
        self.extensions = extensions
        self.index_files = tuple(f"index{ext}" for ext in extensions)

    def resolve(self, from_file: str, specifier: str) -> Optional[str]:
        """Resolve ``specifier`` as written in ``from_file``.

        Args:
            from_file: Absolute path of the referencing file
            specifier: Module specifier; non-relative ones are not resolved

        Returns:
            Absolute path of the target file, or None if nothing matches
        """
        if not is_relative_specifier(specifier):
            return None

        base = os.path.normpath(os.path.join(os.path.dirname(from_file), specifier))

        if os.path.isfile(base):
            return base

        for ext in self.extensions:
            candidate = base + ext
            if os.path.isfile(candidate):
                return candidate

        if os.path.isdir(base):
            for index in self.index_files:
                candidate = os.path.join(base, index)
                if os.path.isfile(candidate):
                    return candidate

        logger.debug(f"Unresolved: {specifier!r} from {from_file}")
        return None

    __call__ = resolve
