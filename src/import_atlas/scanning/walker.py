"""Source walker: enumerate candidate files under one or more targets.

Directory entries are visited in sorted name order so the discovery order
(and with it the order of the final graph) is stable across platforms.
"""

from __future__ import annotations

import os
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Optional

from ..exceptions import InvalidPathError
from ..logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_EXTENSIONS: tuple[str, ...] = (".ts", ".tsx", ".js", ".jsx")

DEFAULT_IGNORE_DIRS: tuple[str, ...] = (
    "node_modules",
    ".git",
    "dist",
    "build",
    "out",
    ".next",
    ".cache",
)

DECLARATION_SUFFIX = ".d.ts"


def iter_source_files(
    root: Path,
    extensions: Iterable[str] = DEFAULT_EXTENSIONS,
    ignore_dirs: Iterable[str] = DEFAULT_IGNORE_DIRS,
    include_dts: bool = False,
    max_file_size_bytes: Optional[int] = None,
) -> list[Path]:
    """Walk ``root`` depth-first and return the source files to scan.

    Args:
        root: Directory to walk
        extensions: Allowed suffixes, compared case-insensitively
        ignore_dirs: Directory names skipped at any depth
        include_dts: Keep ``*.d.ts`` declaration files
        max_file_size_bytes: Skip files larger than this (None = no limit)

    Returns:
        Absolute file paths in discovery order
    """
    ext_set = {ext.lower() for ext in extensions}
    ignore = set(ignore_dirs)
    files: list[Path] = []

    def _walk(directory: Path) -> None:
        try:
            entries = sorted(directory.iterdir(), key=lambda p: p.name)
        except OSError as e:
            logger.warning(f"Cannot list {directory}: {e}")
            return

        for entry in entries:
            try:
                is_dir = entry.is_dir()
                is_file = not is_dir and entry.is_file()
            except OSError:
                continue

            if is_dir:
                if entry.name in ignore:
                    logger.debug(f"Skipped (ignored dir): {entry}")
                    continue
                _walk(entry)
            elif is_file:
                if entry.suffix.lower() not in ext_set:
                    continue
                if not include_dts and entry.name.endswith(DECLARATION_SUFFIX):
                    logger.debug(f"Skipped (declaration): {entry}")
                    continue
                if max_file_size_bytes is not None and _too_large(entry, max_file_size_bytes):
                    continue
                files.append(entry)

    _walk(Path(os.path.abspath(root)))
    return files


def collect_targets(
    targets: Sequence[Path],
    extensions: Iterable[str] = DEFAULT_EXTENSIONS,
    ignore_dirs: Iterable[str] = DEFAULT_IGNORE_DIRS,
    include_dts: bool = False,
    max_file_size_bytes: Optional[int] = None,
) -> list[Path]:
    """Expand a mix of files and directories, in argument order.

    Explicitly named files are kept whatever their extension.

    Raises:
        InvalidPathError: If a target does not exist
    """
    extensions = tuple(extensions)
    ignore_dirs = tuple(ignore_dirs)
    files: list[Path] = []

    for target in targets:
        path = Path(target)
        if path.is_dir():
            files.extend(
                iter_source_files(
                    path,
                    extensions=extensions,
                    ignore_dirs=ignore_dirs,
                    include_dts=include_dts,
                    max_file_size_bytes=max_file_size_bytes,
                )
            )
        elif path.is_file():
            files.append(Path(os.path.abspath(path)))
        else:
            raise InvalidPathError(path, "no such file or directory")

    logger.info(f"Collected {len(files)} source files from {len(targets)} targets")
    return files


def _too_large(path: Path, limit: int) -> bool:
    try:
        size = path.stat().st_size
    except OSError as e:
        logger.warning(f"Cannot stat {path}: {e}")
        return True
    if size > limit:
        logger.debug(f"Skipped (size): {path} ({size} bytes)")
        return True
    return False
