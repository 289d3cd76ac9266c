"""Shared CLI helpers."""

from pathlib import Path
from typing import Optional

from rich.console import Console

from ..config import AtlasConfig, load_config

console = Console()


def split_option(value: Optional[str]) -> list[str]:
    """Split a comma-separated option (``--extensions .ts,.js``)."""
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


def resolve_config(
    config: Optional[Path] = None,
    extensions: Optional[str] = None,
    ignore: Optional[str] = None,
    include_dts: bool = False,
    verbose: bool = False,
    quiet: bool = False,
) -> AtlasConfig:
    """Build config from CLI options."""
    overrides: dict = {}
    exts = split_option(extensions)
    if exts:
        overrides["extensions"] = exts
    ignored = split_option(ignore)
    if ignored:
        overrides["extra_ignore_dirs"] = ignored
    if include_dts:
        overrides["include_dts"] = True
    if verbose:
        overrides["verbose"] = True
    if quiet:
        overrides["quiet"] = True
    return load_config(config_file=config, **overrides)
