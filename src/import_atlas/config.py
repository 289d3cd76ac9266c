"""Configuration loading and management for Import Atlas.

Configuration sources are merged in priority order:
    1. Defaults (defined in AtlasConfig)
    2. Global config (~/.import-atlas.toml)
    3. Project config (./import-atlas.toml)
    4. Explicit config file
    5. Environment variables (IMPORT_ATLAS_* prefix)
    6. CLI overrides (passed as kwargs)

Example:
    >>> config = load_config(include_dts=True, extra_ignore_dirs=["vendor"])
    >>> config.include_dts
    True
    >>> "vendor" in config.ignore_dirs
    True
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from .exceptions import ImportAtlasError, InvalidConfigError
from .scanning.walker import DEFAULT_EXTENSIONS, DEFAULT_IGNORE_DIRS

Verbosity = Literal["quiet", "normal", "verbose"]

ENV_PREFIX = "IMPORT_ATLAS_"
CONFIG_FILE_NAME = "import-atlas.toml"


@dataclass(frozen=True)
class AtlasConfig:
    """Configuration for a scan run.

    Attributes:
        File selection:
            extensions: Allowed file suffixes (lower-case, with leading dot)
            ignore_dirs: Directory names skipped at any depth
            include_dts: Also scan TypeScript declaration files (*.d.ts)
            max_file_size_mb: Files larger than this are skipped

        Output control:
            verbosity: Logging verbosity level
    """

    # File selection
    extensions: tuple[str, ...] = DEFAULT_EXTENSIONS
    ignore_dirs: tuple[str, ...] = DEFAULT_IGNORE_DIRS
    include_dts: bool = False
    max_file_size_mb: float = 10.0

    # Output control
    verbosity: Verbosity = "normal"

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if not self.extensions:
            raise InvalidConfigError("extensions", self.extensions, "at least one is required")
        for ext in self.extensions:
            if not ext.startswith("."):
                raise InvalidConfigError("extensions", ext, "must start with '.'")

        if self.max_file_size_mb <= 0:
            raise InvalidConfigError(
                "max_file_size_mb", self.max_file_size_mb, "must be positive"
            )

        if self.verbosity not in ("quiet", "normal", "verbose"):
            raise InvalidConfigError(
                "verbosity", self.verbosity, "expected quiet, normal or verbose"
            )

    @property
    def max_file_size_bytes(self) -> int:
        """Get max file size in bytes."""
        return int(self.max_file_size_mb * 1024 * 1024)


def load_config(config_file: Optional[Path] = None, **overrides) -> AtlasConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags). Besides the
            AtlasConfig fields, accepts ``verbose``/``quiet`` booleans and
            ``extra_ignore_dirs``, which extends rather than replaces
            ``ignore_dirs``.

    Returns:
        Validated AtlasConfig instance

    Raises:
        ImportAtlasError: If a config file is invalid or missing
    """
    merged: dict = {}

    global_config = Path.home() / f".{CONFIG_FILE_NAME}"
    if global_config.exists():
        try:
            merged.update(_load_toml_file(global_config))
        except Exception as e:
            raise ImportAtlasError(f"Invalid global config '{global_config}': {e}")

    project_config = Path.cwd() / CONFIG_FILE_NAME
    if project_config.exists():
        try:
            merged.update(_load_toml_file(project_config))
        except Exception as e:
            raise ImportAtlasError(f"Invalid project config '{project_config}': {e}")

    if config_file is not None:
        if not config_file.exists():
            raise ImportAtlasError(f"Config file not found: {config_file}")
        try:
            merged.update(_load_toml_file(config_file))
        except Exception as e:
            raise ImportAtlasError(f"Invalid config file '{config_file}': {e}")

    merged.update(_load_env_vars())

    if "verbose" in overrides:
        if overrides["verbose"]:
            overrides["verbosity"] = "verbose"
        del overrides["verbose"]
    if "quiet" in overrides:
        if overrides["quiet"]:
            overrides["verbosity"] = "quiet"
        del overrides["quiet"]

    extra_ignore = overrides.pop("extra_ignore_dirs", None) or ()

    # Drop unset CLI options so they don't mask file/env values
    merged.update({k: v for k, v in overrides.items() if v is not None})

    for key in ("extensions", "ignore_dirs"):
        if isinstance(merged.get(key), str):
            merged[key] = _split_list(merged[key])
        elif key in merged:
            merged[key] = tuple(merged[key])
    if "extensions" in merged:
        merged["extensions"] = tuple(ext.lower() for ext in merged["extensions"])

    if extra_ignore:
        base = merged.get("ignore_dirs", AtlasConfig.ignore_dirs)
        merged["ignore_dirs"] = tuple(base) + tuple(d for d in extra_ignore if d not in base)

    try:
        return AtlasConfig(**merged)
    except TypeError as e:
        # Unknown field in config
        raise ImportAtlasError(f"Invalid configuration: {e}")


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from IMPORT_ATLAS_* environment variables.

    Supported environment variables:
        IMPORT_ATLAS_EXTENSIONS: comma-separated list (.ts,.js)
        IMPORT_ATLAS_IGNORE_DIRS: comma-separated list
        IMPORT_ATLAS_INCLUDE_DTS: bool (true/false/1/0)
        IMPORT_ATLAS_MAX_FILE_SIZE_MB: float
        IMPORT_ATLAS_VERBOSITY: quiet/normal/verbose

    Returns:
        Dict of field_name -> parsed_value for any IMPORT_ATLAS_* vars found.
    """
    type_hints = get_type_hints(AtlasConfig)

    result: dict[str, Any] = {}

    for field_name in AtlasConfig.__dataclass_fields__:
        env_key = f"{ENV_PREFIX}{field_name.upper()}"
        env_value = os.environ.get(env_key)

        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint)
            if parsed is not None:
                result[field_name] = parsed
        except ValueError as e:
            raise ImportAtlasError(f"Invalid {env_key}: {e}")

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse environment variable string to the correct type.

    Raises:
        ValueError: If value can't be parsed to expected type
    """
    origin = getattr(type_hint, "__origin__", None)

    # tuple[str, ...]: comma-separated
    if origin is tuple:
        return _split_list(value)

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        elif lower in ("false", "0", "no", "off"):
            return False
        else:
            raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    if type_hint is float:
        return float(value)

    # String (including Literal types like Verbosity)
    if type_hint is str or origin is Literal:
        return value

    return None


def _load_toml_file(path: Path) -> dict:
    """Load TOML file and return parsed dict.

    Raises:
        ImportAtlasError: If no TOML parser is available
        Exception: If TOML parsing fails
    """
    try:
        # Python 3.11+ has tomllib in stdlib
        import tomllib
    except ModuleNotFoundError:
        try:
            # Fallback to tomli for Python 3.9-3.10
            import tomli as tomllib  # type: ignore
        except ImportError:
            raise ImportAtlasError(
                "TOML support requires Python 3.11+ or 'tomli' package. "
                "Install with: pip install tomli"
            )

    with open(path, "rb") as f:
        return tomllib.load(f)


def _split_list(value: str) -> tuple[str, ...]:
    """Split a comma-separated option value, dropping empty items."""
    return tuple(part.strip() for part in value.split(",") if part.strip())
