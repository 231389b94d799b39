"""Load and validate .relnotes/config.yaml."""

from __future__ import annotations

import copy
import re
from pathlib import Path
from typing import Any

import yaml

from relnotes.files import (
    CHANGELOG_EXTENSIONS,
    CHANGELOG_FILENAMES,
    MAX_CHANGELOG_BYTES,
    MIN_CHANGELOG_BYTES,
)
from relnotes.fetch import DEFAULT_REF, DEFAULT_TIMEOUT
from relnotes.patterns import Format, ensure_multiline

CONFIG_RELPATH = Path(".relnotes") / "config.yaml"

# Default config values
DEFAULTS: dict[str, Any] = {
    "format": Format.AUTO.value,
    "pattern": None,
    "changelog": None,
    "discovery": {
        "filenames": list(CHANGELOG_FILENAMES),
        "extensions": list(CHANGELOG_EXTENSIONS),
        "min_bytes": MIN_CHANGELOG_BYTES,
        "max_bytes": MAX_CHANGELOG_BYTES,
    },
    "fetch": {
        "ref": DEFAULT_REF,
        "timeout": DEFAULT_TIMEOUT,
    },
}


class ConfigError(Exception):
    """Raised when config is invalid."""


def _deep_merge(base: dict, override: dict) -> dict:
    """Merge override into base recursively. Override wins on conflicts."""
    result = base.copy()
    for key, val in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(val, dict):
            result[key] = _deep_merge(result[key], val)
        else:
            result[key] = val
    return result


def _validate(config: dict) -> None:
    """Validate field types and values in config."""
    fmt = config.get("format")
    valid_formats = [f.value for f in Format]
    if fmt not in valid_formats:
        raise ConfigError(f"Unknown format '{fmt}'. Expected one of: {valid_formats}")

    pattern = config.get("pattern")
    if pattern is not None:
        if not isinstance(pattern, str):
            raise ConfigError("'pattern' must be a string")
        try:
            ensure_multiline(pattern)
        except re.error as exc:
            raise ConfigError(f"'pattern' does not compile: {exc}") from exc
        except ValueError as exc:
            raise ConfigError(str(exc)) from exc

    changelog = config.get("changelog")
    if changelog is not None and not isinstance(changelog, str):
        raise ConfigError("'changelog' must be a path string")

    discovery = config.get("discovery")
    if not isinstance(discovery, dict):
        raise ConfigError("'discovery' must be a mapping")
    for key in ("filenames", "extensions"):
        val = discovery.get(key)
        if not isinstance(val, list) or not all(isinstance(v, str) for v in val):
            raise ConfigError(f"'discovery.{key}' must be a list of strings")
    min_bytes = discovery.get("min_bytes")
    max_bytes = discovery.get("max_bytes")
    if not isinstance(min_bytes, int) or not isinstance(max_bytes, int):
        raise ConfigError("'discovery.min_bytes' and 'discovery.max_bytes' must be integers")
    if min_bytes > max_bytes:
        raise ConfigError(
            f"'discovery.min_bytes' ({min_bytes}) exceeds 'discovery.max_bytes' ({max_bytes})"
        )

    fetch = config.get("fetch")
    if not isinstance(fetch, dict):
        raise ConfigError("'fetch' must be a mapping")
    timeout = fetch.get("timeout")
    if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
        raise ConfigError("'fetch.timeout' must be a positive number")
    if not isinstance(fetch.get("ref"), str) or not fetch["ref"]:
        raise ConfigError("'fetch.ref' must be a non-empty string")


def load_config(project_root: Path | None = None) -> dict:
    """Load config from .relnotes/config.yaml under project_root.

    Falls back to cwd if project_root is None. The file is optional: without
    it the defaults are returned. Merges with DEFAULTS so callers always get
    a full config dict.
    """
    root = Path(project_root) if project_root else Path.cwd()
    config_path = root / CONFIG_RELPATH

    if not config_path.exists():
        return copy.deepcopy(DEFAULTS)

    with open(config_path) as f:
        raw = yaml.safe_load(f)

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError(f"Config must be a YAML mapping, got {type(raw).__name__}")

    config = _deep_merge(copy.deepcopy(DEFAULTS), raw)
    _validate(config)
    return config


def resolve_changelog_path(config: dict, project_root: Path) -> Path | None:
    """Return the configured changelog path relative to project_root, if any."""
    rel = config.get("changelog")
    if not rel:
        return None
    return project_root / rel
