"""Reading release configs and package manifests from disk."""

from __future__ import annotations

import json
from pathlib import Path

from relcfg.core.result import Err, Ok, Result
from relcfg.core.structured import StrDict, as_str_dict
from relcfg.release.config import (
    DEFAULT_RELEASE_CONFIG_FILE,
    PACKAGE_JSON,
    PACKAGE_RELEASE_KEY,
    RELEASE_CONFIG_FILES,
)
from relcfg.release.errors import LoadError

_JS_SUFFIXES = frozenset({".js", ".cjs", ".mjs", ".ts"})
_YAML_SUFFIXES = frozenset({".yml", ".yaml"})


def find_release_config(project: Path) -> Path | None:
    """First loadable release config in `project`, including package.json#release.

    JavaScript configs cannot be evaluated, so they are returned only when
    nothing else exists (loading one then reports why it was rejected).
    """
    js_config: Path | None = None
    for name in RELEASE_CONFIG_FILES:
        candidate = project / name
        if not candidate.is_file():
            continue
        if candidate.suffix.lower() in _JS_SUFFIXES:
            js_config = js_config or candidate
            continue
        return candidate

    manifest = project / PACKAGE_JSON
    if manifest.is_file():
        data = _parse_json(manifest)
        if isinstance(data, Ok):
            table = as_str_dict(data.value)
            if table is not None and PACKAGE_RELEASE_KEY in table:
                return manifest
    return js_config


def default_config_path(project: Path) -> Path:
    return find_release_config(project) or project / DEFAULT_RELEASE_CONFIG_FILE


def _parse_json(path: Path) -> Result[object, LoadError]:
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return Err(LoadError(f"Configuration file not found: {path}", path=path))
    except PermissionError:
        return Err(LoadError(f"Permission denied reading: {path}", path=path))
    except UnicodeDecodeError as e:
        return Err(LoadError(f"Error reading {path.name}: {e}", path=path))
    except OSError as e:
        return Err(LoadError(f"Failed to load config file: {e}", path=path))

    try:
        return Ok(json.loads(text))
    except json.JSONDecodeError as e:
        hint = None
        if path.suffix == "":
            hint = "only JSON is supported for extension-less rc files"
        return Err(LoadError(f"Invalid JSON in {path.name}: {e}", path=path, hint=hint))


def load_release_config(path: Path) -> Result[object, LoadError]:
    """Load the raw configuration object stored at `path`.

    The result is untyped on purpose: the validator reports shape problems
    itself instead of failing here.
    """
    suffix = path.suffix.lower()
    if suffix in _JS_SUFFIXES:
        return Err(
            LoadError(
                f"JavaScript configs cannot be evaluated: {path.name}",
                path=path,
                hint=f"export the configuration as JSON ({DEFAULT_RELEASE_CONFIG_FILE})",
            )
        )
    if suffix in _YAML_SUFFIXES:
        return Err(
            LoadError(
                f"YAML configs are not supported: {path.name}",
                path=path,
                hint=f"convert the configuration to JSON ({DEFAULT_RELEASE_CONFIG_FILE})",
            )
        )

    parsed = _parse_json(path)
    if isinstance(parsed, Err):
        return parsed

    if path.name != PACKAGE_JSON:
        return parsed

    manifest = as_str_dict(parsed.value)
    if manifest is None or PACKAGE_RELEASE_KEY not in manifest:
        return Err(
            LoadError(
                f'{path.name} has no "{PACKAGE_RELEASE_KEY}" key',
                path=path,
                hint=f"add a {PACKAGE_RELEASE_KEY!r} section or use {DEFAULT_RELEASE_CONFIG_FILE}",
            )
        )
    return Ok(manifest[PACKAGE_RELEASE_KEY])


def load_package_json(project: Path) -> Result[StrDict, LoadError]:
    manifest = project / PACKAGE_JSON
    parsed = _parse_json(manifest)
    if isinstance(parsed, Err):
        return parsed
    data = as_str_dict(parsed.value)
    if data is None:
        return Err(LoadError(f"{PACKAGE_JSON} root must be an object", path=manifest))
    return Ok(data)
