"""Assembling semantic-release configurations."""

from __future__ import annotations

import json
import re
from collections.abc import Sequence
from pathlib import Path

from relcfg.core.structured import StrDict
from relcfg.release.config import (
    CHANGELOG_PLUGIN,
    COMMIT_ANALYZER_PLUGIN,
    DEFAULT_DATETIME_FORMAT,
    DEFAULT_GIT_ASSETS,
    DEFAULT_GIT_MESSAGE,
    GIT_PLUGIN,
    GITHUB_PLUGIN,
    NOTES_GENERATOR_PLUGIN,
    NPM_PLUGIN,
    UPDATE_VERSION_PLUGIN,
    UPDATE_VERSION_PLUGIN_STEM,
)
from relcfg.release.model import Branch, Plugin, ReleaseConfig, branch_from_value, plugin_from_value
from relcfg.release.patterns import regex_to_literal
from relcfg.release.rules import FilePatchRule, rule_to_dict

DEFAULT_BRANCHES: tuple[Branch, ...] = (
    Branch(name="main"),
    Branch(name="beta", prerelease="beta"),
)


def build_release_config(
    *,
    branches: Sequence[str | Branch] | str | None = None,
    npm_publish: bool = False,
    git_assets: Sequence[str] = DEFAULT_GIT_ASSETS,
    git_message: str = DEFAULT_GIT_MESSAGE,
    extra_prepare: Sequence[Plugin | str | list[object]] = (),
) -> ReleaseConfig:
    """Create a semantic-release configuration with sensible defaults.

    Extra prepare plugins run after the changelog and before the git commit,
    so files they touch can be listed in `git_assets`.

    Example:
        version_plugin = create_update_version_plugin(
            [{"path": "VERSION.txt", "pattern": r"\\d+\\.\\d+\\.\\d+", "replacement": "{version}"}]
        )
        config = build_release_config(
            npm_publish=True,
            extra_prepare=[version_plugin],
            git_assets=["CHANGELOG.md", "package.json", "VERSION.txt"],
        )
    """
    if branches is None:
        resolved_branches = DEFAULT_BRANCHES
    else:
        items = [branches] if isinstance(branches, str) else list(branches)
        resolved_branches = tuple(
            b for b in (branch_from_value(item) for item in items) if b is not None
        )

    extra: list[Plugin] = []
    for item in extra_prepare:
        plugin = plugin_from_value(item)
        if plugin is None:
            raise ValueError(f"invalid prepare plugin entry: {item!r}")
        extra.append(plugin)

    plugins = (
        Plugin(COMMIT_ANALYZER_PLUGIN),
        Plugin(NOTES_GENERATOR_PLUGIN),
        Plugin(NPM_PLUGIN, {"npmPublish": npm_publish}),
        Plugin(CHANGELOG_PLUGIN),
        *extra,
        Plugin(GIT_PLUGIN, {"assets": list(git_assets), "message": git_message}),
        Plugin(GITHUB_PLUGIN),
    )
    return ReleaseConfig(branches=resolved_branches, plugins=plugins)


def create_update_version_plugin(
    files: Sequence[FilePatchRule | StrDict],
    datetime_format: str = DEFAULT_DATETIME_FORMAT,
) -> Plugin:
    """Pipeline entry for the file-patch plugin.

    Each file is a `SimplePatch`/`AdvancedPatch` or the equivalent raw dict:
    `{"path", "pattern", "replacement"}` or `{"path", "patterns": [{"regex", "replacement"}]}`.
    Replacements may use `{version}`, `{datetime}`, `${version}` and `${date}`.
    """
    raw_files: list[object] = [
        f if isinstance(f, dict) else rule_to_dict(f) for f in files
    ]
    return Plugin(
        UPDATE_VERSION_PLUGIN,
        {"files": raw_files, "datetimeFormat": datetime_format},
    )


def is_update_version_plugin(name: str) -> bool:
    if name == UPDATE_VERSION_PLUGIN:
        return True
    return Path(name).stem == UPDATE_VERSION_PLUGIN_STEM


def _json_default(value: object) -> object:
    if isinstance(value, re.Pattern):
        return regex_to_literal(value)
    if isinstance(value, (tuple, set, frozenset)):
        return list(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def dump_release_config(config: ReleaseConfig | StrDict) -> str:
    """Serialize for `.releaserc.json`; compiled regexes become `/body/flags` strings."""
    data = config.to_dict() if isinstance(config, ReleaseConfig) else config
    return json.dumps(data, indent=2, default=_json_default) + "\n"
