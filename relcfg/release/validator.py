"""Heuristic validation of semantic-release configurations.

`validate_config` never raises on a bad configuration: every problem becomes
an entry in `errors` (invalidates the result), `warnings` (invalidates only in
strict mode) or `suggestions`. Only loading a config file can fail outright,
which `validate_config_file` returns as `Err(LoadError)`.

File-patch rules of the update-version plugin are checked structurally and,
when well formed, dry-run against the files they target (read-only).
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

from relcfg.core.result import Err, Ok, Result
from relcfg.core.structured import StrDict, as_obj_list, as_str_dict, get_str
from relcfg.release.builder import is_update_version_plugin
from relcfg.release.config import (
    DATETIME_FORMATS,
    GIT_PLUGIN,
    GITHUB_PLUGIN,
    NPM_PLUGIN,
    REQUIRED_PLUGINS,
)
from relcfg.release.dry_run import simulate_rule
from relcfg.release.errors import LoadError
from relcfg.release.loader import load_release_config
from relcfg.release.model import (
    ReleaseConfig,
    ValidationOptions,
    ValidationResult,
    ValidationSummary,
    plugin_name,
)
from relcfg.release.rules import parse_file_rule, rule_label, rules_from_options


def _check_branches(config: Mapping[str, object], result: ValidationResult) -> None:
    if "branches" not in config or config["branches"] is None:
        result.warn("No branches specified, semantic-release will use its default branches")
        return

    branches = as_obj_list(config["branches"])
    if branches is None:
        result.error("Branches must be a list")
        return
    if not branches:
        result.error("At least one branch must be specified")
        return

    for i, branch in enumerate(branches):
        if isinstance(branch, str):
            if not branch.strip():
                result.error(f"branches[{i}]: branch name must not be empty")
            continue
        table = as_str_dict(branch)
        if table is None or get_str(table, "name") is None:
            result.error(f'branches[{i}]: must be a branch name or an object with a "name"')


def _check_plugins(config: Mapping[str, object], result: ValidationResult) -> list[object] | None:
    if "plugins" not in config or config["plugins"] is None:
        result.error("No plugins specified")
        return None

    plugins = as_obj_list(config["plugins"])
    if plugins is None:
        result.error("Plugins must be a list")
        return None
    if not plugins:
        result.error("At least one plugin must be specified")
        return plugins

    for i, plugin in enumerate(plugins):
        if isinstance(plugin, str):
            if not plugin:
                result.error(f"plugins[{i}]: plugin name must not be empty")
            continue
        items = as_obj_list(plugin)
        if not items or not isinstance(items[0], str) or not items[0]:
            result.error(f"plugins[{i}]: must be a plugin name or a [name, options] pair")
            continue
        if len(items) > 2 or (len(items) == 2 and as_str_dict(items[1]) is None):
            result.error(f"plugins[{i}] ({items[0]}): options must be a single object")
    return plugins


def _plugin_options(entry: object) -> StrDict | None:
    items = as_obj_list(entry)
    if items is None or len(items) < 2:
        return None
    return as_str_dict(items[1])


def _check_file_patch_plugin(
    name: str,
    options: StrDict | None,
    *,
    cwd: Path,
    result: ValidationResult,
) -> tuple[int, int]:
    """Validate and dry-run one update-version entry; returns (rule count, replacements)."""
    files = rules_from_options(options) if options is not None else None
    if files is None:
        result.error(f'{name}: plugin options must include a "files" list')
        return (0, 0)
    if not files:
        result.warn(f"{name}: no files configured, the plugin will do nothing")

    if options is not None and "datetimeFormat" in options:
        fmt = options["datetimeFormat"]
        if fmt not in DATETIME_FORMATS:
            valid = ", ".join(DATETIME_FORMATS)
            result.warn(f"{name}: unknown datetimeFormat {fmt!r} (expected one of {valid}), iso will be used")

    replacements = 0
    for index, raw in enumerate(files):
        label = rule_label(raw, index)
        parsed = parse_file_rule(raw, label=label)
        for message in parsed.errors:
            result.error(message)
        if parsed.rule is None:
            continue

        report = simulate_rule(parsed.rule, cwd=cwd, label=label)
        for message in report.errors:
            result.error(message)
        for message in report.warnings:
            result.warn(message)
        for message in report.suggestions:
            result.suggest(message)
        replacements += report.replacements

    return (len(files), replacements)


def validate_config(
    config: object,
    *,
    options: ValidationOptions | None = None,
    cwd: Path,
) -> ValidationResult:
    """Validate a configuration object (parsed JSON or a `ReleaseConfig`).

    `cwd` is the directory file-patch paths are resolved against.
    """
    opts = options or ValidationOptions()
    result = ValidationResult()

    if isinstance(config, ReleaseConfig):
        config = config.to_dict()
    data = as_str_dict(config)
    if data is None:
        result.error("Configuration must be an object")
        return result

    _check_branches(data, result)
    plugins = _check_plugins(data, result)
    names = [n for n in (plugin_name(p) for p in plugins or []) if n is not None]

    file_rules = 0
    replacements = 0
    if opts.check_plugins and plugins:
        for required in REQUIRED_PLUGINS:
            if required not in names:
                result.warn(f"Missing recommended plugin: {required}")

        for entry in plugins:
            name = plugin_name(entry)
            if name is None:
                continue
            entry_options = _plugin_options(entry)

            if name == NPM_PLUGIN and entry_options is not None and "npmPublish" not in entry_options:
                result.suggest(f"Consider explicitly setting the npmPublish option for {NPM_PLUGIN}")

            if is_update_version_plugin(name):
                count, done = _check_file_patch_plugin(name, entry_options, cwd=cwd, result=result)
                file_rules += count
                replacements += done

    branches = as_obj_list(data.get("branches"))
    result.summary = ValidationSummary(
        has_valid_structure=not result.errors,
        branch_count=len(branches) if branches is not None else 0,
        plugin_count=len(plugins) if plugins is not None else 0,
        has_npm_plugin=NPM_PLUGIN in names,
        has_git_plugin=GIT_PLUGIN in names,
        has_github_plugin=GITHUB_PLUGIN in names,
        file_rule_count=file_rules,
        replacement_count=replacements,
    )

    if opts.verbose:
        summary = result.summary
        if summary.has_valid_structure:
            result.suggest("Configuration structure is valid")
        if summary.has_npm_plugin:
            result.suggest("NPM plugin detected - good for publishing packages")
        if summary.has_git_plugin:
            result.suggest("Git plugin detected - will commit release changes")
        if summary.has_github_plugin:
            result.suggest("GitHub plugin detected - will create GitHub releases")

    if opts.strict and result.warnings:
        result.is_valid = False

    return result


def validate_config_file(
    path: Path,
    *,
    options: ValidationOptions | None = None,
    cwd: Path | None = None,
) -> Result[ValidationResult, LoadError]:
    """Load `path` and validate it; file rules resolve against `cwd` (default: the file's directory)."""
    loaded = load_release_config(path)
    if isinstance(loaded, Err):
        return loaded
    base = cwd if cwd is not None else path.resolve().parent
    return Ok(validate_config(loaded.value, options=options, cwd=base))
