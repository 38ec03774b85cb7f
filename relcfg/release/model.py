from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field

from relcfg.core.structured import StrDict, as_obj_list, as_str_dict, get_str
from relcfg.release.config import (
    DEFAULT_BRANCH,
    DEFAULT_NODE_VERSION,
    DEFAULT_PERMISSIONS,
    DEFAULT_TEST_COMMAND,
    DEFAULT_WORKFLOW_NAME,
)


@dataclass(frozen=True, slots=True)
class Branch:
    """A release branch; `prerelease` marks a pre-release channel (e.g. "beta")."""

    name: str
    prerelease: str | bool | None = None

    def to_value(self) -> str | StrDict:
        if self.prerelease is None:
            return self.name
        return {"name": self.name, "prerelease": self.prerelease}


@dataclass(frozen=True, slots=True)
class Plugin:
    """One pipeline stage, referenced by name with optional options."""

    name: str
    options: StrDict | None = None

    def to_value(self) -> str | list[object]:
        if self.options is None:
            return self.name
        return [self.name, self.options]


@dataclass(frozen=True, slots=True)
class ReleaseConfig:
    """Branches plus the ordered plugin pipeline consumed by semantic-release."""

    branches: tuple[Branch, ...]
    plugins: tuple[Plugin, ...]

    def find_plugins(self, matches: Callable[[str], bool]) -> list[Plugin]:
        """Pipeline entries whose name satisfies `matches`, in pipeline order."""
        return [p for p in self.plugins if matches(p.name)]

    def to_dict(self) -> StrDict:
        return {
            "branches": [b.to_value() for b in self.branches],
            "plugins": [p.to_value() for p in self.plugins],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> ReleaseConfig:
        """Build from parsed JSON, skipping entries that do not have a usable shape."""
        branches: list[Branch] = []
        for item in as_obj_list(data.get("branches")) or []:
            branch = branch_from_value(item)
            if branch is not None:
                branches.append(branch)

        plugins: list[Plugin] = []
        for item in as_obj_list(data.get("plugins")) or []:
            plugin = plugin_from_value(item)
            if plugin is not None:
                plugins.append(plugin)

        return cls(branches=tuple(branches), plugins=tuple(plugins))


def branch_from_value(value: object) -> Branch | None:
    if isinstance(value, Branch):
        return value
    if isinstance(value, str):
        name = value.strip()
        return Branch(name=name) if name else None
    table = as_str_dict(value)
    if table is None:
        return None
    name = get_str(table, "name")
    if name is None:
        return None
    prerelease = table.get("prerelease")
    if not isinstance(prerelease, (str, bool)):
        prerelease = None
    return Branch(name=name, prerelease=prerelease)


def plugin_from_value(value: object) -> Plugin | None:
    if isinstance(value, Plugin):
        return value
    if isinstance(value, str):
        return Plugin(name=value) if value else None
    items = as_obj_list(value)
    if not items or not isinstance(items[0], str):
        return None
    options = as_str_dict(items[1]) if len(items) > 1 else None
    return Plugin(name=items[0], options=options)


def plugin_name(value: object) -> str | None:
    """Name of a raw plugin entry (`"name"` or `["name", {...}]`)."""
    if isinstance(value, str):
        return value
    items = as_obj_list(value)
    if items and isinstance(items[0], str):
        return items[0]
    return None


@dataclass(frozen=True, slots=True)
class DetectedConfig:
    """Project settings inferred from package.json and release config files."""

    branches: tuple[str, ...] = (DEFAULT_BRANCH,)
    node_version: str = DEFAULT_NODE_VERSION
    run_tests: bool = False
    test_command: str | None = None
    build_command: str | None = None
    is_npm_package: bool = False
    additional_scripts: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class WorkflowStep:
    """A custom workflow step: either a shell command (`run`) or an action (`uses`)."""

    name: str
    run: str | None = None
    uses: str | None = None
    with_: Mapping[str, str] | None = None
    env: Mapping[str, str] | None = None


def _default_permissions() -> dict[str, str]:
    return dict(DEFAULT_PERMISSIONS)


@dataclass(frozen=True, slots=True)
class WorkflowOptions:
    name: str = DEFAULT_WORKFLOW_NAME
    branches: tuple[str, ...] = (DEFAULT_BRANCH,)
    node_version: str = DEFAULT_NODE_VERSION
    run_tests: bool = False
    test_command: str = DEFAULT_TEST_COMMAND
    build_command: str | None = None
    # A plain string step is used both as the step name and its command.
    additional_steps: tuple[str | WorkflowStep, ...] = ()
    permissions: Mapping[str, str] = field(default_factory=_default_permissions)


@dataclass(frozen=True, slots=True)
class ValidationOptions:
    strict: bool = False
    check_plugins: bool = True
    verbose: bool = False


@dataclass(frozen=True, slots=True)
class ValidationSummary:
    has_valid_structure: bool = False
    branch_count: int = 0
    plugin_count: int = 0
    has_npm_plugin: bool = False
    has_git_plugin: bool = False
    has_github_plugin: bool = False
    file_rule_count: int = 0
    replacement_count: int = 0

    def to_dict(self) -> StrDict:
        return {
            "hasValidStructure": self.has_valid_structure,
            "branchCount": self.branch_count,
            "pluginCount": self.plugin_count,
            "hasNpmPlugin": self.has_npm_plugin,
            "hasGitPlugin": self.has_git_plugin,
            "hasGitHubPlugin": self.has_github_plugin,
            "fileRuleCount": self.file_rule_count,
            "replacementCount": self.replacement_count,
        }


def _empty() -> list[str]:
    return []


@dataclass
class ValidationResult:
    """Aggregated diagnostics for one configuration."""

    is_valid: bool = True
    errors: list[str] = field(default_factory=_empty)
    warnings: list[str] = field(default_factory=_empty)
    suggestions: list[str] = field(default_factory=_empty)
    summary: ValidationSummary = field(default_factory=ValidationSummary)

    def error(self, message: str) -> None:
        self.errors.append(message)
        self.is_valid = False

    def warn(self, message: str) -> None:
        self.warnings.append(message)

    def suggest(self, message: str) -> None:
        self.suggestions.append(message)

    def to_dict(self) -> StrDict:
        return {
            "isValid": self.is_valid,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
            "suggestions": list(self.suggestions),
            "summary": self.summary.to_dict(),
        }
