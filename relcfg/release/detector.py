"""Best-effort detection of release settings from a project's files.

Detection never fails: anything unreadable is reported as a console warning
and the corresponding default is kept.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from relcfg.core.result import Err
from relcfg.core.structured import StrDict, as_obj_list, as_str_dict, get_str, get_table, truthy
from relcfg.output.console import ConsoleProtocol
from relcfg.release.config import (
    DEFAULT_BRANCH,
    DEFAULT_NODE_VERSION,
    NODE_VERSION_FILES,
    PACKAGE_JSON,
    PACKAGE_RELEASE_KEY,
    RELEASE_CONFIG_FILES,
)
from relcfg.release.loader import load_package_json, load_release_config
from relcfg.release.model import DetectedConfig, branch_from_value

_PLACEHOLDER_TEST_SCRIPTS = frozenset({'echo "Error: no test specified" && exit 1', "exit 1"})
_FRAMEWORK_SCRIPTS: tuple[str, ...] = ("jest", "mocha", "vitest", "ava", "tap", "nyc")
_FRAMEWORK_DEPENDENCIES: tuple[str, ...] = (
    "jest",
    "mocha",
    "vitest",
    "ava",
    "tap",
    "@testing-library/react",
    "@testing-library/vue",
    "cypress",
    "playwright",
)
_RUNNER_SCRIPTS: tuple[str, ...] = ("jest", "mocha", "vitest")
_BUILD_SCRIPTS: tuple[str, ...] = ("build", "compile", "dist")
_AUX_SCRIPTS: tuple[str, ...] = ("lint", "format", "typecheck", "validate")

_RANGE_OPERATOR_RE = re.compile(r"[<>=^~*xX|\s]")
_VERSION_RE = re.compile(r"\d+(?:\.\d+)*")


def node_version_from_range(spec: str) -> str:
    """Reduce an engines range to a version setup-node accepts.

    `>=18.0.0` -> `18.0.0`, `^20` -> `20`, `>=18 <21` -> `18`; plain values
    (`20`, `lts/*`) are kept as is.
    """
    value = spec.strip()
    if value.startswith("lts/") or not _RANGE_OPERATOR_RE.search(value):
        return value
    m = _VERSION_RE.search(value)
    if m is None:
        return value
    return m.group(0)


def is_placeholder_test_script(script: str) -> bool:
    return script in _PLACEHOLDER_TEST_SCRIPTS or "no test specified" in script


def _has_test_framework(scripts: Mapping[str, object], manifest: Mapping[str, object]) -> bool:
    if any(truthy(scripts.get(name)) for name in _FRAMEWORK_SCRIPTS):
        return True
    dev = get_table(manifest, "devDependencies") or {}
    return any(truthy(dev.get(name)) for name in _FRAMEWORK_DEPENDENCIES)


def detect_test_command(scripts: Mapping[str, object], manifest: Mapping[str, object]) -> str | None:
    """Test command worth running in CI, or None.

    Conservative on purpose: a generic `test` script only counts alongside a
    known test framework, so npm's placeholder script never enables tests.
    """
    if truthy(scripts.get("test:ci")):
        return "npm run test:ci"
    if truthy(scripts.get("test:prod")):
        return "npm run test:prod"
    if truthy(scripts.get("test:production")):
        return "npm run test:production"

    test = scripts.get("test")
    if (
        isinstance(test, str)
        and test
        and not is_placeholder_test_script(test)
        and _has_test_framework(scripts, manifest)
    ):
        return "npm test"

    for name in _RUNNER_SCRIPTS:
        if truthy(scripts.get(name)):
            return f"npm run {name}"
    return None


def detect_build_command(scripts: Mapping[str, object]) -> str | None:
    for name in _BUILD_SCRIPTS:
        if truthy(scripts.get(name)):
            return f"npm run {name}"
    return None


def is_npm_package(manifest: Mapping[str, object]) -> bool:
    if truthy(manifest.get("private")):
        return False
    name = get_str(manifest, "name") or ""
    return name.startswith("@") or truthy(manifest.get("publishConfig"))


def branch_names(value: object) -> tuple[str, ...] | None:
    items = as_obj_list(value)
    if items is None:
        return None
    names: list[str] = []
    for item in items:
        branch = branch_from_value(item)
        names.append(branch.name if branch is not None else DEFAULT_BRANCH)
    return tuple(names)


@dataclass
class _Detection:
    branches: tuple[str, ...] = (DEFAULT_BRANCH,)
    node_version: str = DEFAULT_NODE_VERSION
    test_command: str | None = None
    build_command: str | None = None
    npm_package: bool = False
    additional_scripts: list[str] = field(default_factory=list)

    def freeze(self) -> DetectedConfig:
        return DetectedConfig(
            branches=self.branches,
            node_version=self.node_version,
            run_tests=self.test_command is not None,
            test_command=self.test_command,
            build_command=self.build_command,
            is_npm_package=self.npm_package,
            additional_scripts=tuple(self.additional_scripts),
        )


def _apply_manifest(manifest: StrDict, found: _Detection) -> None:
    found.npm_package = is_npm_package(manifest)

    engines = get_table(manifest, "engines") or {}
    node = get_str(engines, "node")
    if node is not None:
        found.node_version = node_version_from_range(node)

    scripts = get_table(manifest, "scripts")
    if scripts is None:
        return
    found.test_command = detect_test_command(scripts, manifest)
    found.build_command = detect_build_command(scripts)
    found.additional_scripts = [name for name in _AUX_SCRIPTS if truthy(scripts.get(name))]


def _read_node_version_file(project: Path, console: ConsoleProtocol) -> str | None:
    for name in NODE_VERSION_FILES:
        path = project / name
        if not path.is_file():
            continue
        try:
            value = path.read_text(encoding="utf-8").strip()
        except (OSError, UnicodeDecodeError) as e:
            console.warning(f"Could not read {name}: {e}")
            continue
        if value:
            return node_version_from_range(value.removeprefix("v"))
    return None


def _release_branches(
    project: Path,
    manifest: StrDict | None,
    console: ConsoleProtocol,
) -> tuple[str, ...] | None:
    for name in RELEASE_CONFIG_FILES:
        path = project / name
        if not path.is_file():
            continue
        loaded = load_release_config(path)
        if isinstance(loaded, Err):
            console.warning(f"Could not parse {name}: {loaded.error.message}")
            continue
        data = as_str_dict(loaded.value)
        if data is None:
            console.warning(f"Could not parse {name}: configuration must be an object")
            continue
        return branch_names(data.get("branches"))

    if manifest is not None:
        release = get_table(manifest, PACKAGE_RELEASE_KEY)
        if release is not None:
            return branch_names(release.get("branches"))
    return None


def detect_user_configuration(project: Path, *, console: ConsoleProtocol) -> DetectedConfig:
    """Infer workflow settings for the project rooted at `project`."""
    found = _Detection()

    manifest: StrDict | None = None
    if (project / PACKAGE_JSON).is_file():
        loaded = load_package_json(project)
        if isinstance(loaded, Err):
            console.warning(f"Error detecting configuration: {loaded.error.message}")
        else:
            manifest = loaded.value
            _apply_manifest(manifest, found)

    if manifest is None or get_str(get_table(manifest, "engines") or {}, "node") is None:
        pinned = _read_node_version_file(project, console)
        if pinned is not None:
            found.node_version = pinned

    branches = _release_branches(project, manifest, console)
    if branches:
        found.branches = branches

    return found.freeze()
