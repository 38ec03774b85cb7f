"""GitHub Actions workflow generation for semantic-release.

`render_workflow` is a pure template over `WorkflowOptions`; the text is
emitted as-is without YAML validation. The other helpers fill the options
from project detection and write the result to `.github/workflows/release.yml`.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import replace
from pathlib import Path

from relcfg.core.result import Err, Ok, Result
from relcfg.output.console import ConsoleProtocol
from relcfg.platform.files import atomic_write_text
from relcfg.release.config import DEFAULT_TEST_COMMAND, WORKFLOW_DIR, WORKFLOW_FILE
from relcfg.release.detector import detect_user_configuration
from relcfg.release.errors import WriteError
from relcfg.release.model import DetectedConfig, WorkflowOptions, WorkflowStep

_STEP_INDENT = "      "
_FIELD_INDENT = "        "
_VALUE_INDENT = "          "


def _render_step(step: str | WorkflowStep) -> list[str]:
    if isinstance(step, str):
        return [f"{_STEP_INDENT}- name: {step}", f"{_FIELD_INDENT}run: {step}"]

    lines = [f"{_STEP_INDENT}- name: {step.name}"]
    if step.uses:
        lines.append(f"{_FIELD_INDENT}uses: {step.uses}")
        if step.with_:
            lines.append(f"{_FIELD_INDENT}with:")
            lines.extend(f"{_VALUE_INDENT}{k}: {v}" for k, v in step.with_.items())
    elif step.run:
        lines.append(f"{_FIELD_INDENT}run: {step.run}")
    if step.env:
        lines.append(f"{_FIELD_INDENT}env:")
        lines.extend(f"{_VALUE_INDENT}{k}: {v}" for k, v in step.env.items())
    return lines


def render_workflow(options: WorkflowOptions) -> str:
    """Render the release workflow.

    Steps run in a fixed order: checkout, setup-node, install, optional build,
    optional tests, custom steps, release.
    """
    steps: list[list[str]] = [
        [
            f"{_STEP_INDENT}- name: Checkout",
            f"{_FIELD_INDENT}uses: actions/checkout@v4",
            f"{_FIELD_INDENT}with:",
            f"{_VALUE_INDENT}fetch-depth: 0",
        ],
        [
            f"{_STEP_INDENT}- name: Setup Node.js",
            f"{_FIELD_INDENT}uses: actions/setup-node@v4",
            f"{_FIELD_INDENT}with:",
            f'{_VALUE_INDENT}node-version: "{options.node_version}"',
        ],
        [
            f"{_STEP_INDENT}- name: Install dependencies",
            f"{_FIELD_INDENT}run: npm ci",
        ],
    ]

    if options.build_command:
        steps.append([f"{_STEP_INDENT}- name: Build", f"{_FIELD_INDENT}run: {options.build_command}"])

    if options.run_tests:
        steps.append([f"{_STEP_INDENT}- name: Run tests", f"{_FIELD_INDENT}run: {options.test_command}"])

    steps.extend(_render_step(step) for step in options.additional_steps)

    steps.append(
        [
            f"{_STEP_INDENT}- name: Release",
            f"{_FIELD_INDENT}run: npm run semantic-release",
            f"{_FIELD_INDENT}env:",
            _VALUE_INDENT + "GITHUB_TOKEN: ${{ secrets.GITHUB_TOKEN }}",
        ]
    )

    branches = ", ".join(f'"{b}"' for b in options.branches)
    out = [
        f"name: {options.name}",
        "",
        "on:",
        "  push:",
        f"    branches: [{branches}]",
        "",
        "jobs:",
        "  release:",
        "    runs-on: ubuntu-latest",
        "",
    ]
    if options.permissions:
        out.append("    permissions:")
        out.extend(f"      {k}: {v}" for k, v in options.permissions.items())
        out.append("")

    out.append("    steps:")
    out.append("\n\n".join("\n".join(lines) for lines in steps))
    return "\n".join(out) + "\n"


def options_from_detected(detected: DetectedConfig) -> WorkflowOptions:
    return WorkflowOptions(
        branches=detected.branches,
        node_version=detected.node_version,
        run_tests=detected.run_tests,
        test_command=detected.test_command or DEFAULT_TEST_COMMAND,
        build_command=detected.build_command,
    )


def smart_steps(detected: DetectedConfig) -> tuple[WorkflowStep, ...]:
    """Lint and type-check steps for the scripts the project already has."""
    steps: list[WorkflowStep] = []
    if "lint" in detected.additional_scripts:
        steps.append(WorkflowStep(name="Lint code", run="npm run lint"))
    if "typecheck" in detected.additional_scripts:
        steps.append(WorkflowStep(name="Type check", run="npm run typecheck"))
    return tuple(steps)


def _normalize_overrides(overrides: Mapping[str, object]) -> dict[str, object]:
    out = dict(overrides)
    branches = out.get("branches")
    if isinstance(branches, str):
        out["branches"] = (branches,)
    elif isinstance(branches, list):
        out["branches"] = tuple(branches)
    steps = out.get("additional_steps")
    if isinstance(steps, list):
        out["additional_steps"] = tuple(steps)
    return out


def create_github_workflow(
    project: Path,
    *,
    console: ConsoleProtocol,
    auto_detect: bool = True,
    overrides: Mapping[str, object] | None = None,
) -> str:
    """Render a workflow from detected settings, with `overrides` taking precedence.

    `overrides` keys are `WorkflowOptions` field names.
    """
    base = WorkflowOptions()
    if auto_detect:
        base = options_from_detected(detect_user_configuration(project, console=console))
    options = replace(base, **_normalize_overrides(overrides or {}))  # type: ignore[arg-type]
    return render_workflow(options)


def create_smart_workflow(
    project: Path,
    *,
    console: ConsoleProtocol,
    overrides: Mapping[str, object] | None = None,
) -> str:
    """Like `create_github_workflow`, adding lint/type-check steps when available."""
    detected = detect_user_configuration(project, console=console)
    options = options_from_detected(detected)

    extra = dict(overrides or {})
    if "additional_steps" not in extra:
        options = replace(options, additional_steps=smart_steps(detected))
    options = replace(options, **_normalize_overrides(extra))  # type: ignore[arg-type]
    return render_workflow(options)


def workflow_path(project: Path) -> Path:
    return project.joinpath(*WORKFLOW_DIR, WORKFLOW_FILE)


def setup_workflow(
    project: Path,
    *,
    console: ConsoleProtocol,
    overrides: Mapping[str, object] | None = None,
) -> Result[Path, WriteError]:
    """Write the smart workflow to `.github/workflows/release.yml` under `project`."""
    path = workflow_path(project)
    created_dir = not path.parent.is_dir()
    content = create_smart_workflow(project, console=console, overrides=overrides)
    try:
        atomic_write_text(path, content)
    except OSError as e:
        return Err(
            WriteError(
                message=f"failed to write {path.name}: {e}",
                path=path,
                hint="check permissions on the project directory",
            )
        )
    if created_dir:
        console.success(f"Created {path.parent.relative_to(project)} directory")
    console.success(f"Created {path.relative_to(project)}")
    return Ok(path)
