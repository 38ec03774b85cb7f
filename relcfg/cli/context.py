from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from relcfg.output.console import ConsoleProtocol, RichConsole


@dataclass(frozen=True, slots=True)
class CLIContext:
    cwd: Path
    console: ConsoleProtocol


def build_context() -> CLIContext:
    return CLIContext(cwd=Path.cwd().resolve(), console=RichConsole())


def resolve_path(ctx: CLIContext, path: Path) -> Path:
    """Interpret a user-supplied path relative to the invocation directory."""
    expanded = path.expanduser()
    if expanded.is_absolute():
        return expanded
    return ctx.cwd / expanded
