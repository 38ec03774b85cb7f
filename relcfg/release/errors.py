from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Literal


@dataclass(frozen=True, slots=True)
class LoadError:
    """A release config file could not be read or parsed."""

    message: str
    path: Path | None = None
    hint: str | None = None


@dataclass(frozen=True, slots=True)
class PatchError:
    """A live file patch failed; the release step must stop."""

    kind: Literal[
        "invalid_config",
        "invalid_rule",
        "invalid_regex",
        "file_not_found",
        "read_failed",
        "write_failed",
        "no_match",
    ]
    message: str
    hint: str | None = None


@dataclass(frozen=True, slots=True)
class WriteError:
    """A generated file (workflow, release config) could not be written."""

    message: str
    path: Path
    hint: str | None = None
