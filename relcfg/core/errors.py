"""Exit codes for CLI commands.

The numeric values are part of the CLI contract and should remain stable:
- 0: Success
- 1: User error (invalid configuration, bad arguments, unloadable config file)
- 3: Release error (a file patch failed while preparing a release)
- 5: I/O error (a generated file could not be written)
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Process exit codes used by `relcfg` commands."""

    OK = 0
    USER_ERROR = 1
    RELEASE_ERROR = 3
    IO_ERROR = 5

    def __str__(self) -> str:
        """Return human-readable name."""
        return self.name.lower().replace("_", " ")

    @property
    def is_success(self) -> bool:
        """Check if this code indicates success."""
        return self == ErrorCode.OK
