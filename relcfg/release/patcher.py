from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

from relcfg.core.result import Err, Ok, Result
from relcfg.core.structured import get_str
from relcfg.output.console import ConsoleProtocol, Style
from relcfg.platform.files import atomic_write_text
from relcfg.release.config import DEFAULT_DATETIME_FORMAT
from relcfg.release.errors import PatchError
from relcfg.release.patterns import compile_substitution, placeholder_values
from relcfg.release.rules import FilePatchRule, parse_file_rule, pattern_rules, rule_label, rules_from_options


@dataclass(frozen=True, slots=True)
class FileUpdate:
    path: str
    replacements: int


def format_datetime(fmt: str, *, now: datetime | None = None) -> str:
    """Format the release timestamp.

    `iso` gives ISO-8601 UTC with milliseconds, `unix` gives whole seconds
    since the epoch. `custom` and unknown formats fall back to `iso`.
    """
    moment = (now or datetime.now(UTC)).astimezone(UTC)
    if fmt == "unix":
        return str(int(moment.timestamp()))
    return f"{moment:%Y-%m-%dT%H:%M:%S}.{moment.microsecond // 1000:03d}Z"


def resolve_rule_path(rule_path: str, *, cwd: Path) -> Path:
    return (cwd / rule_path).resolve()


def read_text_exact(path: Path) -> str:
    """Read text without newline translation so CRLF files are written back unchanged."""
    return path.read_bytes().decode("utf-8")


def update_file(
    rule: FilePatchRule,
    *,
    version: str,
    datetime_text: str,
    cwd: Path,
    console: ConsoleProtocol,
) -> Result[FileUpdate, PatchError]:
    """Apply every pattern of `rule` and write the file once at the end.

    Any pattern that matches nothing aborts the update before the file is
    written.
    """
    full_path = resolve_rule_path(rule.path, cwd=cwd)
    if not full_path.is_file():
        return Err(
            PatchError(
                kind="file_not_found",
                message=f"File not found: {full_path}",
                hint=f"paths are resolved against {cwd}",
            )
        )

    try:
        content = read_text_exact(full_path)
    except (OSError, UnicodeDecodeError) as e:
        return Err(PatchError(kind="read_failed", message=f"failed to read {rule.path}: {e}"))

    placeholders = placeholder_values(version=version, datetime=datetime_text)
    replacements = 0

    for entry in pattern_rules(rule):
        compiled = compile_substitution(entry.regex, entry.replacement, placeholders=placeholders)
        if isinstance(compiled, Err):
            return Err(
                PatchError(kind="invalid_regex", message=f"{rule.path}: {compiled.error}")
            )
        substitution = compiled.value

        updated, count = substitution.apply(content)
        if count == 0:
            return Err(
                PatchError(
                    kind="no_match",
                    message=(
                        f"Pattern did not match any content in {rule.path}: "
                        f"{substitution.pattern.describe()}"
                    ),
                    hint="run `relcfg validate` to dry-run the file rules",
                )
            )
        if updated == content:
            console.warning(
                f"{rule.path}: {substitution.pattern.describe()} matched but changed nothing"
            )
            continue

        content = updated
        replacements += 1

    try:
        atomic_write_text(full_path, content)
    except OSError as e:
        return Err(PatchError(kind="write_failed", message=f"failed to write {rule.path}: {e}"))

    return Ok(FileUpdate(path=rule.path, replacements=replacements))


def update_files(
    files: Sequence[object],
    *,
    version: str,
    datetime_format: str = DEFAULT_DATETIME_FORMAT,
    cwd: Path,
    console: ConsoleProtocol,
    now: datetime | None = None,
) -> Result[list[FileUpdate], PatchError]:
    """Patch each file in order, stopping at the first failure.

    Files patched before a failure stay patched.
    """
    datetime_text = format_datetime(datetime_format, now=now)
    results: list[FileUpdate] = []

    for index, raw in enumerate(files):
        label = rule_label(raw, index)
        parsed = parse_file_rule(raw, label=label)
        if parsed.rule is None:
            error = PatchError(
                kind="invalid_rule",
                message=parsed.errors[0],
                hint="; ".join(parsed.errors[1:]) or None,
            )
            console.error(f"Failed to update {label}: {error.message}")
            return Err(error)

        result = update_file(
            parsed.rule,
            version=version,
            datetime_text=datetime_text,
            cwd=cwd,
            console=console,
        )
        if isinstance(result, Err):
            console.error(f"Failed to update file {parsed.rule.path}: {result.error.message}")
            return result
        results.append(result.value)

    console.success("Version update completed")
    console.print(f"  VERSION: {version}", Style.DIM)
    console.print(f"  DATETIME: {datetime_text}", Style.DIM)
    for item in results:
        console.print(f"  Updated: {item.path} ({item.replacements} replacements)", Style.DIM)
    return Ok(results)


def prepare(
    options: Mapping[str, object],
    *,
    version: str,
    cwd: Path,
    console: ConsoleProtocol,
    now: datetime | None = None,
) -> Result[list[FileUpdate], PatchError]:
    """Run the update-version plugin's prepare step with its pipeline options."""
    files = rules_from_options(options)
    if files is None:
        return Err(
            PatchError(
                kind="invalid_config",
                message='update-version plugin requires a "files" list in its options',
            )
        )

    return update_files(
        files,
        version=version,
        datetime_format=get_str(options, "datetimeFormat") or DEFAULT_DATETIME_FORMAT,
        cwd=cwd,
        console=console,
        now=now,
    )
