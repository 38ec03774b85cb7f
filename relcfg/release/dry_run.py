"""Read-only simulation of file-patch rules.

Used by the validator: the same matching and substitution as the live patcher,
with mock version/date values, and findings reported as diagnostics instead of
failures. A missing file or a broken regex is an error; a pattern that matches
nothing or changes nothing is only a warning here (the live patcher treats an
unmatched pattern as fatal).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from relcfg.core.result import Err
from relcfg.release.patcher import read_text_exact, resolve_rule_path
from relcfg.release.patterns import (
    MOCK_DATETIME,
    MOCK_VERSION,
    compile_substitution,
    placeholder_values,
)
from relcfg.release.rules import FilePatchRule, pattern_rules


def _empty() -> list[str]:
    return []


@dataclass
class DryRunReport:
    path: str
    errors: list[str] = field(default_factory=_empty)
    warnings: list[str] = field(default_factory=_empty)
    suggestions: list[str] = field(default_factory=_empty)
    replacements: int = 0

    @property
    def ok(self) -> bool:
        return not self.errors


def simulate_rule(rule: FilePatchRule, *, cwd: Path, label: str | None = None) -> DryRunReport:
    where = label or rule.path
    report = DryRunReport(path=rule.path)

    full_path = resolve_rule_path(rule.path, cwd=cwd)
    if not full_path.is_file():
        report.errors.append(f"{where}: file not found: {full_path}")
        return report

    try:
        content = read_text_exact(full_path)
    except (OSError, UnicodeDecodeError) as e:
        report.errors.append(f"{where}: cannot read file: {e}")
        return report

    placeholders = placeholder_values(version=MOCK_VERSION, datetime=MOCK_DATETIME)

    for n, entry in enumerate(pattern_rules(rule), start=1):
        prefix = f"{where} pattern {n}"
        compiled = compile_substitution(entry.regex, entry.replacement, placeholders=placeholders)
        if isinstance(compiled, Err):
            report.errors.append(f"{prefix}: {compiled.error}")
            continue
        substitution = compiled.value

        if substitution.template.unreplaced:
            tokens = ", ".join(substitution.template.unreplaced)
            report.warnings.append(
                f"{prefix}: replacement contains unreplaced placeholder(s) {tokens} "
                "(supported: {version}, {datetime}, ${version}, ${date})"
            )

        updated, count = substitution.apply(content)
        if count == 0:
            report.warnings.append(
                f"{prefix}: pattern does not match any content ({substitution.pattern.describe()})"
            )
            continue
        if updated == content:
            report.warnings.append(f"{prefix}: pattern matches but the replacement makes no changes")
            continue

        content = updated
        report.replacements += 1
        report.suggestions.append(
            f"{prefix}: would update {count} occurrence(s) in {rule.path}"
        )

    return report
