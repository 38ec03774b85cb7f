"""File-patch rules as tagged variants.

A rule is either a single `{path, pattern, replacement}` triple or a
`{path, patterns: [{regex, replacement}, ...]}` list. Raw config entries are
parsed once into `SimplePatch` or `AdvancedPatch`; everything downstream
matches on the variant instead of probing for keys.
"""

from __future__ import annotations

import difflib
import re
from collections.abc import Mapping
from dataclasses import dataclass

from relcfg.core.structured import as_obj_list, as_str_dict

VALID_RULE_KEYS: tuple[str, ...] = ("path", "pattern", "replacement", "patterns")

type RegexSource = str | re.Pattern[str]


@dataclass(frozen=True, slots=True)
class PatternRule:
    regex: RegexSource
    replacement: str


@dataclass(frozen=True, slots=True)
class SimplePatch:
    path: str
    pattern: RegexSource
    replacement: str


@dataclass(frozen=True, slots=True)
class AdvancedPatch:
    path: str
    patterns: tuple[PatternRule, ...]


type FilePatchRule = SimplePatch | AdvancedPatch


def pattern_rules(rule: FilePatchRule) -> tuple[PatternRule, ...]:
    match rule:
        case SimplePatch(pattern=pattern, replacement=replacement):
            return (PatternRule(regex=pattern, replacement=replacement),)
        case AdvancedPatch(patterns=patterns):
            return patterns


@dataclass(frozen=True, slots=True)
class RuleParse:
    rule: FilePatchRule | None
    errors: tuple[str, ...]

    @property
    def ok(self) -> bool:
        return self.rule is not None


def suggest_key(key: str, valid: tuple[str, ...] = VALID_RULE_KEYS) -> str | None:
    """Closest valid key for a misspelled one ("pathss" -> "path", "patern" -> "pattern")."""
    lowered = key.lower()
    if lowered in valid:
        return lowered
    # "patterns" contains "pattern": prefer the longest key the typo contains,
    # then the shortest key containing the typo.
    contained = [v for v in valid if v in lowered]
    if contained:
        return max(contained, key=len)
    containing = [v for v in valid if lowered in v]
    if containing:
        return min(containing, key=len)
    close = difflib.get_close_matches(lowered, valid, n=1, cutoff=0.6)
    return close[0] if close else None


def rule_label(raw: object, index: int) -> str:
    table = as_str_dict(raw)
    path = table.get("path") if table is not None else None
    if isinstance(path, str) and path:
        return f"files[{index}] ({path})"
    return f"files[{index}]"


def _is_regex_source(value: object) -> bool:
    if isinstance(value, re.Pattern):
        return True
    return isinstance(value, str) and value != ""


def _parse_patterns(value: object, label: str, errors: list[str]) -> tuple[PatternRule, ...]:
    items = as_obj_list(value)
    if items is None:
        errors.append(f'{label}: "patterns" must be a list')
        return ()
    if not items:
        errors.append(f'{label}: "patterns" must contain at least one entry')
        return ()

    rules: list[PatternRule] = []
    for i, item in enumerate(items):
        entry = as_str_dict(item)
        where = f"{label} patterns[{i}]"
        if entry is None:
            errors.append(f'{where}: must be an object with "regex" and "replacement"')
            continue
        if "regex" not in entry or "replacement" not in entry:
            errors.append(f'{where}: must include both "regex" and "replacement"')
            continue
        regex = entry["regex"]
        replacement = entry["replacement"]
        if not _is_regex_source(regex):
            errors.append(f'{where}: "regex" must be a non-empty string or compiled pattern')
            continue
        if not isinstance(replacement, str):
            errors.append(f'{where}: "replacement" must be a string')
            continue
        rules.append(PatternRule(regex=regex, replacement=replacement))  # type: ignore[arg-type]
    return tuple(rules)


def parse_file_rule(raw: object, *, label: str = "file rule") -> RuleParse:
    """Parse one raw rule, collecting every structural problem found."""
    table = as_str_dict(raw)
    if table is None:
        return RuleParse(rule=None, errors=(f"{label}: file rule must be an object",))

    errors: list[str] = []

    path = table.get("path")
    if not isinstance(path, str) or not path.strip():
        errors.append(f'{label}: missing required property "path"')

    for key in table:
        if key in VALID_RULE_KEYS:
            continue
        hint = suggest_key(key)
        if hint is not None:
            errors.append(f'{label}: unknown property "{key}". Did you mean "{hint}"?')
        else:
            valid = ", ".join(VALID_RULE_KEYS)
            errors.append(f'{label}: unknown property "{key}" (valid properties: {valid})')

    has_patterns = "patterns" in table
    has_pattern = "pattern" in table
    has_replacement = "replacement" in table

    rule: FilePatchRule | None = None
    if has_patterns and (has_pattern or has_replacement):
        errors.append(
            f'{label}: use either a "patterns" list or "pattern" + "replacement", not both'
        )
    elif has_patterns:
        patterns = _parse_patterns(table["patterns"], label, errors)
        if not errors and isinstance(path, str):
            rule = AdvancedPatch(path=path, patterns=patterns)
    elif has_pattern and has_replacement:
        pattern = table["pattern"]
        replacement = table["replacement"]
        if not _is_regex_source(pattern):
            errors.append(f'{label}: "pattern" must be a non-empty string or compiled pattern')
        if not isinstance(replacement, str):
            errors.append(f'{label}: "replacement" must be a string')
        if not errors and isinstance(path, str) and isinstance(replacement, str):
            rule = SimplePatch(path=path, pattern=pattern, replacement=replacement)  # type: ignore[arg-type]
    elif has_pattern or has_replacement:
        missing = "replacement" if has_pattern else "pattern"
        errors.append(f'{label}: "pattern" and "replacement" must be given together (missing "{missing}")')
    else:
        errors.append(
            f'{label}: must include either a "patterns" list or "pattern" and "replacement" properties'
        )

    if errors:
        return RuleParse(rule=None, errors=tuple(errors))
    return RuleParse(rule=rule, errors=())


def rule_to_dict(rule: FilePatchRule) -> dict[str, object]:
    match rule:
        case SimplePatch(path=path, pattern=pattern, replacement=replacement):
            return {"path": path, "pattern": pattern, "replacement": replacement}
        case AdvancedPatch(path=path, patterns=patterns):
            return {
                "path": path,
                "patterns": [{"regex": p.regex, "replacement": p.replacement} for p in patterns],
            }


def rules_from_options(options: Mapping[str, object]) -> list[object] | None:
    """Raw `files` list of an update-version plugin's options, or None if absent."""
    return as_obj_list(options.get("files"))
