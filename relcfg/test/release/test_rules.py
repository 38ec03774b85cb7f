from __future__ import annotations

import re

import pytest

from relcfg.release.rules import (
    AdvancedPatch,
    PatternRule,
    SimplePatch,
    parse_file_rule,
    pattern_rules,
    rule_label,
    rule_to_dict,
    rules_from_options,
    suggest_key,
)


class TestParseFileRule:
    def test_simple_rule(self) -> None:
        parsed = parse_file_rule({"path": "VERSION", "pattern": r"\d+", "replacement": "{version}"})
        assert parsed.ok
        assert parsed.rule == SimplePatch(path="VERSION", pattern=r"\d+", replacement="{version}")

    def test_advanced_rule(self) -> None:
        parsed = parse_file_rule(
            {
                "path": "src/version.php",
                "patterns": [
                    {"regex": "0.0.0", "replacement": "{version}"},
                    {"regex": re.compile("DATE"), "replacement": "{datetime}"},
                ],
            }
        )
        assert isinstance(parsed.rule, AdvancedPatch)
        assert len(parsed.rule.patterns) == 2

    def test_empty_replacement_is_allowed(self) -> None:
        parsed = parse_file_rule({"path": "a", "pattern": "-dev", "replacement": ""})
        assert parsed.ok

    def test_both_shapes_is_an_error(self) -> None:
        parsed = parse_file_rule(
            {
                "path": "a",
                "pattern": "x",
                "replacement": "y",
                "patterns": [{"regex": "x", "replacement": "y"}],
            },
            label="files[0] (a)",
        )
        assert not parsed.ok
        assert parsed.errors == (
            'files[0] (a): use either a "patterns" list or "pattern" + "replacement", not both',
        )

    def test_neither_shape_is_an_error(self) -> None:
        parsed = parse_file_rule({"path": "a"})
        assert not parsed.ok
        assert "must include either" in parsed.errors[0]

    def test_pattern_without_replacement(self) -> None:
        parsed = parse_file_rule({"path": "a", "pattern": "x"})
        assert parsed.errors == (
            'file rule: "pattern" and "replacement" must be given together (missing "replacement")',
        )

    def test_typo_is_reported_with_suggestion(self) -> None:
        parsed = parse_file_rule({"pathss": "a", "pattern": "x", "replacement": "y"})
        assert not parsed.ok
        assert 'file rule: missing required property "path"' in parsed.errors
        assert 'file rule: unknown property "pathss". Did you mean "path"?' in parsed.errors

    def test_unknown_property_without_suggestion_lists_valid_keys(self) -> None:
        parsed = parse_file_rule({"path": "a", "pattern": "x", "replacement": "y", "zzz": 1})
        assert any("valid properties: path, pattern, replacement, patterns" in e for e in parsed.errors)

    def test_patterns_entry_needs_both_keys(self) -> None:
        parsed = parse_file_rule({"path": "a", "patterns": [{"regex": "x"}]})
        assert parsed.errors == ('file rule patterns[0]: must include both "regex" and "replacement"',)

    @pytest.mark.parametrize("patterns", [[], "x", {"regex": "x"}])
    def test_patterns_must_be_a_non_empty_list(self, patterns: object) -> None:
        parsed = parse_file_rule({"path": "a", "patterns": patterns})
        assert not parsed.ok

    def test_non_string_pattern(self) -> None:
        parsed = parse_file_rule({"path": "a", "pattern": 3, "replacement": "y"})
        assert any('"pattern" must be a non-empty string' in e for e in parsed.errors)

    def test_non_object_rule(self) -> None:
        parsed = parse_file_rule("VERSION")
        assert parsed.errors == ("file rule: file rule must be an object",)


@pytest.mark.parametrize(
    ("key", "expected"),
    [
        ("pathss", "path"),
        ("Path", "path"),
        ("patternss", "patterns"),
        ("replace", "replacement"),
        ("patern", "pattern"),
        ("regex", None),
    ],
)
def test_suggest_key(key: str, expected: str | None) -> None:
    assert suggest_key(key) == expected


def test_rule_label() -> None:
    assert rule_label({"path": "VERSION"}, 2) == "files[2] (VERSION)"
    assert rule_label({"pattern": "x"}, 0) == "files[0]"
    assert rule_label("junk", 1) == "files[1]"


def test_pattern_rules_flattens_both_shapes() -> None:
    simple = SimplePatch(path="a", pattern="x", replacement="y")
    advanced = AdvancedPatch(path="a", patterns=(PatternRule("x", "y"), PatternRule("z", "w")))
    assert pattern_rules(simple) == (PatternRule("x", "y"),)
    assert len(pattern_rules(advanced)) == 2


def test_rule_to_dict_parses_back() -> None:
    rule = AdvancedPatch(path="a", patterns=(PatternRule("x", "{version}"),))
    assert parse_file_rule(rule_to_dict(rule)).rule == rule


def test_rules_from_options() -> None:
    assert rules_from_options({"files": [{"path": "a"}]}) == [{"path": "a"}]
    assert rules_from_options({"files": "a"}) is None
    assert rules_from_options({}) is None
