"""Regex coercion and replacement-template expansion for file-patch rules.

Rules come from two places: Python code (compiled `re.Pattern` objects) and
JSON release configs (strings). Strings may be plain regex sources or
`/body/flags` literals as written in JavaScript configs. Replacement templates
use the JavaScript conventions semantic-release users already know:

- `$1`..`$99`, `$<name>`: captured groups
- `$&`, `` $` ``, `$'`: whole match, text before, text after
- `$$`: a literal dollar sign

plus the release placeholders `{version}`, `{datetime}`, `${version}` and
`${date}`. Placeholder values are inserted literally, so a version such as
`2.1.0` next to `$1` never turns into a group reference.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass

from relcfg.core.result import Err, Ok, Result

_LITERAL_RE = re.compile(r"^/(?P<body>.+)/(?P<flags>[dgimsuy]*)$", re.DOTALL)
_JS_NAMED_GROUP_RE = re.compile(r"\(\?<(?![=!])")
_DOLLAR_TOKEN_RE = re.compile(r"\$\{(?P<name>[A-Za-z_][A-Za-z0-9_]*)\}")
_BRACE_TOKEN_RE = re.compile(r"\{(?P<name>[A-Za-z_][A-Za-z0-9_]*)\}")
_DIGITS = frozenset("0123456789")

# Names that look like release placeholders. Tokens using one of these names
# in an unsupported form (`{date}`, `${datetime}`) are reported as unreplaced.
_PLACEHOLDER_LIKE = frozenset({"version", "date", "datetime", "time", "timestamp", "now"})

MOCK_VERSION = "1.0.0-dry-run"
MOCK_DATETIME = "2000-01-01T00:00:00.000Z"


@dataclass(frozen=True, slots=True)
class CompiledPattern:
    regex: re.Pattern[str]
    replace_all: bool

    def describe(self) -> str:
        return regex_to_literal(self.regex, replace_all=self.replace_all)


def compile_pattern(raw: object) -> Result[CompiledPattern, str]:
    """Coerce a rule's regex into a compiled pattern.

    Compiled patterns replace the first match only. Plain strings are
    case-sensitive and replace every match. `/body/flags` strings honour the
    `g`, `i`, `m` and `s` flags.
    """
    if isinstance(raw, re.Pattern):
        return Ok(CompiledPattern(regex=raw, replace_all=False))
    if not isinstance(raw, str):
        return Err(f"regex must be a string or compiled pattern, got {type(raw).__name__}")
    if not raw:
        return Err("regex must not be empty")

    source = raw
    flags = 0
    replace_all = True
    literal = _LITERAL_RE.match(raw)
    if literal is not None:
        source = literal.group("body")
        letters = literal.group("flags")
        replace_all = "g" in letters
        if "i" in letters:
            flags |= re.IGNORECASE
        if "m" in letters:
            flags |= re.MULTILINE
        if "s" in letters:
            flags |= re.DOTALL

    source = _JS_NAMED_GROUP_RE.sub("(?P<", source)
    try:
        regex = re.compile(source, flags)
    except re.error as e:
        return Err(f"invalid regex {raw!r}: {e}")
    return Ok(CompiledPattern(regex=regex, replace_all=replace_all))


def regex_to_literal(regex: re.Pattern[str], *, replace_all: bool = False) -> str:
    """Render a compiled pattern as a `/body/flags` string for JSON configs."""
    letters = "g" if replace_all else ""
    if regex.flags & re.IGNORECASE:
        letters += "i"
    if regex.flags & re.MULTILINE:
        letters += "m"
    if regex.flags & re.DOTALL:
        letters += "s"
    return f"/{regex.pattern}/{letters}"


def placeholder_values(*, version: str, datetime: str) -> dict[str, str]:
    return {
        "{version}": version,
        "{datetime}": datetime,
        "${version}": version,
        "${date}": datetime,
    }


@dataclass(frozen=True, slots=True)
class _Text:
    value: str


@dataclass(frozen=True, slots=True)
class _Group:
    ref: int | str


@dataclass(frozen=True, slots=True)
class _Whole:
    pass


@dataclass(frozen=True, slots=True)
class _Before:
    pass


@dataclass(frozen=True, slots=True)
class _After:
    pass


type _Piece = _Text | _Group | _Whole | _Before | _After


@dataclass(frozen=True, slots=True)
class Template:
    pieces: tuple[_Piece, ...]
    unreplaced: tuple[str, ...]

    def expand(self, m: re.Match[str]) -> str:
        out: list[str] = []
        for piece in self.pieces:
            match piece:
                case _Text(value=value):
                    out.append(value)
                case _Group(ref=ref):
                    out.append(m.group(ref) or "")
                case _Whole():
                    out.append(m.group(0))
                case _Before():
                    out.append(m.string[: m.start()])
                case _After():
                    out.append(m.string[m.end() :])
        return "".join(out)


def parse_template(
    template: str,
    *,
    regex: re.Pattern[str],
    placeholders: Mapping[str, str],
) -> Template:
    """Split a replacement template into literal text and match references."""
    pieces: list[_Piece] = []
    unreplaced: list[str] = []
    buf: list[str] = []
    groups = regex.groups
    named = regex.groupindex

    def flush() -> None:
        if buf:
            pieces.append(_Text("".join(buf)))
            buf.clear()

    def token(m: re.Match[str]) -> None:
        text = m.group(0)
        value = placeholders.get(text)
        if value is not None:
            buf.append(value)
            return
        buf.append(text)
        if m.group("name") in _PLACEHOLDER_LIKE:
            unreplaced.append(text)

    i = 0
    n = len(template)
    while i < n:
        ch = template[i]

        if ch == "{":
            m = _BRACE_TOKEN_RE.match(template, i)
            if m is not None:
                token(m)
                i = m.end()
                continue
            buf.append(ch)
            i += 1
            continue

        if ch != "$" or i + 1 >= n:
            buf.append(ch)
            i += 1
            continue

        m = _DOLLAR_TOKEN_RE.match(template, i)
        if m is not None:
            token(m)
            i = m.end()
            continue

        nxt = template[i + 1]
        if nxt == "$":
            buf.append("$")
            i += 2
        elif nxt == "&":
            flush()
            pieces.append(_Whole())
            i += 2
        elif nxt == "`":
            flush()
            pieces.append(_Before())
            i += 2
        elif nxt == "'":
            flush()
            pieces.append(_After())
            i += 2
        elif nxt in _DIGITS:
            # Two-digit references win only when that group exists ($12 with two groups is $1 + "2").
            if i + 2 < n and template[i + 2] in _DIGITS and 1 <= int(template[i + 1 : i + 3]) <= groups:
                flush()
                pieces.append(_Group(int(template[i + 1 : i + 3])))
                i += 3
            elif 1 <= int(nxt) <= groups:
                flush()
                pieces.append(_Group(int(nxt)))
                i += 2
            else:
                buf.append(template[i : i + 2])
                i += 2
        elif nxt == "<" and named:
            close = template.find(">", i + 2)
            if close < 0:
                buf.append("$<")
                i += 2
                continue
            name = template[i + 2 : close]
            flush()
            if name in named:
                pieces.append(_Group(name))
            i = close + 1
        else:
            buf.append("$")
            i += 1

    flush()
    return Template(pieces=tuple(pieces), unreplaced=tuple(unreplaced))


@dataclass(frozen=True, slots=True)
class Substitution:
    pattern: CompiledPattern
    template: Template

    def apply(self, text: str) -> tuple[str, int]:
        """Return the rewritten text and the number of matches replaced."""
        count = 0 if self.pattern.replace_all else 1
        return self.pattern.regex.subn(self.template.expand, text, count=count)


def compile_substitution(
    regex: object,
    replacement: str,
    *,
    placeholders: Mapping[str, str],
) -> Result[Substitution, str]:
    compiled = compile_pattern(regex)
    if isinstance(compiled, Err):
        return compiled
    template = parse_template(
        replacement,
        regex=compiled.value.regex,
        placeholders=placeholders,
    )
    return Ok(Substitution(pattern=compiled.value, template=template))
