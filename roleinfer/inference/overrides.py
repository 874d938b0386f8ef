"""User-declared path overrides matched with shell-style globs."""

from __future__ import annotations

import posixpath
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import List, Mapping, Optional, Pattern, Sequence

from ..models import Role

_CLASS_SPECIALS = frozenset("\\]^-[")


@dataclass(frozen=True)
class OverrideRule:
    pattern: str
    role: Role


@dataclass(frozen=True)
class OverrideMatch:
    role: Role
    pattern: str


class Overrides:
    """Ordered override rules; the first matching pattern decides the role."""

    def __init__(self, config: Mapping[Role, Sequence[str]] | None = None) -> None:
        self.rules: List[OverrideRule] = []
        for role, patterns in (config or {}).items():
            for pattern in patterns:
                self.rules.append(OverrideRule(pattern=pattern, role=Role(role)))

    def __len__(self) -> int:
        return len(self.rules)

    def match(self, path: str) -> Optional[OverrideMatch]:
        for rule in self.rules:
            if match_glob(rule.pattern, path):
                return OverrideMatch(role=rule.role, pattern=rule.pattern)
        return None


def match_glob(pattern: str, path: str) -> bool:
    """Match ``pattern`` against ``path``, trying the basename before the full path."""
    path = path.replace("\\", "/")

    if "**" in pattern:
        return match_doublestar(pattern, path)

    if glob_match(pattern, posixpath.basename(path)):
        return True
    return glob_match(pattern, path)


def match_doublestar(pattern: str, path: str) -> bool:
    """Match a pattern holding exactly one ``**``.

    The prefix is a plain string-prefix test, so ``deploy/**`` also accepts
    ``deployment/file.go``. Patterns with several ``**`` never match.
    """
    parts = pattern.split("**")
    if len(parts) != 2:
        return False

    prefix, suffix = parts
    if prefix:
        if prefix.endswith("/"):
            prefix = prefix[:-1]
        if not path.startswith(prefix):
            return False

    if suffix:
        suffix = suffix[1:] if suffix.startswith("/") else suffix
        if not path.endswith(suffix) and not match_any_suffix(path, suffix):
            return False

    return True


def match_any_suffix(path: str, pattern: str) -> bool:
    """Return True when ``pattern`` matches the path tail starting at any component."""
    if pattern.startswith("*"):
        return path.endswith(pattern[1:])

    components = path.split("/")
    for index in range(len(components)):
        if glob_match(pattern, "/".join(components[index:])):
            return True
    return False


def glob_match(pattern: str, name: str) -> bool:
    """Shell glob where ``*`` and ``?`` stop at ``/``; malformed patterns never match."""
    try:
        compiled = _compile_glob(pattern)
    except ValueError:
        return False
    return compiled.fullmatch(name) is not None


@lru_cache(maxsize=256)
def _compile_glob(pattern: str) -> Pattern[str]:
    out: List[str] = []
    index = 0
    length = len(pattern)
    while index < length:
        char = pattern[index]
        if char == "*":
            while index < length and pattern[index] == "*":
                index += 1
            out.append("[^/]*")
            continue
        if char == "?":
            out.append("[^/]")
        elif char == "\\":
            index += 1
            if index >= length:
                raise ValueError(f"trailing escape in glob {pattern!r}")
            out.append(re.escape(pattern[index]))
        elif char == "[":
            class_expr, index = _parse_class(pattern, index + 1)
            out.append(class_expr)
            continue
        else:
            out.append(re.escape(char))
        index += 1

    try:
        return re.compile("".join(out), re.DOTALL)
    except re.error as exc:
        raise ValueError(f"invalid glob {pattern!r}: {exc}") from exc


def _parse_class(pattern: str, index: int) -> tuple[str, int]:
    length = len(pattern)
    negate = index < length and pattern[index] == "^"
    if negate:
        index += 1

    ranges: List[str] = []
    while True:
        if index >= length:
            raise ValueError(f"unterminated character class in glob {pattern!r}")
        if pattern[index] == "]" and ranges:
            index += 1
            break
        low, index = _class_char(pattern, index)
        high = low
        if index + 1 < length and pattern[index] == "-" and pattern[index + 1] != "]":
            high, index = _class_char(pattern, index + 1)
            if high < low:
                raise ValueError(f"bad range in glob {pattern!r}")
        ranges.append(_class_escape(low) if low == high else f"{_class_escape(low)}-{_class_escape(high)}")

    body = "".join(ranges)
    return (f"[^{body}]" if negate else f"[{body}]"), index


def _class_char(pattern: str, index: int) -> tuple[str, int]:
    char = pattern[index]
    if char == "\\":
        index += 1
        if index >= len(pattern):
            raise ValueError(f"trailing escape in glob {pattern!r}")
        char = pattern[index]
    elif char in "-]":
        raise ValueError(f"unexpected {char!r} in character class of glob {pattern!r}")
    return char, index + 1


def _class_escape(char: str) -> str:
    return f"\\{char}" if char in _CLASS_SPECIALS else char


__all__ = [
    "OverrideMatch",
    "OverrideRule",
    "Overrides",
    "glob_match",
    "match_any_suffix",
    "match_doublestar",
    "match_glob",
]
