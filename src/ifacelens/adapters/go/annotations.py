"""Explicit interface assertions written next to Go struct declarations.

Recognized forms, tried in order with the first match winning per comment
line:

- ``// ensure File implements Reader, Writer``
- ``// File implements Reader``
- ``var _ Reader = (*File)(nil)``

The last one is also picked up from code, where Go programmers normally
write it as a compile-time check.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from typing import Protocol

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_NAME_LIST = r"([A-Za-z_][A-Za-z0-9_,\s]*)"

_COMMENT = re.compile(r"//[^\n]*|/\*.*?\*/", re.DOTALL)


def is_identifier(token: str) -> bool:
    """Check whether ``token`` is shaped like a Go identifier."""
    return bool(_IDENTIFIER.match(token))


def split_names(raw: str) -> list[str]:
    """Split a comma separated name list, dropping anything not identifier-shaped."""
    names: list[str] = []
    for part in raw.split(","):
        part = part.strip()
        if part and is_identifier(part):
            names.append(part)
    return names


def strip_comment_markers(text: str) -> list[str]:
    """Return the content lines of a ``//`` or ``/* */`` comment."""
    text = text.strip()
    if text.startswith("//"):
        text = text[2:]
    elif text.startswith("/*"):
        text = text[2:]
        if text.endswith("*/"):
            text = text[:-2]
    lines = []
    for line in text.splitlines():
        line = line.strip()
        if line.startswith("*"):
            line = line[1:].strip()
        if line:
            lines.append(line)
    return lines


class AnnotationMatcher(Protocol):
    """Recognizes one textual form of an explicit assertion."""

    name: str

    def match(self, text: str, struct_name: str) -> list[str] | None:
        """Return asserted interface names, or None when the form does not apply."""
        ...


class RegexAnnotationMatcher:
    """Matcher driven by a regex template with a ``{struct}`` placeholder.

    Group 1 of the compiled pattern must capture the interface name list.
    """

    def __init__(self, name: str, template: str, flags: int = 0) -> None:
        self.name = name
        self._template = template
        self._flags = flags
        self._compiled: dict[str, re.Pattern[str]] = {}

    def _pattern(self, struct_name: str) -> re.Pattern[str]:
        pattern = self._compiled.get(struct_name)
        if pattern is None:
            pattern = re.compile(
                self._template.replace("{struct}", re.escape(struct_name)), self._flags
            )
            self._compiled[struct_name] = pattern
        return pattern

    def match(self, text: str, struct_name: str) -> list[str] | None:
        m = self._pattern(struct_name).search(text)
        if m is None:
            return None
        return split_names(m.group(1))

    def find_all(self, text: str, struct_name: str) -> list[str]:
        found: list[str] = []
        for m in self._pattern(struct_name).finditer(text):
            found.extend(split_names(m.group(1)))
        return found


ENSURE_IMPLEMENTS = RegexAnnotationMatcher(
    "ensure-implements",
    r"\b(?i:ensure)\s+{struct}\s+(?i:implements)\s+" + _NAME_LIST,
)
IMPLEMENTS = RegexAnnotationMatcher(
    "implements",
    r"(?<![A-Za-z0-9_]){struct}\s+(?i:implements)\s+" + _NAME_LIST,
)
STATIC_ASSERTION = RegexAnnotationMatcher(
    "static-assertion",
    r"(?:\bvar\s+|^\s*)_\s+([A-Za-z_][A-Za-z0-9_]*)\s*=\s*"
    r"\(\s*\*\s*{struct}\s*\)\s*\(\s*nil\s*\)",
    re.MULTILINE,
)

DEFAULT_MATCHERS: tuple[AnnotationMatcher, ...] = (
    ENSURE_IMPLEMENTS,
    IMPLEMENTS,
    STATIC_ASSERTION,
)


def _union(target: list[str], names: Iterable[str]) -> None:
    for name in names:
        if name not in target:
            target.append(name)


class AnnotationParser:
    """Collects the interfaces a struct is explicitly asserted to implement.

    Matchers are tried in order for each comment line; malformed assertions
    are dropped without being reported since comments are free text.
    """

    def __init__(self, matchers: Sequence[AnnotationMatcher] | None = None) -> None:
        self._matchers = tuple(matchers) if matchers is not None else DEFAULT_MATCHERS

    @property
    def matchers(self) -> tuple[AnnotationMatcher, ...]:
        return self._matchers

    def parse_comment_line(self, line: str, struct_name: str) -> list[str]:
        for matcher in self._matchers:
            names = matcher.match(line, struct_name)
            if names is not None:
                return names
        return []

    def parse_comments(self, comments: Iterable[str], struct_name: str) -> list[str]:
        """Parse raw comment texts (markers included) attached to a struct."""
        found: list[str] = []
        for comment in comments:
            for line in strip_comment_markers(comment):
                _union(found, self.parse_comment_line(line, struct_name))
        return found

    def find_static_assertions(self, source_text: str, struct_name: str) -> list[str]:
        """Find ``var _ I = (*Struct)(nil)`` assertions anywhere in a file."""
        return STATIC_ASSERTION.find_all(source_text, struct_name)

    def parse(self, source_text: str, struct_name: str) -> list[str]:
        """Scan a whole file for assertions about ``struct_name``."""
        found = self.parse_comments(_COMMENT.findall(source_text), struct_name)
        _union(found, self.find_static_assertions(source_text, struct_name))
        return found
