"""Pattern compiler — URL templates into ordered segment specs.

``"/person/{name}/{age}"`` compiles to::

    CompiledPattern(
        template="/person/{name}/{age}",
        segments=(LiteralSegment("person"), VariableSegment("name"), VariableSegment("age")),
    )

Leading and trailing slashes are optional, so ``"qperson/{name}"`` and
``"/qperson/{name}/"`` compile to the same segments.
"""

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import TypeAlias
from urllib.parse import unquote

from sitelets.errors import InvalidPatternError

_IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_]*(?:\.[A-Za-z_][A-Za-z0-9_]*)*")


@dataclass(frozen=True, slots=True)
class LiteralSegment:
    """A fixed path segment, matched exactly."""

    text: str


@dataclass(frozen=True, slots=True)
class VariableSegment:
    """A ``{name}`` segment. The name may be dotted (``{name.first}``)."""

    name: str

    @property
    def path(self) -> tuple[str, ...]:
        return tuple(self.name.split("."))


UrlSegmentSpec: TypeAlias = LiteralSegment | VariableSegment


@dataclass(frozen=True, slots=True)
class CompiledPattern:
    """An ordered sequence of literal and variable segments."""

    template: str
    segments: tuple[UrlSegmentSpec, ...]

    @property
    def variables(self) -> tuple[str, ...]:
        """Variable names in left-to-right order."""
        return tuple(s.name for s in self.segments if isinstance(s, VariableSegment))

    def __len__(self) -> int:
        return len(self.segments)


@lru_cache(maxsize=1024)
def compile_pattern(template: str) -> CompiledPattern:
    """Compile a URL template into a ``CompiledPattern``.

    Raises ``InvalidPatternError`` for malformed braces, empty interior
    segments, invalid identifiers, duplicate variable names and
    ``<param>``-style segments.
    """
    stripped = template.strip("/")
    if not stripped:
        return CompiledPattern(template=template, segments=())

    segments: list[UrlSegmentSpec] = []
    seen: set[str] = set()
    for part in stripped.split("/"):
        if not part:
            raise InvalidPatternError(template, "empty path segment")

        if part.startswith("<") and part.endswith(">"):
            raise InvalidPatternError(
                template, f"use {{param}} rather than <param> (found {part!r})"
            )

        if "{" not in part and "}" not in part:
            segments.append(LiteralSegment(part))
            continue

        if not (part.startswith("{") and part.endswith("}")) or part.count("{") != 1:
            raise InvalidPatternError(template, f"malformed braces in segment {part!r}")

        name = part[1:-1]
        if "}" in name or _IDENTIFIER.fullmatch(name) is None:
            raise InvalidPatternError(template, f"invalid variable name {name!r}")
        if name in seen:
            raise InvalidPatternError(template, f"duplicate variable {name!r}")
        seen.add(name)
        segments.append(VariableSegment(name))

    return CompiledPattern(template=template, segments=tuple(segments))


def split_path(path: str, *, decode: bool = True) -> list[str]:
    """Split a request path into segments, dropping empty ones.

    Percent-escapes are decoded per segment, after splitting, so an
    encoded ``%2F`` stays inside its segment.
    """
    parts = [p for p in path.strip("/").split("/") if p]
    if decode:
        return [unquote(p) for p in parts]
    return parts
