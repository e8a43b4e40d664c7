from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

from pathsfilter.models import PatternSpec
from pathsfilter.patterns import compile_pattern


def matches(patterns: Sequence[PatternSpec], path: str) -> bool:
    """Decide whether `path` is included by an ordered pattern list.

    The last pattern that matches wins. Without any positive pattern the
    list acts as a pure exclusion list, so unmatched paths are included.
    An empty list includes nothing.
    """
    if not patterns:
        return False

    included = not any(not pattern.negated for pattern in patterns)
    for pattern in patterns:
        if pattern.matches(path):
            included = not pattern.negated
    return included


@dataclass(frozen=True, slots=True)
class PathFilter:
    name: str
    patterns: tuple[PatternSpec, ...] = ()

    def matches(self, path: str) -> bool:
        return matches(self.patterns, path)

    def matching_files(self, paths: Iterable[str]) -> list[str]:
        return [path for path in paths if self.matches(path)]


def build_path_filter(name: str, patterns: Iterable[str | PatternSpec] | None = None) -> PathFilter:
    compiled = tuple(
        pattern if isinstance(pattern, PatternSpec) else compile_pattern(pattern)
        for pattern in (patterns or ())
    )
    return PathFilter(name=name, patterns=compiled)
