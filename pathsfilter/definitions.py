from __future__ import annotations

import re
from pathlib import Path

from pathsfilter.errors import InvalidPatternError, MalformedDefinitionError
from pathsfilter.filters import PathFilter, build_path_filter
from pathsfilter.models import PatternSpec
from pathsfilter.patterns import compile_pattern


FilterSet = dict[str, PathFilter]

FILTER_NAME_RE = re.compile(r"^([A-Za-z0-9_.-]+):\s*$")
COMMENT_PREFIX = "#"


def parse_filters(text: str) -> FilterSet:
    """Parse a minimal YAML-like definition of named pattern lists.

    Example::

        docs:
          - 'docs/**'
        code:
          - src/**
          - '!src/**/*.md'

    Only one level of nesting is understood. A repeated filter name resumes
    the earlier filter, so its patterns are appended in document order.
    """
    collected: dict[str, list[PatternSpec]] = {}
    current: str | None = None

    for line_number, raw_line in enumerate((text or "").splitlines(), start=1):
        line = raw_line.strip()
        if not line or line.startswith(COMMENT_PREFIX):
            continue

        name_match = FILTER_NAME_RE.match(line)
        if name_match:
            current = name_match.group(1)
            collected.setdefault(current, [])
            continue

        if line.startswith("-"):
            if current is None:
                raise MalformedDefinitionError(
                    f"pattern {line!r} appears before any filter name",
                    line_number=line_number,
                )
            raw_pattern = line[1:].strip()
            try:
                collected[current].append(compile_pattern(raw_pattern))
            except InvalidPatternError as exc:
                raise InvalidPatternError(
                    raw_pattern,
                    f"{exc.reason} (filter '{current}', line {line_number})",
                ) from exc
            continue

        raise MalformedDefinitionError(
            f"expected 'name:' or '- pattern', got {line!r}",
            line_number=line_number,
        )

    if not collected:
        raise MalformedDefinitionError("No filters defined in filter definitions.")

    return {
        name: build_path_filter(name, patterns)
        for name, patterns in collected.items()
    }


def load_filters(path: Path) -> FilterSet:
    return parse_filters(path.read_text(encoding="utf-8"))
