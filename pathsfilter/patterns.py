from __future__ import annotations

import re
from typing import Iterable

from pathsfilter.errors import InvalidPatternError
from pathsfilter.models import (
    AnyChar,
    AnyDirectories,
    LiteralText,
    MultiWildcard,
    PatternSpec,
    Segment,
    SingleWildcard,
)


QUOTE_CHARS = ("'", '"')


def _strip_quotes(text: str) -> str:
    if len(text) >= 2 and text[0] in QUOTE_CHARS and text[-1] == text[0]:
        return text[1:-1]
    return text


def _tokenize(glob: str) -> tuple[Segment, ...]:
    segments: list[Segment] = []
    literal: list[str] = []

    def _flush() -> None:
        if literal:
            segments.append(LiteralText("".join(literal)))
            literal.clear()

    index = 0
    length = len(glob)
    while index < length:
        char = glob[index]
        if char == "*":
            _flush()
            if index + 1 < length and glob[index + 1] == "*":
                # A whole-component `**/` spans zero or more directories; any other `**` spans anything.
                starts_component = index == 0 or glob[index - 1] == "/"
                if starts_component and index + 2 < length and glob[index + 2] == "/":
                    segments.append(AnyDirectories())
                    index += 3
                else:
                    segments.append(MultiWildcard())
                    index += 2
            else:
                segments.append(SingleWildcard())
                index += 1
        elif char == "?":
            _flush()
            segments.append(AnyChar())
            index += 1
        else:
            literal.append(char)
            index += 1

    _flush()
    return tuple(segments)


def _segment_regex(segment: Segment) -> str:
    if isinstance(segment, LiteralText):
        return re.escape(segment.text)
    if isinstance(segment, AnyChar):
        return "[^/]"
    if isinstance(segment, SingleWildcard):
        return "[^/]*"
    if isinstance(segment, MultiWildcard):
        return ".*"
    if isinstance(segment, AnyDirectories):
        return "(?:.*/)?"
    raise TypeError(f"Unsupported segment: {segment!r}")


def compile_pattern(raw: str) -> PatternSpec:
    """Compile one glob (optionally `!`-negated and/or quoted) into a PatternSpec.

    Supported syntax is deliberately small: `*` (within one path component),
    `**` (across components), `**/` (zero or more directories) and `?`.
    Everything else is matched literally against the whole path.
    """
    text = _strip_quotes(raw.strip())
    if not text.strip():
        raise InvalidPatternError(raw, "pattern is empty")

    negated = text.startswith("!")
    if negated:
        text = text[1:].strip()
        if not text:
            raise InvalidPatternError(raw, "negation without a pattern")

    text = _strip_quotes(text)
    if not text:
        raise InvalidPatternError(raw, "pattern is empty")

    segments = _tokenize(text)
    matcher = re.compile("".join(_segment_regex(segment) for segment in segments), re.DOTALL)
    return PatternSpec(raw=raw, negated=negated, segments=segments, matcher=matcher)


def compile_patterns(raws: Iterable[str]) -> tuple[PatternSpec, ...]:
    return tuple(compile_pattern(raw) for raw in raws)
