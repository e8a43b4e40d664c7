from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Union


@dataclass(frozen=True, slots=True)
class LiteralText:
    text: str


@dataclass(frozen=True, slots=True)
class AnyChar:
    """`?` - exactly one character other than `/`."""


@dataclass(frozen=True, slots=True)
class SingleWildcard:
    """`*` - any run of characters other than `/`, possibly empty."""


@dataclass(frozen=True, slots=True)
class MultiWildcard:
    """`**` - any run of characters, crossing `/`."""


@dataclass(frozen=True, slots=True)
class AnyDirectories:
    """`**/` - zero or more whole directory components."""


Segment = Union[LiteralText, AnyChar, SingleWildcard, MultiWildcard, AnyDirectories]


@dataclass(frozen=True, slots=True)
class PatternSpec:
    raw: str
    negated: bool
    segments: tuple[Segment, ...]
    matcher: re.Pattern[str] = field(repr=False, compare=False)

    def matches(self, path: str) -> bool:
        return self.matcher.fullmatch(path) is not None


class Quantifier(str, Enum):
    ANY = "any"
    ALL = "all"

    @classmethod
    def parse(cls, value: str | None) -> "Quantifier":
        normalized = (value or "").strip().lower()
        if normalized in {"", "any", "some"}:
            return cls.ANY
        if normalized in {"all", "every"}:
            return cls.ALL
        raise ValueError(
            f"Invalid quantifier {value!r}. Use 'some' (any) or 'every' (all)."
        )
