from __future__ import annotations


class PathsFilterError(Exception):
    """Base class for errors raised by the paths filter engine."""


class InvalidPatternError(PathsFilterError, ValueError):
    def __init__(self, raw: str, reason: str) -> None:
        super().__init__(f"Invalid pattern {raw!r}: {reason}")
        self.raw = raw
        self.reason = reason


class MalformedDefinitionError(PathsFilterError, ValueError):
    def __init__(self, message: str, *, line_number: int | None = None) -> None:
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)
        self.line_number = line_number


class SourceUnavailableError(PathsFilterError, RuntimeError):
    """The changed-file list could not be produced."""


class ConfigurationError(PathsFilterError, ValueError):
    """The caller is misconfigured (e.g. no filter definitions were supplied)."""
