from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from pathsfilter.config import RunConfig
from pathsfilter.definitions import FilterSet, parse_filters
from pathsfilter.filters import PathFilter
from pathsfilter.models import Quantifier


@dataclass(slots=True)
class FilterReport:
    name: str
    result: bool
    matched_files: list[str]
    pattern_count: int


def _filter_result(path_filter: PathFilter, changed_files: Sequence[str], quantifier: Quantifier) -> bool:
    # A filter without patterns is never satisfied, not even vacuously.
    if not path_filter.patterns:
        return False
    if quantifier is Quantifier.ALL:
        return all(path_filter.matches(path) for path in changed_files)
    return any(path_filter.matches(path) for path in changed_files)


def evaluate(
    filter_set: FilterSet,
    changed_files: Sequence[str],
    quantifier: Quantifier = Quantifier.ANY,
) -> dict[str, bool]:
    files = tuple(changed_files)
    return {
        name: _filter_result(path_filter, files, quantifier)
        for name, path_filter in filter_set.items()
    }


def explain(
    filter_set: FilterSet,
    changed_files: Sequence[str],
    quantifier: Quantifier = Quantifier.ANY,
) -> list[FilterReport]:
    files = tuple(changed_files)
    return [
        FilterReport(
            name=name,
            result=_filter_result(path_filter, files, quantifier),
            matched_files=path_filter.matching_files(files),
            pattern_count=len(path_filter.patterns),
        )
        for name, path_filter in filter_set.items()
    ]


def run(config: RunConfig) -> dict[str, bool]:
    """Parse the configured filters and evaluate them against the configured files."""
    return evaluate(parse_filters(config.filters_text), config.changed_files, config.quantifier)
