import pytest

from pathsfilter.definitions import load_filters, parse_filters
from pathsfilter.errors import InvalidPatternError, MalformedDefinitionError


DEFINITIONS = """
docs:
  - 'docs/**'
code:
  - src/**
  - "!src/**/*.md"
"""


def test_parse_filters():
    filter_set = parse_filters(DEFINITIONS)

    assert list(filter_set) == ["docs", "code"]
    assert [spec.raw for spec in filter_set["docs"].patterns] == ["'docs/**'"]
    code = filter_set["code"].patterns
    assert [spec.raw for spec in code] == ["src/**", '"!src/**/*.md"']
    assert [spec.negated for spec in code] == [False, True]
    assert filter_set["code"].name == "code"


def test_comments_blank_lines_and_indentation_are_ignored():
    text = "# changed paths\n\n  backend.api:\n\t- api/**\n\n   # trailing comment\n"
    filter_set = parse_filters(text)
    assert list(filter_set) == ["backend.api"]
    assert filter_set["backend.api"].matches("api/v1/routes.py")


def test_windows_line_endings():
    filter_set = parse_filters("web-ui:\r\n  - ui/**\r\n")
    assert filter_set["web-ui"].matches("ui/index.ts")


def test_repeated_name_appends_patterns():
    filter_set = parse_filters("a:\n - x/**\nb:\n - y/**\na:\n - '!x/skip'\n")
    assert list(filter_set) == ["a", "b"]
    assert [spec.raw for spec in filter_set["a"].patterns] == ["x/**", "'!x/skip'"]


def test_filter_without_patterns():
    filter_set = parse_filters("empty:\nother:\n  - '*'\n")
    assert filter_set["empty"].patterns == ()
    assert len(filter_set["other"].patterns) == 1


def test_pattern_before_any_filter_is_rejected():
    with pytest.raises(MalformedDefinitionError) as excinfo:
        parse_filters("  - docs/**\ndocs:\n  - docs/**\n")
    assert excinfo.value.line_number == 1


def test_only_pattern_lines_is_rejected():
    with pytest.raises(MalformedDefinitionError):
        parse_filters("- src/**\n- docs/**\n")


@pytest.mark.parametrize("text", ["", "   \n\n", "# nothing here\n"])
def test_no_filters_is_rejected(text):
    with pytest.raises(MalformedDefinitionError, match="No filters"):
        parse_filters(text)


def test_unrecognized_line_is_rejected():
    with pytest.raises(MalformedDefinitionError) as excinfo:
        parse_filters("docs:\n  - docs/**\nnot a filter\n")
    assert excinfo.value.line_number == 3


def test_invalid_pattern_names_filter_and_line():
    with pytest.raises(InvalidPatternError, match="filter 'docs', line 2"):
        parse_filters("docs:\n  - !\n")


def test_load_filters(tmp_path):
    path = tmp_path / "filters.yml"
    path.write_text(DEFINITIONS, encoding="utf-8")
    assert list(load_filters(path)) == ["docs", "code"]
