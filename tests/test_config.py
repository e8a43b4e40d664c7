import pytest

from pathsfilter.auth import resolve_github_token
from pathsfilter.config import (
    DEFAULT_API_URL,
    GitHubContext,
    get_input,
    input_env_name,
    load_github_context,
    resolve_filters_text,
    resolve_quantifier,
)
from pathsfilter.errors import ConfigurationError
from pathsfilter.models import Quantifier


def test_input_env_name():
    assert input_env_name("filters") == "INPUT_FILTERS"
    assert input_env_name("predicate-quantifier") == "INPUT_PREDICATE-QUANTIFIER"
    assert input_env_name("github token") == "INPUT_GITHUB_TOKEN"


def test_get_input():
    environ = {"INPUT_FILTERS": "docs:\n - docs/**\n"}
    assert get_input("filters", environ=environ) == "docs:\n - docs/**\n"
    assert get_input("missing", environ=environ) == ""
    with pytest.raises(ConfigurationError, match="Input required"):
        get_input("missing", environ=environ, required=True)
    with pytest.raises(ConfigurationError):
        get_input("filters", environ={"INPUT_FILTERS": "  \n"}, required=True)


def test_load_github_context():
    context = load_github_context(
        {
            "GITHUB_EVENT_NAME": "pull_request",
            "GITHUB_EVENT_PATH": "/tmp/event.json",
            "GITHUB_REPOSITORY": "octo/repo",
            "GITHUB_API_URL": "https://ghe.example.com/api/v3/",
            "GITHUB_OUTPUT": "/tmp/out",
            "GITHUB_EVENT_PULL_REQUEST_BASE_SHA": "abc123",
        }
    )
    assert context.is_pull_request
    assert context.api_url == "https://ghe.example.com/api/v3"
    assert context.output_path == "/tmp/out"
    assert context.base_ref == "abc123"
    assert context.owner_and_repo() == ("octo", "repo")


def test_load_github_context_defaults():
    context = load_github_context({})
    assert not context.is_pull_request
    assert context.api_url == DEFAULT_API_URL
    assert context.base_ref == "origin/master"
    assert context.token is None


@pytest.mark.parametrize("repository", ["", "octo", "octo/", "/repo", "a/b/c"])
def test_owner_and_repo_rejects_invalid_values(repository):
    with pytest.raises(ConfigurationError):
        GitHubContext(repository=repository).owner_and_repo()


def test_resolve_filters_text_precedence(tmp_path):
    path = tmp_path / "filters.yml"
    path.write_text("from_file:\n - '*'\n", encoding="utf-8")
    environ = {"INPUT_FILTERS": "from_env:\n - '*'\n"}

    assert resolve_filters_text("inline:\n", path, environ=environ) == "inline:\n"
    assert resolve_filters_text(None, path, environ=environ).startswith("from_file")
    assert resolve_filters_text(None, None, environ=environ).startswith("from_env")


def test_resolve_filters_text_errors(tmp_path):
    with pytest.raises(ConfigurationError, match="not found"):
        resolve_filters_text(None, tmp_path / "missing.yml", environ={})
    empty = tmp_path / "empty.yml"
    empty.write_text("\n", encoding="utf-8")
    with pytest.raises(ConfigurationError, match="empty"):
        resolve_filters_text(None, empty, environ={})
    with pytest.raises(ConfigurationError):
        resolve_filters_text(None, None, environ={})


def test_resolve_quantifier():
    assert resolve_quantifier("every") is Quantifier.ALL
    assert resolve_quantifier(None, environ={"INPUT_PREDICATE-QUANTIFIER": "every"}) is Quantifier.ALL
    assert resolve_quantifier(None, environ={}) is Quantifier.ANY
    with pytest.raises(ConfigurationError):
        resolve_quantifier("most")


def test_resolve_github_token_precedence():
    environ = {"GH_TOKEN": "gh", "GITHUB_TOKEN": "github", "INPUT_GITHUB_TOKEN": "input"}
    assert resolve_github_token(environ=environ) == "github"
    assert resolve_github_token(environ={"INPUT_GITHUB_TOKEN": " input "}) == "input"
    assert resolve_github_token(environ={"GITHUB_TOKEN": "  ", "GH_TOKEN": "gh"}) == "gh"


def test_resolve_github_token_missing():
    assert resolve_github_token(environ={}) is None
    assert resolve_github_token(environ={"GITHUB_TOKEN": "  "}) is None
