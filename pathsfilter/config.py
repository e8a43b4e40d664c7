from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping

from pathsfilter.errors import ConfigurationError
from pathsfilter.models import Quantifier


DEFAULT_API_URL = "https://api.github.com"
DEFAULT_BASE_REF = "origin/master"
PULL_REQUEST_EVENTS = frozenset({"pull_request", "pull_request_target"})


@dataclass(slots=True)
class RunConfig:
    filters_text: str
    changed_files: tuple[str, ...] = ()
    quantifier: Quantifier = Quantifier.ANY


@dataclass(slots=True)
class GitHubContext:
    event_name: str = ""
    event_path: str = ""
    repository: str = ""
    api_url: str = DEFAULT_API_URL
    output_path: str = ""
    base_sha: str = ""
    token: str | None = field(default=None, repr=False)

    @property
    def is_pull_request(self) -> bool:
        return self.event_name in PULL_REQUEST_EVENTS

    @property
    def base_ref(self) -> str:
        return self.base_sha or DEFAULT_BASE_REF

    def owner_and_repo(self) -> tuple[str, str]:
        owner, _, repo = self.repository.partition("/")
        if not owner or not repo or "/" in repo:
            raise ConfigurationError(
                f"GITHUB_REPOSITORY is not set or invalid: '{self.repository}'"
            )
        return owner, repo


def input_env_name(name: str) -> str:
    return "INPUT_" + name.replace(" ", "_").upper()


def get_input(name: str, *, environ: Mapping[str, str] | None = None, required: bool = False) -> str:
    env = os.environ if environ is None else environ
    value = env.get(input_env_name(name), "")
    if required and not value.strip():
        raise ConfigurationError(f"Input required and not supplied: {name}")
    return value


def load_github_context(environ: Mapping[str, str] | None = None) -> GitHubContext:
    env = os.environ if environ is None else environ
    return GitHubContext(
        event_name=env.get("GITHUB_EVENT_NAME", "").strip(),
        event_path=env.get("GITHUB_EVENT_PATH", "").strip(),
        repository=env.get("GITHUB_REPOSITORY", "").strip(),
        api_url=(env.get("GITHUB_API_URL", "").strip() or DEFAULT_API_URL).rstrip("/"),
        output_path=env.get("GITHUB_OUTPUT", "").strip(),
        base_sha=env.get("GITHUB_EVENT_PULL_REQUEST_BASE_SHA", "").strip(),
    )


def resolve_filters_text(
    filters: str | None = None,
    filters_file: Path | None = None,
    *,
    environ: Mapping[str, str] | None = None,
) -> str:
    """Pick the filter definitions from the CLI text, a file, or `INPUT_FILTERS`, in that order."""
    if filters and filters.strip():
        return filters
    if filters_file is not None:
        if not filters_file.exists():
            raise ConfigurationError(f"Filters file not found: {filters_file}")
        text = filters_file.read_text(encoding="utf-8")
        if not text.strip():
            raise ConfigurationError(f"Filters file is empty: {filters_file}")
        return text
    return get_input("filters", environ=environ, required=True)


def resolve_quantifier(value: str | None = None, *, environ: Mapping[str, str] | None = None) -> Quantifier:
    if value is None:
        value = get_input("predicate-quantifier", environ=environ)
    try:
        return Quantifier.parse(value)
    except ValueError as exc:
        raise ConfigurationError(str(exc)) from exc
