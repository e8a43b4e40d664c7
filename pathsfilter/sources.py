from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import TYPE_CHECKING, Any, Awaitable, Callable, TypeVar

import httpx
from rich.markup import escape

from pathsfilter.auth import missing_token_hint, resolve_github_token
from pathsfilter.config import GitHubContext
from pathsfilter.errors import ConfigurationError, SourceUnavailableError

if TYPE_CHECKING:
    from rich.console import Console


USER_AGENT = "paths-filter-lite"
DEFAULT_PER_PAGE = 100
DEFAULT_TIMEOUT_SECONDS = 30.0
T = TypeVar("T")


def _info(console: "Console | None", message: str) -> None:
    if console is not None:
        console.print(message)


async def _retry_on_timeout(
    func: Callable[[], Awaitable[T]],
    *,
    max_attempts: int = 3,
    base_delay_seconds: float = 1.0,
) -> T:
    attempt = 1
    while True:
        try:
            return await func()
        except httpx.TimeoutException:
            if attempt >= max_attempts:
                raise
            await asyncio.sleep(base_delay_seconds * (2 ** (attempt - 1)))
            attempt += 1


def pull_request_number(event_path: str | Path) -> int | None:
    """Read the pull request number from a GitHub event payload, if there is one."""
    path = Path(event_path)
    if not str(event_path) or not path.is_file():
        return None
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise SourceUnavailableError(f"Failed to read event payload {path}: {exc}") from exc

    if not isinstance(payload, dict):
        return None
    pull_request = payload.get("pull_request")
    if not isinstance(pull_request, dict):
        return None
    number = pull_request.get("number")
    if isinstance(number, bool) or not isinstance(number, int) or number <= 0:
        return None
    return number


def _filenames_from_page(page: Any) -> list[str]:
    return [
        entry["filename"]
        for entry in page
        if isinstance(entry, dict) and isinstance(entry.get("filename"), str)
    ]


async def _paginate_pull_request_files(
    client: httpx.AsyncClient,
    url: str,
    headers: dict[str, str],
    per_page: int,
    retry_delay_seconds: float,
) -> list[str]:
    files: list[str] = []
    page = 1
    while True:
        params = {"per_page": per_page, "page": page}
        response = await _retry_on_timeout(
            lambda: client.get(url, params=params, headers=headers),
            base_delay_seconds=retry_delay_seconds,
        )
        response.raise_for_status()
        payload = response.json() if response.content else None
        if not isinstance(payload, list) or not payload:
            break
        files.extend(_filenames_from_page(payload))
        if len(payload) < per_page:
            break
        page += 1
    return files


async def fetch_pull_request_files(
    api_url: str,
    owner: str,
    repo: str,
    number: int,
    token: str,
    *,
    client: httpx.AsyncClient | None = None,
    per_page: int = DEFAULT_PER_PAGE,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
    retry_delay_seconds: float = 1.0,
) -> list[str]:
    """List every file touched by a pull request, following pagination."""
    url = f"{api_url.rstrip('/')}/repos/{owner}/{repo}/pulls/{number}/files"
    headers = {
        "User-Agent": USER_AGENT,
        "Authorization": f"token {token}",
        "Accept": "application/vnd.github+json",
    }
    try:
        if client is None:
            async with httpx.AsyncClient(timeout=timeout) as owned_client:
                return await _paginate_pull_request_files(
                    owned_client, url, headers, per_page, retry_delay_seconds
                )
        return await _paginate_pull_request_files(client, url, headers, per_page, retry_delay_seconds)
    except httpx.HTTPStatusError as exc:
        response = exc.response
        raise SourceUnavailableError(
            f"HTTP {response.status_code} {response.reason_phrase}: {response.text}"
        ) from exc
    except httpx.HTTPError as exc:
        raise SourceUnavailableError(f"Request to {url} failed: {exc}") from exc
    except ValueError as exc:
        raise SourceUnavailableError(f"Failed to parse JSON from {url}: {exc}") from exc


async def github_changed_files(
    context: GitHubContext,
    *,
    client: httpx.AsyncClient | None = None,
    console: "Console | None" = None,
) -> list[str]:
    """Changed files of the pull request that triggered the workflow.

    Anything other than a pull request event, or a run without a token, yields
    an empty list rather than an error.
    """
    if not context.is_pull_request:
        _info(console, f"Event '{escape(context.event_name or 'unknown')}' is not a pull request; no changed files.")
        return []

    number = pull_request_number(context.event_path)
    if number is None:
        _info(console, "No pull request found in the event payload; no changed files.")
        return []

    try:
        owner, repo = context.owner_and_repo()
    except ConfigurationError as exc:
        raise SourceUnavailableError(str(exc)) from exc

    token = context.token or resolve_github_token()
    if not token:
        _info(console, missing_token_hint())
        return []

    return await fetch_pull_request_files(context.api_url, owner, repo, number, token, client=client)


async def git_changed_files(
    base_ref: str,
    head_ref: str = "HEAD",
    *,
    cwd: Path | None = None,
) -> list[str]:
    """Files that differ between `base_ref` and `head_ref` in a local checkout."""
    try:
        process = await asyncio.create_subprocess_exec(
            "git",
            "diff",
            "--name-only",
            base_ref,
            head_ref,
            cwd=str(cwd) if cwd is not None else None,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as exc:
        raise SourceUnavailableError(f"Failed to run git: {exc}") from exc

    stdout, stderr = await process.communicate()
    if process.returncode != 0:
        message = stderr.decode("utf-8", errors="replace").strip()
        raise SourceUnavailableError(
            f"git diff {base_ref} {head_ref} failed ({process.returncode}): {message}"
        )

    return [
        line.strip()
        for line in stdout.decode("utf-8", errors="replace").splitlines()
        if line.strip()
    ]


async def resolve_changed_files(
    fetch: Callable[[], Awaitable[list[str]]],
    *,
    console: "Console | None" = None,
) -> list[str]:
    """Run a changed-file source once, degrading to an empty list when it is unavailable."""
    try:
        return list(await fetch())
    except SourceUnavailableError as exc:
        _info(console, f"[yellow]Changed files unavailable:[/yellow] {escape(str(exc))}. Using an empty file list.")
        return []
