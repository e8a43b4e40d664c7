from __future__ import annotations

import os
from typing import Mapping


TOKEN_ENV_NAMES = ("GITHUB_TOKEN", "GH_TOKEN", "INPUT_GITHUB_TOKEN")


def resolve_github_token(*, environ: Mapping[str, str] | None = None) -> str | None:
    """Resolve a GitHub token from the first non-blank token environment variable."""
    env = os.environ if environ is None else environ
    for env_name in TOKEN_ENV_NAMES:
        value = env.get(env_name, "").strip()
        if value:
            return value
    return None


def missing_token_hint() -> str:
    return (
        "GitHub token not available (checked GITHUB_TOKEN, GH_TOKEN, INPUT_GITHUB_TOKEN);"
        " returning empty changed files set."
    )
