from __future__ import annotations

import os
from typing import Mapping, Optional

from ..infra.models import RunContext


def _env(env: Mapping[str, str], name: str, default: str = "") -> str:
    return str(env.get(name, "") or "").strip() or default


def _env_int(env: Mapping[str, str], name: str) -> int:
    raw = _env(env, name)
    try:
        return int(raw)
    except ValueError:
        return 0


def load_run_context(env: Optional[Mapping[str, str]] = None) -> RunContext:
    """Build the run context from the variables the runner exports.

    Missing or malformed numeric ids read as 0, so local runs outside Actions still work.
    """
    e = env if env is not None else os.environ
    return RunContext(
        sha=_env(e, "GITHUB_SHA"),
        ref=_env(e, "GITHUB_REF"),
        actor=_env(e, "GITHUB_ACTOR"),
        run_id=_env_int(e, "GITHUB_RUN_ID"),
        run_number=_env_int(e, "GITHUB_RUN_NUMBER"),
        repository=_env(e, "GITHUB_REPOSITORY"),
        server_url=_env(e, "GITHUB_SERVER_URL", "https://github.com").rstrip("/"),
        api_url=_env(e, "GITHUB_API_URL", "https://api.github.com").rstrip("/"),
    )


def repository_url(context: RunContext) -> str:
    return f"{context.server_url}/{context.owner}/{context.repo}"
