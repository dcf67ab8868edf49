"""Environment-driven settings for repo_steward.

Model selection, step budget and repository identity are read from the
environment once per process by `load_settings()`. Nothing here is a
module-level singleton; callers pass the settings object explicitly.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from repo_steward.models.types import AgentContext
from repo_steward.thresholds import DEFAULT_MAX_STEPS

DEFAULT_MODEL_ID = "gemini-flash-latest"
DEFAULT_MODEL_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/openai"
DEFAULT_MODEL_CHAT_PATH = "/chat/completions"

_TRUE = {"1", "true", "yes"}
_FALSE = {"0", "false", "no"}


def _env_bool(name: str, default: bool) -> bool:
    val = os.getenv(name)
    if val is None:
        return default
    lowered = val.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    return default


def _env_int(name: str, default: int) -> int:
    val = os.getenv(name)
    if val is None or not val.strip():
        return default
    try:
        return int(val)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    val = os.getenv(name)
    if val is None or not val.strip():
        return default
    try:
        return float(val)
    except ValueError:
        return default


def _first_env(*names: str) -> Optional[str]:
    for name in names:
        val = os.getenv(name)
        if val:
            return val
    return None


@dataclass(frozen=True)
class StewardSettings:
    model_id: str = DEFAULT_MODEL_ID
    model_base_url: str = DEFAULT_MODEL_BASE_URL
    model_chat_path: str = DEFAULT_MODEL_CHAT_PATH
    model_api_key: Optional[str] = None
    model_timeout: float = 120.0
    max_steps: int = DEFAULT_MAX_STEPS
    debug: bool = False


def load_settings() -> StewardSettings:
    """Read settings from the environment.

    Environment:
        STEWARD_MODEL_ID (fallback GOOGLE_MODEL_ID)
        STEWARD_MODEL_BASE_URL, STEWARD_MODEL_CHAT_PATH
        STEWARD_MODEL_API_KEY (fallback GOOGLE_API_KEY)
        STEWARD_MODEL_TIMEOUT, STEWARD_MAX_STEPS, STEWARD_DEBUG
    """
    max_steps = _env_int("STEWARD_MAX_STEPS", DEFAULT_MAX_STEPS)
    return StewardSettings(
        model_id=_first_env("STEWARD_MODEL_ID", "GOOGLE_MODEL_ID") or DEFAULT_MODEL_ID,
        model_base_url=os.getenv("STEWARD_MODEL_BASE_URL") or DEFAULT_MODEL_BASE_URL,
        model_chat_path=os.getenv("STEWARD_MODEL_CHAT_PATH") or DEFAULT_MODEL_CHAT_PATH,
        model_api_key=_first_env("STEWARD_MODEL_API_KEY", "GOOGLE_API_KEY"),
        model_timeout=_env_float("STEWARD_MODEL_TIMEOUT", 120.0),
        max_steps=max_steps if max_steps > 0 else DEFAULT_MAX_STEPS,
        debug=_env_bool("STEWARD_DEBUG", False),
    )


def context_from_env(working_dir: str, **overrides) -> AgentContext:
    """Build an AgentContext for `working_dir` from repository variables.

    REPO_OWNER / REPO_NAME win; GITHUB_REPOSITORY_OWNER fills the owner;
    GITHUB_REPOSITORY ("owner/name") is split when the owner is still unknown.
    Keyword overrides (pr_number, issue_number, branch, ...) are passed through.
    """
    repo_owner = os.getenv("REPO_OWNER") or os.getenv("GITHUB_REPOSITORY_OWNER") or ""
    repo_name = os.getenv("REPO_NAME") or ""

    github_repository = os.getenv("GITHUB_REPOSITORY")
    if github_repository and "/" in github_repository and not repo_owner:
        repo_owner, _, name = github_repository.partition("/")
        repo_name = repo_name or name
    elif github_repository and "/" in github_repository and not repo_name:
        repo_name = github_repository.partition("/")[2]

    return AgentContext(
        working_dir=working_dir,
        repo_owner=repo_owner,
        repo_name=repo_name,
        **overrides,
    )


__all__ = ["StewardSettings", "load_settings", "context_from_env"]
