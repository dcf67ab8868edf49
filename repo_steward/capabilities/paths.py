"""Centralized path helpers.

Shared by:
- file_capabilities.py (every read and proposal is bounded to the repo)
- safety/classifier.py (protected-path checks on repo-relative paths)
- validation/change_validator.py (existence checks on disk)

Centralizing these keeps the repository-bounds check identical everywhere.
Every path that is matched against a rule goes through normalize_repo_path
or to_repo_relative first, so "src/../.env" and "/.env" are seen as ".env".
"""

import posixpath
from pathlib import Path
from typing import Optional


def normalize_repo_path(path: str) -> str:
    """Canonicalize a repo-relative path for pattern matching.

    Converts backslashes to slashes, collapses "." and ".." segments and
    strips leading slashes, so "./config\\.env", "/config/.env" and
    "src/../config/.env" all become "config/.env". The repo root itself
    becomes "". A path that climbs above the root keeps its leading "..".
    """
    normalized = path.replace("\\", "/")
    if not normalized:
        return ""
    normalized = posixpath.normpath(normalized).lstrip("/")
    return "" if normalized == "." else normalized


def is_within(path: Path, root: Path) -> bool:
    """Check if an already-resolved path lies inside root (or is root)."""
    try:
        path.relative_to(root)
    except ValueError:
        return False
    return True


def resolve_in_repo(path: Optional[str], working_dir: str) -> Optional[Path]:
    """Resolve path relative to the working directory, None if it escapes.

    Args:
        path: Path to resolve. None or empty returns the repo root.
        working_dir: Repository root path

    Returns:
        Resolved Path within repo bounds, or None if outside bounds

    Note:
        Paths starting with "/" are treated as relative to the repo root,
        not the filesystem root, unless they already point inside the repo.
        This handles model-generated paths like "/src/app.ts" correctly.
    """
    repo_resolved = Path(working_dir).resolve()
    if not path:
        return repo_resolved

    candidate = Path(path)
    if candidate.is_absolute():
        try:
            resolved_abs = candidate.resolve()
        except (OSError, RuntimeError):
            return None
        if is_within(resolved_abs, repo_resolved):
            return resolved_abs
        normalized = path.lstrip("/\\")
        if not normalized:
            return repo_resolved
        candidate = Path(normalized)

    try:
        resolved = (repo_resolved / candidate).resolve()
    except (OSError, RuntimeError):
        return None

    if not is_within(resolved, repo_resolved):
        return None
    return resolved


def to_repo_relative(path: str, working_dir: Optional[str] = None) -> str:
    """Express path as the canonical repo-relative path it refers to.

    With a working directory the path is resolved the same way
    resolve_in_repo resolves it, so "/.aws/credentials" and the absolute
    path of "<repo>/.aws/credentials" both become ".aws/credentials".
    Paths that escape the repository, or calls without a working
    directory, fall back to normalize_repo_path.
    """
    if working_dir:
        slashed = path.replace("\\", "/")
        resolved = resolve_in_repo(slashed, working_dir)
        if resolved is not None:
            relative = resolved.relative_to(Path(working_dir).resolve()).as_posix()
            return "" if relative == "." else relative
    return normalize_repo_path(path)
