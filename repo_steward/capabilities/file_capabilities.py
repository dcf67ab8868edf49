"""Reference file capabilities bound to a working directory.

Capabilities:
- read_file: Read a file from the repository
- write_file: Propose a create/modify (never writes to disk)
- file_exists: Check whether a path exists
- list_files: List files under a directory, optionally by glob
- search_code: Regex search across repository files

Every function takes the working directory as its first argument and is
registered with that argument bound (see registration.py). All results are
tagged outputs; failures are reported in the result shape, not raised.
"""

import fnmatch
import os
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

from repo_steward.capabilities.paths import resolve_in_repo, to_repo_relative
from repo_steward.models.types import (
    CapabilityOutput,
    ChangeProposingResult,
    ChangeType,
    PlainResult,
    ProposedChange,
    RiskLevel,
)
from repo_steward.thresholds import (
    LIST_FILES_MAX_RESULTS,
    READ_FILE_MAX_CHARS,
    SEARCH_CODE_DEFAULT_MAX_RESULTS,
)

# Directories never listed or searched
EXCLUDED_DIRS = {
    ".git",
    "node_modules",
    "__pycache__",
    ".venv",
    "venv",
    ".pytest_cache",
    ".mypy_cache",
    "dist",
    "build",
}

# Files above this size are skipped by search_code
_SEARCH_MAX_FILE_BYTES = 1_000_000


def _outside_repo(path: str) -> PlainResult:
    return PlainResult({
        "success": False,
        "error": f"Path '{path}' is outside repository bounds",
        "path": path,
    })


def _relative(resolved: Path, working_dir: str) -> str:
    return resolved.relative_to(Path(working_dir).resolve()).as_posix()


def _iter_repo_files(root: Path):
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if d not in EXCLUDED_DIRS)
        for filename in sorted(filenames):
            yield Path(dirpath) / filename


async def read_file(working_dir: str, path: str) -> PlainResult:
    """Read file contents.

    Returns:
        PlainResult with success, content, path (and truncated when the
        file exceeds the read limit), or success=False with an error.
    """
    resolved = resolve_in_repo(path, working_dir)
    if resolved is None:
        return _outside_repo(path)
    if not resolved.is_file():
        return PlainResult({
            "success": False,
            "error": f"Failed to read file: {path} does not exist or is not a file",
            "path": path,
        })
    try:
        content = resolved.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        return PlainResult({
            "success": False,
            "error": f"Failed to read file: {exc}",
            "path": path,
        })

    payload: Dict[str, Any] = {"success": True, "content": content, "path": path}
    if len(content) > READ_FILE_MAX_CHARS:
        payload["content"] = content[:READ_FILE_MAX_CHARS]
        payload["truncated"] = True
    return PlainResult(payload)


async def write_file(
    working_dir: str, path: str, content: str, description: str
) -> CapabilityOutput:
    """Propose writing `content` to `path`.

    The file is not touched. An existing file yields a modify proposal with
    its current content captured as the original; otherwise a create.
    """
    resolved = resolve_in_repo(path, working_dir)
    if resolved is None:
        return _outside_repo(path)
    if resolved.is_dir():
        return PlainResult({
            "success": False,
            "error": f"Cannot write to a directory: {path}",
            "path": path,
        })

    original_content: Optional[str] = None
    change_type = ChangeType.CREATE
    if resolved.is_file():
        try:
            original_content = resolved.read_text(encoding="utf-8")
            change_type = ChangeType.MODIFY
        except (OSError, UnicodeDecodeError) as exc:
            return PlainResult({
                "success": False,
                "error": f"Failed to read existing file: {exc}",
                "path": path,
            })

    change = ProposedChange(
        file_path=to_repo_relative(path, working_dir),
        change_type=change_type,
        original_content=original_content,
        new_content=content,
        description=description,
        risk_level=RiskLevel.MEDIUM,
    )
    return ChangeProposingResult(
        proposed_change=change,
        payload={
            "success": True,
            "message": f"Proposed {change_type.value} for {path}",
        },
    )


async def file_exists(working_dir: str, path: str) -> PlainResult:
    resolved = resolve_in_repo(path, working_dir)
    if resolved is None:
        return _outside_repo(path)
    return PlainResult({"exists": resolved.exists(), "path": path})


async def list_files(
    working_dir: str,
    directory: str = ".",
    pattern: Optional[str] = None,
) -> PlainResult:
    """List files under `directory`, optionally filtered by a filename glob."""
    resolved = resolve_in_repo(directory, working_dir)
    if resolved is None:
        return _outside_repo(directory)
    if not resolved.is_dir():
        return PlainResult({
            "success": False,
            "error": f"Failed to list files: {directory} is not a directory",
            "files": [],
        })

    files: List[str] = []
    for file_path in _iter_repo_files(resolved):
        if pattern and not fnmatch.fnmatch(file_path.name, pattern):
            continue
        files.append(_relative(file_path, working_dir))
        if len(files) >= LIST_FILES_MAX_RESULTS:
            break

    return PlainResult({"success": True, "files": files, "directory": directory})


async def search_code(
    working_dir: str,
    pattern: str,
    file_pattern: Optional[str] = None,
    max_results: int = SEARCH_CODE_DEFAULT_MAX_RESULTS,
) -> PlainResult:
    """Search repository files for a regex, returning file/line/content matches."""
    try:
        regex = re.compile(pattern)
    except re.error as exc:
        return PlainResult({
            "success": False,
            "error": f"Invalid search pattern: {exc}",
            "matches": [],
            "count": 0,
        })

    root = Path(working_dir).resolve()
    matches: List[Dict[str, Any]] = []
    limit = max(1, max_results)

    for file_path in _iter_repo_files(root):
        if file_pattern and not fnmatch.fnmatch(file_path.name, file_pattern):
            continue
        try:
            if file_path.stat().st_size > _SEARCH_MAX_FILE_BYTES:
                continue
            text = file_path.read_text(encoding="utf-8", errors="replace")
        except OSError:
            continue
        for line_number, line in enumerate(text.splitlines(), start=1):
            if regex.search(line):
                matches.append({
                    "file": _relative(file_path, working_dir),
                    "line": line_number,
                    "content": line,
                })
                if len(matches) >= limit:
                    return PlainResult({"success": True, "matches": matches, "count": len(matches)})

    return PlainResult({"success": True, "matches": matches, "count": len(matches)})
