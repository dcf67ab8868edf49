"""Per-file-type content checks for proposed file contents."""

import ast
import json
import re
from typing import Callable, Dict

from repo_steward.models.types import ValidationResult
from repo_steward.validation.brackets import check_brackets

SCRIPT_EXTENSIONS = (".ts", ".tsx", ".js", ".jsx", ".mjs", ".cjs")

_TODO = re.compile(r"TODO", re.IGNORECASE)
_PRINT_CALL = re.compile(r"(?<![\w.])print\s*\(")
_EMPTY_LINK = re.compile(r"\[.*?\]\(\s*\)")


def _todo_warning(content: str, result: ValidationResult) -> None:
    todo_count = len(_TODO.findall(content))
    if todo_count > 0:
        result.warnings.append(f"{todo_count} TODO comment(s) found")


def _check_script(content: str) -> ValidationResult:
    result = ValidationResult()
    brackets = check_brackets(content)
    if not brackets.valid:
        result.errors.append(f"Unbalanced brackets: {brackets.message}")
    if "console.log" in content and "// DEBUG" not in content:
        result.warnings.append("Console.log found - consider removing before commit")
    _todo_warning(content, result)
    return result


def _check_python(content: str) -> ValidationResult:
    result = ValidationResult()
    try:
        ast.parse(content)
    except SyntaxError as exc:
        result.errors.append(f"Invalid Python syntax: {exc.msg} (line {exc.lineno})")
    except ValueError as exc:
        # null bytes in source
        result.errors.append(f"Invalid Python syntax: {exc}")
    if _PRINT_CALL.search(content) and "# DEBUG" not in content:
        result.warnings.append("print() found - consider removing before commit")
    _todo_warning(content, result)
    return result


def _check_json(content: str) -> ValidationResult:
    result = ValidationResult()
    try:
        json.loads(content)
    except ValueError as exc:
        result.errors.append(f"Invalid JSON: {exc}")
    return result


def _check_yaml(content: str) -> ValidationResult:
    result = ValidationResult()
    if "\t" in content:
        result.errors.append("YAML files should use spaces, not tabs")
    return result


def _check_markdown(content: str) -> ValidationResult:
    result = ValidationResult()
    empty_links = _EMPTY_LINK.findall(content)
    if empty_links:
        result.warnings.append(f"{len(empty_links)} empty link(s) found")
    return result


CONTENT_CHECKS: Dict[str, Callable[[str], ValidationResult]] = {
    **{ext: _check_script for ext in SCRIPT_EXTENSIONS},
    ".py": _check_python,
    ".json": _check_json,
    ".yml": _check_yaml,
    ".yaml": _check_yaml,
    ".md": _check_markdown,
}


def validate_content_for_extension(content: str, extension: str) -> ValidationResult:
    """
    Run the content checks registered for a file extension.

    Args:
        content: Proposed file content
        extension: File extension including the dot (case-insensitive)

    Returns:
        ValidationResult. Unknown extensions yield an empty result.
    """
    check = CONTENT_CHECKS.get((extension or "").lower())
    if check is None:
        return ValidationResult()
    return check(content)
