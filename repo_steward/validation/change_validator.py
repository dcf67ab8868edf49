"""
Pre-apply validation of proposed changes.

ChangeValidator checks a ProposedChange against the working tree it would be
applied to: existence preconditions per change type, per-file-type content
checks, and advisory size and rewrite-ratio heuristics.

Validation never raises. Malformed input is reported as errors so a caller
can always render a result.
"""

import posixpath
from pathlib import Path
from typing import Any, Optional

from repo_steward._logging import get_component_logger
from repo_steward.capabilities.paths import normalize_repo_path, resolve_in_repo
from repo_steward.models.types import (
    AgentContext,
    ChangeType,
    ProposedChange,
    ValidationResult,
)
from repo_steward.thresholds import MAJOR_REWRITE_RATIO, MAX_CHANGE_CONTENT_CHARS
from repo_steward.validation.content import validate_content_for_extension

# Root-level files a change may never delete
ESSENTIAL_CONFIG_FILES = ("package.json", "tsconfig.json", "pyproject.toml")

TEST_FILE_SUFFIXES = (".test.ts", ".spec.ts", ".test.js", ".spec.js")


def calculate_change_ratio(original: str, modified: str) -> float:
    """Approximate the fraction of a file that changed.

    Lines are trimmed and compared as per-side sets; the count of lines
    present in only one version is divided by twice the longer line count.
    Reordering and duplicate lines are invisible to it.
    """
    original_lines = original.split("\n")
    modified_lines = modified.split("\n")

    original_set = {line.strip() for line in original_lines}
    modified_set = {line.strip() for line in modified_lines}
    changed = len(original_set ^ modified_set)

    total = max(len(original_lines), len(modified_lines))
    return changed / (total * 2) if total > 0 else 0.0


def is_test_file(file_path: str) -> bool:
    name = posixpath.basename(file_path)
    if name.endswith(TEST_FILE_SUFFIXES):
        return True
    return name.endswith(".py") and (name.startswith("test_") or name.endswith("_test.py"))


def _extension(file_path: str) -> str:
    return posixpath.splitext(file_path)[1]


class ChangeValidator:
    """
    Validates proposed changes against a working directory.

    Example:
        validator = ChangeValidator()
        result = validator.validate(change, context)
        if not result.valid:
            ...
    """

    def __init__(self, logger: Optional[Any] = None):
        self._logger = get_component_logger("ChangeValidator", logger)

    def validate(self, change: ProposedChange, context: AgentContext) -> ValidationResult:
        """
        Validate a proposed change.

        Args:
            change: The change to validate
            context: Run context; its working_dir is the tree checked against

        Returns:
            ValidationResult with ordered errors and warnings
        """
        result = ValidationResult()

        file_path = normalize_repo_path(change.file_path or "")
        if not file_path:
            result.errors.append("Change is missing a file path")
            return result

        change_type = self._coerce_change_type(change.change_type)
        if change_type is None:
            result.errors.append(f"Unknown change type: {change.change_type!r}")
            return result

        target = resolve_in_repo(file_path, context.working_dir)
        if target is None:
            result.errors.append(f"Path is outside the repository: {change.file_path}")
            return result

        if change_type == ChangeType.CREATE:
            self._validate_create(change, file_path, target, result)
        elif change_type == ChangeType.MODIFY:
            self._validate_modify(change, file_path, target, result)
        else:
            self._validate_delete(file_path, target, result)

        # ─── Cross-cutting heuristics (advisory) ───
        if change.new_content and len(change.new_content) > MAX_CHANGE_CONTENT_CHARS:
            result.warnings.append(
                "Large file change (>100KB) - consider breaking into smaller changes"
            )

        if change.original_content and change.new_content:
            ratio = calculate_change_ratio(change.original_content, change.new_content)
            if ratio > MAJOR_REWRITE_RATIO:
                result.warnings.append(
                    f"Major file rewrite detected ({int(ratio * 100 + 0.5)}% changed) - review carefully"
                )

        self._logger.debug(
            "change_validated",
            file_path=file_path,
            change_type=change_type.value,
            errors=len(result.errors),
            warnings=len(result.warnings),
        )
        return result

    # ─── Per change type ───

    def _validate_create(
        self, change: ProposedChange, file_path: str, target: Path, result: ValidationResult
    ) -> None:
        if target.exists():
            result.errors.append(f"File already exists: {file_path}")

        if not change.new_content:
            result.errors.append("New file must have content")
        else:
            result.extend(validate_content_for_extension(change.new_content, _extension(file_path)))

    def _validate_modify(
        self, change: ProposedChange, file_path: str, target: Path, result: ValidationResult
    ) -> None:
        exists = target.is_file()
        if not exists:
            result.errors.append(f"File does not exist: {file_path}")

        if not change.new_content:
            result.errors.append("Modified file must have new content")
        else:
            result.extend(validate_content_for_extension(change.new_content, _extension(file_path)))

        if change.original_content and exists:
            try:
                current = target.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as exc:
                result.warnings.append(f"Could not compare with current file: {exc}")
            else:
                if current != change.original_content:
                    result.warnings.append(
                        "File has been modified since original content was captured"
                    )

    def _validate_delete(self, file_path: str, target: Path, result: ValidationResult) -> None:
        if not target.exists():
            result.warnings.append(f"File to delete does not exist: {file_path}")

        if is_test_file(file_path):
            result.warnings.append("Deleting a test file - ensure this is intentional")

        if file_path in ESSENTIAL_CONFIG_FILES:
            result.errors.append(f"Cannot delete essential configuration file: {file_path}")

    @staticmethod
    def _coerce_change_type(value: Any) -> Optional[ChangeType]:
        if isinstance(value, ChangeType):
            return value
        try:
            return ChangeType(value)
        except ValueError:
            return None
