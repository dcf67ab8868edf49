"""
Change gate: the review an agent runs over a session's proposed changes.

For each change the safety classifier runs first. A change it blocks is
reported and not validated further. Advisory (warning) verdicts are reported
and the change is still validated. Every finding is prefixed with the
change's path.
"""

from typing import Any, Iterable, Optional

from repo_steward._logging import get_component_logger
from repo_steward.models.types import (
    AgentContext,
    ProposedChange,
    Severity,
    ValidationResult,
)
from repo_steward.safety.classifier import SafetyClassifier
from repo_steward.validation.change_validator import ChangeValidator


def validate_context(context: AgentContext) -> ValidationResult:
    """Check that a run context identifies a working tree and a repository."""
    result = ValidationResult()
    if not context.working_dir:
        result.errors.append("Working directory is required")
    if not context.repo_owner or not context.repo_name:
        result.errors.append("Repository owner and name are required")
    return result


class ChangeGate:
    """Safety classification followed by validation, over a batch of changes."""

    def __init__(
        self,
        classifier: Optional[SafetyClassifier] = None,
        validator: Optional[ChangeValidator] = None,
        logger: Optional[Any] = None,
    ):
        self._logger = get_component_logger("ChangeGate", logger)
        self.classifier = classifier or SafetyClassifier(logger=logger)
        self.validator = validator or ChangeValidator(logger=logger)

    def review(
        self, changes: Iterable[ProposedChange], context: AgentContext
    ) -> ValidationResult:
        """
        Review proposed changes.

        Args:
            changes: Changes in the order they were proposed
            context: Run context

        Returns:
            Combined ValidationResult. Safety rejections with warning
            severity are reported as warnings; all others as errors.
        """
        result = ValidationResult()
        reviewed = 0

        for change in changes:
            reviewed += 1
            verdict = self.classifier.check_change(change)
            if not verdict.safe:
                finding = f"{change.file_path}: {verdict.reason}"
                if verdict.severity == Severity.WARNING:
                    result.warnings.append(finding)
                else:
                    result.errors.append(finding)
                    continue

            validation = self.validator.validate(change, context)
            result.errors.extend(f"{change.file_path}: {e}" for e in validation.errors)
            result.warnings.extend(f"{change.file_path}: {w}" for w in validation.warnings)

        self._logger.info(
            "changes_reviewed",
            count=reviewed,
            valid=result.valid,
            errors=len(result.errors),
            warnings=len(result.warnings),
        )
        return result

    def validate_context(self, context: AgentContext) -> ValidationResult:
        return validate_context(context)
