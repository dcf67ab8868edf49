"""Safety classifier for capability calls, proposed changes and task intake.

Three entry points, all pure functions of their inputs:
- check_capability_call: gate a sensitive capability before it runs
- check_change: gate a fully-formed ProposedChange before it is applied
- validate_issue_for_auto_fix: decide whether an issue may be handled
  autonomously at all

Verdicts are data (SafetyVerdict); nothing here raises on unsafe input.
"""

import json
from typing import Any, FrozenSet, Iterable, List, Mapping, Optional

from repo_steward._logging import get_component_logger
from repo_steward.capabilities.paths import normalize_repo_path, to_repo_relative
from repo_steward.models.types import (
    AgentContext,
    ChangeType,
    ProposedChange,
    SafetyVerdict,
    Severity,
)
from repo_steward.safety.rules import (
    CODE_INDICATORS,
    HARMFUL_CONTENT_RULES,
    HARMFUL_REQUEST_RULES,
    PROTECTED_FILES,
    PROTECTED_PATH_PATTERNS,
    SECURITY_KEYWORDS,
    SENSITIVE_CAPABILITIES,
    PatternRule,
    first_match,
)

# Argument keys that carry the target path of a mutation
PATH_ARGUMENT_KEYS = ("path", "file_path", "filePath")


def _string_leaves(value: Any) -> Iterable[str]:
    """Yield every string nested in a JSON-like value."""
    if isinstance(value, str):
        yield value
    elif isinstance(value, Mapping):
        for item in value.values():
            yield from _string_leaves(item)
    elif isinstance(value, (list, tuple)):
        for item in value:
            yield from _string_leaves(item)


def _first_matching_rule(texts: List[str]) -> Optional[PatternRule]:
    # Rule order decides, not text order
    for rule in HARMFUL_CONTENT_RULES:
        if any(rule.matches(text) for text in texts):
            return rule
    return None


class SafetyClassifier:
    """
    Pattern-based classifier over capability calls and proposed changes.

    Args:
        sensitive_capabilities: Capability names subject to argument
            scrutiny. Defaults to the mutating file/git/package/PR set.
        logger: Optional injected logger
    """

    def __init__(
        self,
        sensitive_capabilities: Optional[Iterable[str]] = None,
        logger: Optional[Any] = None,
    ):
        self.sensitive_capabilities: FrozenSet[str] = (
            frozenset(sensitive_capabilities)
            if sensitive_capabilities is not None
            else SENSITIVE_CAPABILITIES
        )
        self._logger = get_component_logger("SafetyClassifier", logger)

    def is_sensitive(self, capability_name: str) -> bool:
        return capability_name in self.sensitive_capabilities

    def check_capability_call(
        self,
        capability_name: str,
        args: Mapping[str, Any],
        context: Optional[AgentContext] = None,
    ) -> SafetyVerdict:
        """Check if a capability call is safe to execute.

        Non-sensitive capabilities are always safe. For sensitive ones the
        arguments are scanned for harmful content (compact JSON form and each
        string value), then any path argument is checked against the
        protected-path rules.
        """
        if not self.is_sensitive(capability_name):
            return SafetyVerdict.allow()

        serialized = json.dumps(args, separators=(",", ":"), default=str)
        rule = _first_matching_rule([serialized, *_string_leaves(args)])
        if rule is not None:
            verdict = SafetyVerdict.deny(
                f"{rule.description} detected in tool arguments", rule.severity
            )
            self._log_denial("capability_call_denied", capability_name, verdict)
            return verdict

        target = self._extract_path(args)
        if target:
            working_dir = context.working_dir if context else None
            verdict = self.check_protected_path(to_repo_relative(target, working_dir))
            if not verdict.safe:
                self._log_denial("capability_call_denied", capability_name, verdict)
                return verdict

        return SafetyVerdict.allow()

    def check_change(self, change: ProposedChange) -> SafetyVerdict:
        """Check if a proposed change is safe to apply.

        Checks run in order (protected path, harmful content, security
        regression) and the first failing check decides.
        """
        verdict = self.check_protected_path(change.file_path or "")
        if not verdict.safe:
            self._log_denial("change_denied", change.file_path, verdict)
            return verdict

        if change.new_content:
            rule = first_match(HARMFUL_CONTENT_RULES, change.new_content)
            if rule is not None:
                verdict = SafetyVerdict.deny(
                    f"{rule.description} in proposed change", rule.severity
                )
                self._log_denial("change_denied", change.file_path, verdict)
                return verdict

        if (
            change.change_type == ChangeType.MODIFY
            and change.original_content
            and change.new_content
        ):
            verdict = self.check_security_regression(
                change.original_content, change.new_content
            )
            if not verdict.safe:
                self._log_denial("change_flagged", change.file_path, verdict)
                return verdict

        return SafetyVerdict.allow()

    def check_protected_path(self, file_path: str) -> SafetyVerdict:
        """Check a repo-relative path against protected files and directories."""
        path = normalize_repo_path(file_path)

        for protected in PROTECTED_FILES:
            if path == protected or path.endswith(f"/{protected}"):
                return SafetyVerdict.deny(
                    f"Cannot modify protected file: {file_path}", Severity.CRITICAL
                )

        for pattern in PROTECTED_PATH_PATTERNS:
            if pattern.search(path):
                return SafetyVerdict.deny(
                    f"Cannot modify files in protected path: {file_path}", Severity.CRITICAL
                )

        return SafetyVerdict.allow()

    def check_security_regression(self, original: str, modified: str) -> SafetyVerdict:
        """Flag changes that reduce security-related code.

        Syntactic keyword counting only: renaming a validation helper trips
        it, and equivalent code written with other words does not. The
        verdict is a warning for that reason.
        """
        for keyword in SECURITY_KEYWORDS:
            original_count = keyword.count(original)
            if original_count > 0 and keyword.count(modified) < original_count:
                return SafetyVerdict.deny(
                    f"Potential security regression: {keyword.name} code was reduced or removed",
                    Severity.WARNING,
                )
        return SafetyVerdict.allow()

    def validate_issue_for_auto_fix(self, title: str, body: str) -> SafetyVerdict:
        """Decide whether an issue is eligible for autonomous fixing.

        Harmful intent is a critical rejection. Otherwise the text must carry
        at least one code-relatedness signal, or it is rejected with a
        warning as not actionable.
        """
        combined = f"{title or ''} {body or ''}".lower()

        rule = first_match(HARMFUL_REQUEST_RULES, combined)
        if rule is not None:
            self._logger.warning("issue_rejected_harmful", rule=rule.description)
            return SafetyVerdict.deny(
                f"Potentially harmful request detected: {rule.description}",
                Severity.CRITICAL,
            )

        if not any(indicator.search(combined) for indicator in CODE_INDICATORS):
            self._logger.info("issue_rejected_not_code_related")
            return SafetyVerdict.deny(
                "Issue does not appear to be code-related", Severity.WARNING
            )

        return SafetyVerdict.allow()

    @staticmethod
    def _extract_path(args: Mapping[str, Any]) -> Optional[str]:
        for key in PATH_ARGUMENT_KEYS:
            value = args.get(key)
            if isinstance(value, str) and value:
                return value
        return None

    def _log_denial(self, event: str, subject: Optional[str], verdict: SafetyVerdict) -> None:
        self._logger.warning(
            event,
            subject=subject,
            reason=verdict.reason,
            severity=verdict.severity.value if verdict.severity else None,
        )
