"""
Core data model for the change-safety layer.

Every value that crosses a component boundary is declared here:
- AgentContext: immutable per-run repository identity
- ProposedChange: inert description of a file create/modify/delete
- SafetyVerdict / ValidationResult: findings returned as data
- PlainResult / ChangeProposingResult: tagged capability outputs
- ToolCallRecord / SessionOutcome: the audit trail of one session
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Union


class ChangeType(str, Enum):
    """Kinds of file mutation a capability may propose."""

    CREATE = "create"
    MODIFY = "modify"
    DELETE = "delete"


class RiskLevel(str, Enum):
    """Risk of applying a proposed change."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class Severity(str, Enum):
    """Severity of a safety finding."""

    WARNING = "warning"    # Advisory, never blocks on its own
    ERROR = "error"        # Blocks validity
    CRITICAL = "critical"  # Blocks safety regardless of validity


@dataclass(frozen=True)
class AgentContext:
    """Repository identity and optional task coordinates for one run."""

    working_dir: str
    repo_owner: str
    repo_name: str
    pr_number: Optional[int] = None
    issue_number: Optional[int] = None
    branch: Optional[str] = None
    commit_sha: Optional[str] = None
    metadata: Mapping[str, Any] = field(default_factory=dict)


# Keys a model may emit in camelCase when it echoes a change back
_CAMEL_KEYS = {
    "filePath": "file_path",
    "changeType": "change_type",
    "originalContent": "original_content",
    "newContent": "new_content",
    "riskLevel": "risk_level",
}


@dataclass
class ProposedChange:
    """A file mutation proposed during a session. Never applied by this package."""

    file_path: str
    change_type: ChangeType
    description: str = ""
    new_content: Optional[str] = None
    original_content: Optional[str] = None
    diff: Optional[str] = None
    risk_level: RiskLevel = RiskLevel.MEDIUM

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        d: Dict[str, Any] = {
            "file_path": self.file_path,
            "change_type": _enum_value(self.change_type),
            "description": self.description,
            "risk_level": _enum_value(self.risk_level),
        }
        if self.original_content is not None:
            d["original_content"] = self.original_content
        if self.new_content is not None:
            d["new_content"] = self.new_content
        if self.diff is not None:
            d["diff"] = self.diff
        return d

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ProposedChange":
        """Build a change from snake_case or camelCase keys.

        Raises:
            KeyError: If file_path or change_type is missing
            ValueError: If change_type or risk_level is not a known value
        """
        normalized = {_CAMEL_KEYS.get(k, k): v for k, v in data.items()}
        return cls(
            file_path=normalized["file_path"],
            change_type=ChangeType(normalized["change_type"]),
            description=normalized.get("description") or "",
            new_content=normalized.get("new_content"),
            original_content=normalized.get("original_content"),
            diff=normalized.get("diff"),
            risk_level=RiskLevel(normalized.get("risk_level") or RiskLevel.MEDIUM.value),
        )


@dataclass(frozen=True)
class SafetyVerdict:
    """Outcome of a safety check. `reason` is set whenever `safe` is False."""

    safe: bool
    reason: Optional[str] = None
    severity: Optional[Severity] = None

    @classmethod
    def allow(cls) -> "SafetyVerdict":
        return cls(safe=True)

    @classmethod
    def deny(cls, reason: str, severity: Severity) -> "SafetyVerdict":
        return cls(safe=False, reason=reason, severity=severity)

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"safe": self.safe}
        if self.reason is not None:
            d["reason"] = self.reason
        if self.severity is not None:
            d["severity"] = self.severity.value
        return d


@dataclass
class ValidationResult:
    """Findings for a change. Errors block application, warnings are advisory."""

    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors

    def extend(self, other: "ValidationResult") -> None:
        """Append another result's findings, preserving order."""
        self.errors.extend(other.errors)
        self.warnings.extend(other.warnings)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "valid": self.valid,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
        }


# ─── Capability outputs ───


@dataclass
class PlainResult:
    """Capability output that carries no file mutation."""

    payload: Dict[str, Any] = field(default_factory=dict)

    def to_payload(self) -> Dict[str, Any]:
        return dict(self.payload)


@dataclass
class ChangeProposingResult:
    """Capability output that proposes a file mutation."""

    proposed_change: ProposedChange
    payload: Dict[str, Any] = field(default_factory=dict)

    def to_payload(self) -> Dict[str, Any]:
        data = dict(self.payload)
        data["proposed_change"] = self.proposed_change.to_dict()
        return data


CapabilityOutput = Union[PlainResult, ChangeProposingResult]


# ─── Session audit trail ───


@dataclass(frozen=True)
class ToolCallRecord:
    """One capability invocation, including denied ones."""

    capability_name: str
    args: Dict[str, Any]
    result: Dict[str, Any]

    @property
    def denied(self) -> bool:
        error = self.result.get("error")
        return isinstance(error, str) and error.startswith("Safety check failed")


class FinishReason(str, Enum):
    COMPLETED = "completed"
    STEP_BUDGET_EXHAUSTED = "step_budget_exhausted"


@dataclass
class SessionOutcome:
    """Everything one orchestration-loop run produced."""

    model_text: str
    proposed_changes: List[ProposedChange] = field(default_factory=list)
    tool_calls: List[ToolCallRecord] = field(default_factory=list)
    steps_used: int = 0
    finish_reason: FinishReason = FinishReason.COMPLETED


# ─── Agent result envelope ───


@dataclass
class AgentError:
    code: str
    message: str
    recoverable: bool = False
    details: Optional[Any] = None


@dataclass
class AgentResult:
    """Result envelope returned by maintenance agents."""

    success: bool
    data: Optional[Any] = None
    errors: List[AgentError] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    proposed_changes: List[ProposedChange] = field(default_factory=list)
    validated: bool = False


def _enum_value(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value
