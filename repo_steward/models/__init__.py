from .types import (
    AgentContext,
    AgentError,
    AgentResult,
    CapabilityOutput,
    ChangeProposingResult,
    ChangeType,
    FinishReason,
    PlainResult,
    ProposedChange,
    RiskLevel,
    SafetyVerdict,
    SessionOutcome,
    Severity,
    ToolCallRecord,
    ValidationResult,
)

__all__ = [
    "AgentContext",
    "AgentError",
    "AgentResult",
    "CapabilityOutput",
    "ChangeProposingResult",
    "ChangeType",
    "FinishReason",
    "PlainResult",
    "ProposedChange",
    "RiskLevel",
    "SafetyVerdict",
    "SessionOutcome",
    "Severity",
    "ToolCallRecord",
    "ValidationResult",
]
