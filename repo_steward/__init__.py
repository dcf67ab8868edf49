"""
repo_steward - tool-execution and change-safety mediation for maintenance agents.

Lets a language model plan tool invocations against a real repository while
every call is gated, recorded and bounded:

    MaintenanceAgent
        └─ StepBoundedLoop ──(ModelRequest/ModelResponse)── ModelCollaborator
              └─ CapabilityInterceptor ── SafetyClassifier
                    └─ CapabilityCatalog (read_file, write_file, ...)
        └─ ChangeGate ── SafetyClassifier + ChangeValidator

Key components:
- safety/: pattern-based classifier over calls, changes and issues
- validation/: bracket scanner, content checks, change validator, change gate
- orchestration/: interception wrapper, step-bounded loop, agent base class
- capabilities/: catalog, input contracts, reference file capabilities
- inference/: provider-agnostic model boundary and OpenAI-compatible client

Usage:
    from repo_steward import StepBoundedLoop, CapabilityCatalog, register_file_capabilities
    from repo_steward.bootstrap import bootstrap_runtime
    from repo_steward.settings import context_from_env

    settings, model = bootstrap_runtime()
    context = context_from_env("/path/to/repo")
    catalog = CapabilityCatalog("bug_fix")
    register_file_capabilities(catalog, context.working_dir)

    loop = StepBoundedLoop(model, max_steps=settings.max_steps)
    outcome = await loop.run(catalog, context, system_prompt, task_prompt)
"""

from repo_steward.capabilities import (
    AccessLevel,
    Capability,
    CapabilityCatalog,
    CapabilityCategory,
    register_file_capabilities,
)
from repo_steward.errors import CapabilityDefinitionError, StewardError
from repo_steward.models import (
    AgentContext,
    AgentResult,
    ChangeProposingResult,
    ChangeType,
    PlainResult,
    ProposedChange,
    SafetyVerdict,
    SessionOutcome,
    Severity,
    ValidationResult,
)
from repo_steward.orchestration import (
    CapabilityInterceptor,
    MaintenanceAgent,
    SessionRecorder,
    StepBoundedLoop,
)
from repo_steward.safety import SafetyClassifier
from repo_steward.validation import ChangeGate, ChangeValidator

__version__ = "0.1.0"

__all__ = [
    "AccessLevel",
    "AgentContext",
    "AgentResult",
    "Capability",
    "CapabilityCatalog",
    "CapabilityCategory",
    "CapabilityDefinitionError",
    "CapabilityInterceptor",
    "ChangeGate",
    "ChangeProposingResult",
    "ChangeType",
    "ChangeValidator",
    "MaintenanceAgent",
    "PlainResult",
    "ProposedChange",
    "SafetyClassifier",
    "SafetyVerdict",
    "SessionOutcome",
    "SessionRecorder",
    "Severity",
    "StepBoundedLoop",
    "StewardError",
    "ValidationResult",
    "register_file_capabilities",
]
