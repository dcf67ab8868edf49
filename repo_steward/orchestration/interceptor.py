"""
Interception wrapper around capability execution.

Every capability the model can reach is wrapped so that each call:
1. passes the safety classifier (denials become synthetic error results),
2. matches the capability's input contract,
3. runs the real body with the model's arguments unchanged,
4. is recorded in invocation order, along with any proposed change.

The wrapper never alters arguments or a successful payload and never
retries. Exceptions raised by a capability body propagate to the caller.
"""

import inspect
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from repo_steward._logging import get_component_logger
from repo_steward.capabilities.catalog import Capability, CapabilityCatalog
from repo_steward.capabilities.contracts import validate_arguments
from repo_steward.errors import CapabilityDefinitionError
from repo_steward.models.types import (
    AgentContext,
    CapabilityOutput,
    ChangeProposingResult,
    PlainResult,
    ProposedChange,
    ToolCallRecord,
)
from repo_steward.safety.classifier import SafetyClassifier


@dataclass
class SessionRecorder:
    """Append-only audit trail owned by a single run."""

    tool_calls: List[ToolCallRecord] = field(default_factory=list)
    proposed_changes: List[ProposedChange] = field(default_factory=list)

    def record(
        self,
        capability_name: str,
        args: Mapping[str, Any],
        result: Dict[str, Any],
        proposed_change: Optional[ProposedChange] = None,
    ) -> ToolCallRecord:
        entry = ToolCallRecord(capability_name, dict(args), result)
        self.tool_calls.append(entry)
        if proposed_change is not None:
            self.proposed_changes.append(proposed_change)
        return entry


class CapabilityInterceptor:
    """
    Wraps capabilities with safety, contract and recording behaviour.

    Args:
        classifier: Safety classifier consulted before every call
        context: Run context passed to the classifier
        recorder: Where calls and proposed changes are recorded
        logger: Optional injected logger
    """

    def __init__(
        self,
        classifier: SafetyClassifier,
        context: AgentContext,
        recorder: SessionRecorder,
        logger: Optional[Any] = None,
    ):
        self.classifier = classifier
        self.context = context
        self.recorder = recorder
        self._logger = get_component_logger("CapabilityInterceptor", logger)

    def wrap(self, capability: Capability) -> Capability:
        """Return a capability with the same declaration whose body is intercepted."""

        async def guarded(**kwargs: Any) -> CapabilityOutput:
            return await self._intercept(capability, kwargs)

        return capability.with_execute(guarded)

    def wrap_all(self, catalog: CapabilityCatalog) -> CapabilityCatalog:
        """Build a new catalog of wrapped capabilities. The input is not mutated."""
        wrapped = CapabilityCatalog(catalog.catalog_id, catalog.description)
        for capability in catalog:
            wrapped.add(self.wrap(capability))
        return wrapped

    async def _intercept(self, capability: Capability, args: Mapping[str, Any]) -> CapabilityOutput:
        name = capability.name

        verdict = self.classifier.check_capability_call(name, args, self.context)
        if not verdict.safe:
            denied = PlainResult({"error": f"Safety check failed: {verdict.reason}"})
            self.recorder.record(name, args, denied.to_payload())
            self._logger.warning(
                "capability_call_denied",
                capability=name,
                reason=verdict.reason,
                severity=verdict.severity.value if verdict.severity else None,
            )
            return denied

        issues = validate_arguments(capability.parameters, args)
        if issues:
            rejected = PlainResult({
                "error": f"Invalid arguments for {name}: " + "; ".join(str(i) for i in issues)
            })
            self.recorder.record(name, args, rejected.to_payload())
            self._logger.info("capability_call_rejected", capability=name, issues=len(issues))
            return rejected

        output = capability.execute(**args)
        if inspect.isawaitable(output):
            output = await output

        if isinstance(output, ChangeProposingResult):
            change = output.proposed_change
            self.recorder.record(name, args, output.to_payload(), change)
            self._logger.info(
                "change_proposed",
                capability=name,
                file_path=change.file_path,
                change_type=getattr(change.change_type, "value", change.change_type),
            )
        elif isinstance(output, PlainResult):
            self.recorder.record(name, args, output.to_payload())
        else:
            raise CapabilityDefinitionError(
                name,
                f"returned {type(output).__name__}, expected PlainResult or ChangeProposingResult",
            )

        self._logger.debug("capability_call_completed", capability=name)
        return output
