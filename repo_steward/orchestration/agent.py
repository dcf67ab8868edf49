"""
Base class for maintenance agents.

A maintenance agent (dependency remediation, bug fixing, PR review) supplies
its capabilities and prompts; this base class supplies the session loop,
the interception wrapper and the change gate. Agents never apply changes
themselves: they return the reviewed proposals in an AgentResult.
"""

from abc import ABC, abstractmethod
from typing import Any, Iterable, Optional

from repo_steward._logging import get_component_logger
from repo_steward.capabilities.catalog import CapabilityCatalog
from repo_steward.inference.types import ModelCollaborator
from repo_steward.models.types import (
    AgentContext,
    AgentError,
    AgentResult,
    ProposedChange,
    SessionOutcome,
    ValidationResult,
)
from repo_steward.orchestration.loop import StepBoundedLoop
from repo_steward.safety.classifier import SafetyClassifier
from repo_steward.thresholds import DEFAULT_MAX_STEPS
from repo_steward.validation.change_validator import ChangeValidator
from repo_steward.validation.gate import ChangeGate, validate_context


class MaintenanceAgent(ABC):
    """
    Abstract maintenance agent.

    Subclasses implement name, description, build_capabilities, the two
    prompt builders and execute. A typical execute:

        preflight = self.preflight(context)
        if not preflight.valid:
            return self.error_result("INVALID_CONTEXT", "; ".join(preflight.errors))
        outcome = await self.run_session(input, context)
        review = self.review_changes(outcome.proposed_changes, context)
        return AgentResult(success=review.valid, ..., validated=review.valid)
    """

    # Model-planning steps per session
    max_steps: int = DEFAULT_MAX_STEPS

    def __init__(
        self,
        model: ModelCollaborator,
        classifier: Optional[SafetyClassifier] = None,
        validator: Optional[ChangeValidator] = None,
        logger: Optional[Any] = None,
    ):
        self.model = model
        self.classifier = classifier or SafetyClassifier(logger=logger)
        self.validator = validator or ChangeValidator(logger=logger)
        self.gate = ChangeGate(self.classifier, self.validator, logger=logger)
        self._base_logger = logger
        self._logger = get_component_logger(self.__class__.__name__, logger)

    @property
    @abstractmethod
    def name(self) -> str:
        ...

    @property
    @abstractmethod
    def description(self) -> str:
        ...

    @abstractmethod
    def build_capabilities(self, context: AgentContext) -> CapabilityCatalog:
        """Build the catalog of capabilities for one run."""

    @abstractmethod
    def system_instruction(self, input: Any, context: AgentContext) -> str:
        """Agent role and rules for the model."""

    @abstractmethod
    def task_instruction(self, input: Any, context: AgentContext) -> str:
        """The task prompt for one run."""

    @abstractmethod
    async def execute(self, input: Any, context: AgentContext) -> AgentResult:
        """Run the agent's task."""

    def preflight(self, context: AgentContext) -> ValidationResult:
        """Check the agent can run in this context."""
        return validate_context(context)

    async def run_session(self, input: Any, context: AgentContext) -> SessionOutcome:
        """Run the model loop with this agent's capabilities and prompts."""
        loop = StepBoundedLoop(
            self.model,
            classifier=self.classifier,
            max_steps=self.max_steps,
            logger=self._base_logger,
        )
        self._logger.info("agent_session_started", agent=self.name)
        outcome = await loop.run(
            self.build_capabilities(context),
            context,
            self.system_instruction(input, context),
            self.task_instruction(input, context),
        )
        self._logger.info(
            "agent_session_finished",
            agent=self.name,
            finish_reason=outcome.finish_reason.value,
            proposed_changes=len(outcome.proposed_changes),
        )
        return outcome

    def review_changes(
        self, changes: Iterable[ProposedChange], context: AgentContext
    ) -> ValidationResult:
        """Run the change gate over proposed changes."""
        return self.gate.review(changes, context)

    def error_result(self, code: str, message: str, recoverable: bool = False) -> AgentResult:
        self._logger.error("agent_error", agent=self.name, code=code, message=message)
        return AgentResult(
            success=False,
            errors=[AgentError(code=code, message=message, recoverable=recoverable)],
            validated=False,
        )
