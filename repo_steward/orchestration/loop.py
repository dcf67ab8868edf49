"""
Step-bounded orchestration loop.

Drives a model's plan against a capability catalog:

    AwaitModel --(tool calls)--> DispatchCalls --> AwaitModel ...
        |
        +--(no tool calls, or step budget spent)--> Done

Each step is one model request. Requested calls are dispatched in order
through the interception wrapper and their payloads are appended to the
conversation as tool messages. The step budget is the only cancellation
mechanism; model exceptions propagate unchanged.
"""

import json
from typing import Any, List, Optional

from repo_steward._logging import get_component_logger
from repo_steward.capabilities.catalog import CapabilityCatalog
from repo_steward.inference.types import Message, ModelCollaborator, ModelRequest, ToolCallRequest
from repo_steward.models.types import (
    AgentContext,
    FinishReason,
    SessionOutcome,
)
from repo_steward.orchestration.interceptor import CapabilityInterceptor, SessionRecorder
from repo_steward.safety.classifier import SafetyClassifier
from repo_steward.thresholds import DEFAULT_MAX_STEPS


class StepBoundedLoop:
    """
    Runs one model-driven session against a catalog.

    Args:
        model: Model collaborator (anything with `async send(ModelRequest)`)
        classifier: Safety classifier for the interception wrapper
        max_steps: Default step budget for runs
        logger: Optional injected logger

    Example:
        loop = StepBoundedLoop(create_inference_client(load_settings()))
        outcome = await loop.run(catalog, context, system_prompt, task_prompt)
    """

    def __init__(
        self,
        model: ModelCollaborator,
        classifier: Optional[SafetyClassifier] = None,
        max_steps: int = DEFAULT_MAX_STEPS,
        logger: Optional[Any] = None,
    ):
        self.model = model
        self.classifier = classifier or SafetyClassifier(logger=logger)
        self.max_steps = max_steps
        self._base_logger = logger
        self._logger = get_component_logger("StepBoundedLoop", logger)

    async def run(
        self,
        catalog: CapabilityCatalog,
        context: AgentContext,
        system_instruction: str,
        task_instruction: str,
        max_steps: Optional[int] = None,
    ) -> SessionOutcome:
        """
        Run a session until the model stops requesting calls or the budget is spent.

        Args:
            catalog: Capabilities the model may request. Not mutated.
            context: Run context
            system_instruction: Agent role and rules
            task_instruction: The task prompt
            max_steps: Step budget for this run (defaults to the loop's)

        Returns:
            SessionOutcome with the final model text, the ordered call log
            and the proposed changes

        Raises:
            ValueError: If the step budget is less than 1
        """
        budget = self.max_steps if max_steps is None else max_steps
        if budget < 1:
            raise ValueError(f"max_steps must be at least 1, got {budget}")

        recorder = SessionRecorder()
        interceptor = CapabilityInterceptor(
            self.classifier, context, recorder, logger=self._base_logger
        )
        wrapped = interceptor.wrap_all(catalog)
        tools = wrapped.to_tool_specs()

        messages: List[Message] = [Message(role="user", content=task_instruction)]
        model_text = ""
        finish_reason = FinishReason.STEP_BUDGET_EXHAUSTED
        steps_used = 0

        self._logger.info(
            "session_started",
            repo=f"{context.repo_owner}/{context.repo_name}",
            capabilities=len(wrapped),
            max_steps=budget,
        )

        for step in range(1, budget + 1):
            steps_used = step
            response = await self.model.send(
                ModelRequest(
                    system_instruction=system_instruction,
                    messages=list(messages),
                    tools=tools,
                    step=step,
                    max_steps=budget,
                )
            )
            model_text = response.text or ""

            self._logger.info("session_step", step=step, tool_calls=len(response.tool_calls))

            if not response.tool_calls:
                finish_reason = FinishReason.COMPLETED
                break

            messages.append(
                Message(
                    role="assistant",
                    content=response.text or None,
                    tool_calls=list(response.tool_calls),
                )
            )
            for call in response.tool_calls:
                payload = await self._dispatch(call, wrapped, recorder)
                messages.append(
                    Message(
                        role="tool",
                        content=json.dumps(payload, default=str),
                        tool_call_id=call.id,
                        name=call.name,
                    )
                )

        self._logger.info(
            "session_finished",
            finish_reason=finish_reason.value,
            steps_used=steps_used,
            tool_calls=len(recorder.tool_calls),
            proposed_changes=len(recorder.proposed_changes),
        )

        return SessionOutcome(
            model_text=model_text,
            proposed_changes=list(recorder.proposed_changes),
            tool_calls=list(recorder.tool_calls),
            steps_used=steps_used,
            finish_reason=finish_reason,
        )

    async def _dispatch(
        self,
        call: ToolCallRequest,
        wrapped: CapabilityCatalog,
        recorder: SessionRecorder,
    ) -> dict:
        capability = wrapped.get(call.name)
        if capability is None:
            payload = {"error": f"Unknown capability: {call.name}"}
            recorder.record(call.name, call.arguments, payload)
            self._logger.warning("unknown_capability_requested", capability=call.name)
            return payload

        output = await capability.execute(**call.arguments)
        return output.to_payload()
