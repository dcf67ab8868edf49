"""Test doubles shared across the suite."""

from typing import Any, Dict, List

from repo_steward.inference.types import ModelRequest, ModelResponse, ToolCallRequest
from repo_steward.models.types import PlainResult


class ScriptedModel:
    """Model collaborator that replays scripted responses and records requests.

    When the script runs out it keeps answering with plain text.
    """

    def __init__(self, responses: List[ModelResponse]):
        self._responses = list(responses)
        self.requests: List[ModelRequest] = []

    async def send(self, request: ModelRequest) -> ModelResponse:
        self.requests.append(request)
        if self._responses:
            return self._responses.pop(0)
        return ModelResponse(text="done")


class LoopingModel:
    """Model collaborator that requests the same call on every step."""

    def __init__(self, call: ToolCallRequest):
        self.call = call
        self.requests: List[ModelRequest] = []

    async def send(self, request: ModelRequest) -> ModelResponse:
        self.requests.append(request)
        return ModelResponse(text=f"step {request.step}", tool_calls=[self.call])


class FailingModel:
    """Model collaborator that raises on send."""

    def __init__(self, error: Exception):
        self.error = error

    async def send(self, request: ModelRequest) -> ModelResponse:
        raise self.error


class SpyCapability:
    """Capability body that counts invocations."""

    def __init__(self, result: Any = None):
        self.calls: List[Dict[str, Any]] = []
        self._result = result if result is not None else PlainResult({"success": True})

    async def __call__(self, **kwargs):
        self.calls.append(kwargs)
        return self._result

    @property
    def call_count(self) -> int:
        return len(self.calls)


def tool_call(name: str, call_id: str = "call_1", **arguments) -> ToolCallRequest:
    return ToolCallRequest(id=call_id, name=name, arguments=arguments)
