from __future__ import annotations

from typing import Any, Dict, Optional

from repo_steward._logging import get_component_logger
from repo_steward.inference.adapters.base import BackendAdapter
from repo_steward.inference.adapters.openai_chat import OpenAIChatAdapter
from repo_steward.inference.endpoints import BackendKind, EndpointSpec
from repo_steward.inference.types import ErrorCategory, InferenceError, ModelRequest, ModelResponse
from repo_steward.settings import StewardSettings


class InferenceClient:
    """
    Model collaborator bound to one endpoint and model id.

    Implements the `send(ModelRequest) -> ModelResponse` boundary the
    orchestration loop depends on; provider choice is made at construction.
    """

    def __init__(
        self,
        endpoint: EndpointSpec,
        model_id: str,
        adapter_overrides: Dict[BackendKind, BackendAdapter] | None = None,
        logger: Optional[Any] = None,
    ):
        self.endpoint = endpoint
        self.model_id = model_id
        self.adapters: Dict[BackendKind, BackendAdapter] = {
            BackendKind.OPENAI_CHAT: OpenAIChatAdapter(),
        }
        if adapter_overrides:
            self.adapters.update(adapter_overrides)
        self._logger = get_component_logger("InferenceClient", logger)

    async def send(self, request: ModelRequest) -> ModelResponse:
        adapter = self.adapters.get(self.endpoint.backend_kind)
        if adapter is None:
            raise InferenceError(
                ErrorCategory.UNKNOWN, f"No adapter for backend {self.endpoint.backend_kind}"
            )
        self._logger.debug(
            "model_request",
            endpoint=self.endpoint.name,
            model=self.model_id,
            step=request.step,
            message_count=len(request.messages),
            tool_count=len(request.tools),
        )
        response = await adapter.complete(self.endpoint, self.model_id, request)
        self._logger.debug(
            "model_response",
            endpoint=self.endpoint.name,
            step=request.step,
            tool_call_count=len(response.tool_calls),
            finish_reason=response.finish_reason,
        )
        return response


def create_inference_client(settings: StewardSettings) -> InferenceClient:
    metadata: Dict[str, str] = {}
    if settings.model_api_key:
        metadata["api_key"] = settings.model_api_key
    endpoint = EndpointSpec(
        name="default",
        base_url=settings.model_base_url,
        backend_kind=BackendKind.OPENAI_CHAT,
        chat_path=settings.model_chat_path,
        metadata=metadata,
    )
    return InferenceClient(
        endpoint,
        settings.model_id,
        adapter_overrides={
            BackendKind.OPENAI_CHAT: OpenAIChatAdapter(timeout=settings.model_timeout),
        },
    )
