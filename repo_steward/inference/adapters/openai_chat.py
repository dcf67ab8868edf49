"""
OpenAI Chat Completions adapter with tool calling.

Supports OpenAI API and compatible endpoints (Gemini's OpenAI-compatible
endpoint, Azure OpenAI, vLLM, llama-server, etc.).
"""
from __future__ import annotations

import asyncio
import json
from typing import Any, Dict, List, Optional

import httpx

from repo_steward._logging import get_component_logger
from repo_steward.inference.adapters.base import BackendAdapter
from repo_steward.inference.endpoints import EndpointSpec
from repo_steward.inference.types import (
    ErrorCategory,
    InferenceError,
    Message,
    ModelRequest,
    ModelResponse,
    ToolCallRequest,
)

_RETRYABLE_STATUS = {408, 429}


def _categorize_exception(exc: Exception) -> InferenceError:
    name = exc.__class__.__name__
    if "Timeout" in name:
        return InferenceError(ErrorCategory.TIMEOUT, str(exc))
    if "Network" in name or "Connect" in name:
        return InferenceError(ErrorCategory.CONNECTION, str(exc))
    return InferenceError(ErrorCategory.BACKEND, str(exc))


def _message_to_wire(message: Message) -> Dict[str, Any]:
    wire: Dict[str, Any] = {"role": message.role, "content": message.content}
    if message.tool_calls:
        wire["tool_calls"] = [
            {
                "id": call.id,
                "type": "function",
                "function": {
                    "name": call.name,
                    "arguments": json.dumps(call.arguments),
                },
            }
            for call in message.tool_calls
        ]
    if message.tool_call_id:
        wire["tool_call_id"] = message.tool_call_id
    if message.name and message.role == "tool":
        wire["name"] = message.name
    return wire


def _parse_arguments(raw: Any, tool_name: str) -> Dict[str, Any]:
    """Decode the JSON arguments string the backend returns for a tool call."""
    if raw is None or raw == "":
        return {}
    if isinstance(raw, dict):
        return raw
    try:
        parsed = json.loads(raw)
    except (TypeError, json.JSONDecodeError) as exc:
        raise InferenceError(
            ErrorCategory.PARSE,
            f"Unparseable arguments for tool call '{tool_name}': {exc}",
            raw_backend=raw,
        ) from exc
    if not isinstance(parsed, dict):
        raise InferenceError(
            ErrorCategory.PARSE,
            f"Arguments for tool call '{tool_name}' must be a JSON object",
            raw_backend=raw,
        )
    return parsed


def _parse_tool_calls(raw_calls: Optional[List[Dict[str, Any]]], step: int) -> List[ToolCallRequest]:
    calls: List[ToolCallRequest] = []
    for index, raw in enumerate(raw_calls or []):
        function = raw.get("function") or {}
        name = function.get("name")
        if not name:
            raise InferenceError(
                ErrorCategory.PARSE, "Tool call without a function name", raw_backend=raw
            )
        calls.append(
            ToolCallRequest(
                id=raw.get("id") or f"call_{step}_{index}",
                name=name,
                arguments=_parse_arguments(function.get("arguments"), name),
            )
        )
    return calls


class OpenAIChatAdapter(BackendAdapter):
    """
    Adapter for OpenAI Chat Completions API (non-streaming).

    One `complete` call is one planning step: the full conversation is sent
    and the assistant message (text plus requested tool calls) is returned.
    """

    def __init__(
        self,
        timeout: float = 120.0,
        max_retries: int = 3,
        backoff_base: float = 1.0,
        logger: Optional[Any] = None,
    ):
        self.timeout = timeout
        self.max_retries = max_retries
        self.backoff_base = backoff_base
        self._logger = get_component_logger("OpenAIChatAdapter", logger)

    async def complete(
        self, endpoint: EndpointSpec, model_id: str, request: ModelRequest
    ) -> ModelResponse:
        base_url = endpoint.base_url.rstrip("/")
        path = endpoint.chat_path

        headers = {"Content-Type": "application/json"}
        api_key = endpoint.metadata.get("api_key")
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"

        # Azure OpenAI uses api-key header
        azure_key = endpoint.metadata.get("azure_api_key")
        if azure_key:
            headers["api-key"] = azure_key

        payload = self._build_payload(model_id, request)

        async with httpx.AsyncClient(
            base_url=base_url,
            timeout=httpx.Timeout(self.timeout, connect=10.0),
            headers=headers,
        ) as client:
            for attempt in range(self.max_retries):
                last_attempt = attempt == self.max_retries - 1
                try:
                    resp = await client.post(path, json=payload)
                except Exception as exc:
                    if not last_attempt:
                        self._logger.warning(
                            "model_request_retry",
                            endpoint=endpoint.name,
                            attempt=attempt + 1,
                            error=str(exc),
                        )
                        await asyncio.sleep(self.backoff_base * (2 ** attempt))
                        continue
                    raise _categorize_exception(exc) from exc

                if resp.status_code >= 400:
                    err = InferenceError(
                        ErrorCategory.BACKEND,
                        f"HTTP {resp.status_code}",
                        raw_backend=resp.text,
                    )
                    retryable = resp.status_code >= 500 or resp.status_code in _RETRYABLE_STATUS
                    if retryable and not last_attempt:
                        self._logger.warning(
                            "model_request_retry",
                            endpoint=endpoint.name,
                            attempt=attempt + 1,
                            status_code=resp.status_code,
                        )
                        await asyncio.sleep(self.backoff_base * (2 ** attempt))
                        continue
                    raise err

                try:
                    data = resp.json()
                except ValueError as exc:
                    raise InferenceError(
                        ErrorCategory.PARSE, f"Invalid JSON response: {exc}", raw_backend=resp.text
                    ) from exc
                return self._parse_response(data, request.step)

        raise InferenceError(ErrorCategory.UNKNOWN, "max_retries must be at least 1")

    def _build_payload(self, model_id: str, request: ModelRequest) -> Dict[str, Any]:
        """Build OpenAI chat completions request payload."""
        messages = [{"role": "system", "content": request.system_instruction}]
        messages.extend(_message_to_wire(m) for m in request.messages)

        payload: Dict[str, Any] = {
            "messages": messages,
            "stream": False,
        }

        if model_id:
            payload["model"] = model_id

        if request.temperature is not None:
            payload["temperature"] = request.temperature

        if request.max_tokens is not None:
            payload["max_tokens"] = request.max_tokens

        if request.tools:
            payload["tools"] = [
                {
                    "type": "function",
                    "function": {
                        "name": t.name,
                        "description": t.description or "",
                        "parameters": t.parameters or {"type": "object", "properties": {}},
                    },
                }
                for t in request.tools
            ]

        payload.update(request.extra_params)

        return payload

    def _parse_response(self, data: Dict[str, Any], step: int) -> ModelResponse:
        choices = data.get("choices") or []
        if not choices:
            return ModelResponse(text="", raw=data, usage=data.get("usage"))

        choice = choices[0]
        message = choice.get("message") or {}
        return ModelResponse(
            text=message.get("content") or "",
            tool_calls=_parse_tool_calls(message.get("tool_calls"), step),
            finish_reason=choice.get("finish_reason"),
            usage=data.get("usage"),
            raw=data,
        )
