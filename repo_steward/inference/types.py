from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Protocol


class ErrorCategory(str, Enum):
    TIMEOUT = "timeout"
    BACKEND = "backend"
    CONNECTION = "connection"
    PARSE = "parse"
    UNKNOWN = "unknown"


@dataclass
class InferenceError(Exception):
    category: ErrorCategory
    message: str
    raw_backend: Optional[Any] = None

    def __str__(self) -> str:
        return f"{self.category.value}: {self.message}"


@dataclass
class ToolCallRequest:
    """A capability invocation requested by the model."""
    id: str
    name: str
    arguments: Dict[str, Any] = field(default_factory=dict)


@dataclass
class Message:
    role: str  # system | user | assistant | tool
    content: Optional[str] = None
    tool_calls: List[ToolCallRequest] = field(default_factory=list)
    tool_call_id: Optional[str] = None
    name: Optional[str] = None


@dataclass
class ToolSpec:
    name: str
    description: Optional[str] = None
    parameters: Optional[Dict[str, Any]] = None


@dataclass
class ModelRequest:
    """
    One planning step:
      - system_instruction: agent role and rules
      - messages: conversation so far (task prompt, tool calls, tool results)
      - tools: declared capabilities the model may request
    """
    system_instruction: str
    messages: List[Message]
    tools: List[ToolSpec] = field(default_factory=list)
    step: int = 1
    max_steps: int = 1
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None
    extra_params: Dict[str, Any] = field(default_factory=dict)


@dataclass
class ModelResponse:
    text: str = ""
    tool_calls: List[ToolCallRequest] = field(default_factory=list)
    finish_reason: Optional[str] = None
    usage: Optional[Dict[str, Any]] = None
    raw: Optional[Any] = None


class ModelCollaborator(Protocol):
    """Narrow provider-agnostic boundary used by the orchestration loop."""

    async def send(self, request: ModelRequest) -> ModelResponse:
        ...
