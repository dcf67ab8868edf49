from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict


class BackendKind(str, Enum):
    OPENAI_CHAT = "openai_chat"  # OpenAI, Gemini OpenAI-compat, vLLM, llama-server


@dataclass
class EndpointSpec:
    name: str
    base_url: str
    backend_kind: BackendKind = BackendKind.OPENAI_CHAT
    chat_path: str = "/v1/chat/completions"
    metadata: Dict[str, str] = field(default_factory=dict)  # e.g. api_key
