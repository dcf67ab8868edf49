from .types import (
    ErrorCategory,
    InferenceError,
    Message,
    ModelCollaborator,
    ModelRequest,
    ModelResponse,
    ToolCallRequest,
    ToolSpec,
)
from .endpoints import BackendKind, EndpointSpec
from .client import InferenceClient, create_inference_client

__all__ = [
    # Types
    "ErrorCategory",
    "InferenceError",
    "Message",
    "ModelCollaborator",
    "ModelRequest",
    "ModelResponse",
    "ToolCallRequest",
    "ToolSpec",
    # Endpoints
    "BackendKind",
    "EndpointSpec",
    # Client
    "InferenceClient",
    "create_inference_client",
]
