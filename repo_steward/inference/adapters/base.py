from __future__ import annotations

from abc import ABC, abstractmethod

from repo_steward.inference.endpoints import EndpointSpec
from repo_steward.inference.types import ModelRequest, ModelResponse


class BackendAdapter(ABC):
    @abstractmethod
    async def complete(
        self, endpoint: EndpointSpec, model_id: str, request: ModelRequest
    ) -> ModelResponse:
        ...
