"""Startup wiring for workflow and command-line runs.

No import side-effects. Call bootstrap_runtime() once at startup, before
building agents, so logging honours STEWARD_DEBUG and the model client is
built from the same settings.
"""

from typing import NamedTuple, Optional

from repo_steward._logging import configure_logging, get_component_logger
from repo_steward.inference.client import InferenceClient, create_inference_client
from repo_steward.settings import StewardSettings, load_settings


class Runtime(NamedTuple):
    settings: StewardSettings
    model: InferenceClient


def bootstrap_runtime(
    settings: Optional[StewardSettings] = None,
    json_logs: bool = True,
) -> Runtime:
    """Configure logging and build the model client.

    Args:
        settings: Settings to use. Read from the environment when None.
        json_logs: Render log events as JSON lines (default) or console text

    Returns:
        Runtime with the settings and the inference client
    """
    settings = settings or load_settings()
    configure_logging(debug=settings.debug, json=json_logs)

    _logger = get_component_logger("bootstrap")
    _logger.info(
        "runtime_bootstrapped",
        model=settings.model_id,
        base_url=settings.model_base_url,
        max_steps=settings.max_steps,
        debug=settings.debug,
    )
    return Runtime(settings=settings, model=create_inference_client(settings))


__all__ = ["Runtime", "bootstrap_runtime"]
