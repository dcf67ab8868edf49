"""Exceptions raised by repo_steward.

Safety denials and validation findings are returned as data, never raised.
Only fatal conditions (malformed capability definitions, model failures)
are exceptions, and they propagate to the calling agent.
"""


class StewardError(Exception):
    """Base class for fatal repo_steward errors."""


class CapabilityDefinitionError(StewardError):
    """A capability is malformed or returned an untagged output."""

    def __init__(self, capability_name: str, message: str):
        self.capability_name = capability_name
        self.message = message
        super().__init__(f"{capability_name}: {message}")


__all__ = ["StewardError", "CapabilityDefinitionError"]
