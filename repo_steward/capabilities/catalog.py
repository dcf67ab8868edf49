"""
Capability Catalog - named, schema-described operations the model may invoke.

This module provides:
- CapabilityCategory / AccessLevel: typed metadata for routing and review
- Capability: one operation (name, description, parameters, execute)
- CapabilityCatalog: the per-task registry an agent hands to the loop

Architecture:
    Agents build a catalog per task and register capabilities into it.
    The orchestration loop never mutates a catalog; it builds a wrapped
    copy whose capabilities pass through the interception wrapper.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Callable, Dict, Iterator, List, Optional

from repo_steward.capabilities.contracts import (
    check_parameter_declaration,
    parameters_to_json_schema,
)
from repo_steward.errors import CapabilityDefinitionError
from repo_steward.inference.types import ToolSpec


class CapabilityCategory(str, Enum):
    """Capability categories for routing and review."""

    FILE = "file"                    # Repository file access
    VERSION_CONTROL = "version_control"
    PACKAGE = "package"              # Package-manager operations
    ISSUE_TRACKER = "issue_tracker"  # Issues and pull requests
    TEST = "test"                    # Test and build runners
    UTILITY = "utility"


class AccessLevel(str, Enum):
    """What a capability can touch."""

    READ_ONLY = "read_only"  # Safe, no side effects
    WRITE = "write"          # Mutates local state (files, git)
    EXTERNAL = "external"    # Mutates remote state (issues, PRs, registry)


@dataclass(frozen=True)
class Capability:
    """A named operation with an input contract and an executable body.

    `execute` is called with the model's arguments as keyword arguments and
    must return a PlainResult or ChangeProposingResult (awaitable or not).
    """

    name: str
    description: str
    execute: Callable[..., Any]
    parameters: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    category: CapabilityCategory = CapabilityCategory.UTILITY
    access: AccessLevel = AccessLevel.READ_ONLY

    def to_tool_spec(self) -> ToolSpec:
        """Describe this capability to the model."""
        return ToolSpec(
            name=self.name,
            description=self.description,
            parameters=parameters_to_json_schema(self.parameters),
        )

    def with_execute(self, execute: Callable[..., Any]) -> "Capability":
        """Copy with the same declaration and a replaced body."""
        return replace(self, execute=execute)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "parameters": self.parameters,
            "category": self.category.value,
            "access": self.access.value,
        }


class CapabilityCatalog:
    """
    Per-task capability registry.

    Example:
        catalog = CapabilityCatalog("bug_fix")
        catalog.register(
            name="read_file",
            execute=read_file,
            description="Read a file from the repository",
            parameters={"path": {"type": "string", "required": True}},
            category=CapabilityCategory.FILE,
        )
    """

    def __init__(self, catalog_id: str = "default", description: str = ""):
        self.catalog_id = catalog_id
        self.description = description
        self._capabilities: Dict[str, Capability] = {}

    def register(
        self,
        *,
        name: str,
        execute: Callable[..., Any],
        description: str,
        parameters: Optional[Dict[str, Dict[str, Any]]] = None,
        category: CapabilityCategory = CapabilityCategory.UTILITY,
        access: AccessLevel = AccessLevel.READ_ONLY,
    ) -> Capability:
        """
        Register a capability with the catalog.

        Args:
            name: Unique capability name
            execute: Capability body
            description: Human-readable description shown to the model
            parameters: Parameter declaration (see capabilities.contracts)
            category: Capability category
            access: What the capability can touch

        Returns:
            The registered Capability

        Raises:
            CapabilityDefinitionError: If the definition is malformed or the
                name is already registered
        """
        capability = Capability(
            name=name,
            description=description,
            execute=execute,
            parameters=dict(parameters or {}),
            category=category,
            access=access,
        )
        self.add(capability)
        return capability

    def add(self, capability: Capability) -> None:
        """Add an already-built capability."""
        if not isinstance(capability.name, str) or not capability.name:
            raise CapabilityDefinitionError(repr(capability.name), "name must be a non-empty string")
        if not callable(capability.execute):
            raise CapabilityDefinitionError(capability.name, "execute must be callable")
        check_parameter_declaration(capability.name, capability.parameters)
        if capability.name in self._capabilities:
            raise CapabilityDefinitionError(capability.name, "already registered")
        self._capabilities[capability.name] = capability

    def get(self, name: str) -> Optional[Capability]:
        """Get capability by name."""
        return self._capabilities.get(name)

    def has(self, name: str) -> bool:
        return name in self._capabilities

    def names(self) -> List[str]:
        return list(self._capabilities)

    def by_access(self, access: AccessLevel) -> Dict[str, Capability]:
        """Get capabilities with the given access level."""
        return {
            name: cap
            for name, cap in self._capabilities.items()
            if cap.access == access
        }

    def to_tool_specs(self) -> List[ToolSpec]:
        return [cap.to_tool_spec() for cap in self._capabilities.values()]

    def __iter__(self) -> Iterator[Capability]:
        return iter(list(self._capabilities.values()))

    def __len__(self) -> int:
        return len(self._capabilities)

    def __contains__(self, name: object) -> bool:
        return name in self._capabilities
