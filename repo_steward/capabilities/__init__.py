"""Capability registry: catalog, input contracts and reference file capabilities."""

from .catalog import AccessLevel, Capability, CapabilityCatalog, CapabilityCategory
from .contracts import ArgumentIssue, parameters_to_json_schema, validate_arguments
from .registration import register_file_capabilities

__all__ = [
    "AccessLevel",
    "ArgumentIssue",
    "Capability",
    "CapabilityCatalog",
    "CapabilityCategory",
    "parameters_to_json_schema",
    "register_file_capabilities",
    "validate_arguments",
]
