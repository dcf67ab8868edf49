"""
Input contracts for capabilities.

A capability declares its parameters the same way the tool catalogs do:

    parameters={
        "path": {"type": "string", "description": "...", "required": True},
        "max_results": {"type": "integer", "required": False, "default": 50},
    }

The same declaration is used twice: rendered to JSON Schema for the model,
and checked at runtime against the arguments the model actually sent.

Design Principles:
- Lightweight: required fields, unknown fields, primitive types
- Non-blocking: argument problems are returned, not raised
- Definition problems (a malformed declaration) are fatal and raise
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping

from repo_steward.errors import CapabilityDefinitionError

# Declared type name -> accepted Python types
PARAMETER_TYPES: Dict[str, tuple] = {
    "string": (str,),
    "integer": (int,),
    "number": (int, float),
    "boolean": (bool,),
    "array": (list, tuple),
    "object": (dict,),
}


@dataclass
class ArgumentIssue:
    """A single problem with the arguments of a capability call."""
    field: str
    message: str

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"


def check_parameter_declaration(capability_name: str, parameters: Mapping[str, Any]) -> None:
    """Reject malformed parameter declarations at registration time.

    Raises:
        CapabilityDefinitionError: If a parameter is not a mapping or declares
            an unknown type
    """
    if not isinstance(parameters, Mapping):
        raise CapabilityDefinitionError(capability_name, "parameters must be a mapping")
    for param, spec in parameters.items():
        if not isinstance(spec, Mapping):
            raise CapabilityDefinitionError(
                capability_name, f"parameter '{param}' must be declared as a mapping"
            )
        declared = spec.get("type", "string")
        if declared not in PARAMETER_TYPES:
            raise CapabilityDefinitionError(
                capability_name, f"parameter '{param}' has unknown type '{declared}'"
            )


def validate_arguments(
    parameters: Mapping[str, Mapping[str, Any]],
    args: Any,
) -> List[ArgumentIssue]:
    """Check call arguments against a parameter declaration.

    Args:
        parameters: The capability's parameter declaration
        args: Arguments sent by the model

    Returns:
        List of ArgumentIssue. Empty list means the call matches the contract.
    """
    if not isinstance(args, Mapping):
        return [ArgumentIssue(field="arguments", message="must be an object")]

    issues: List[ArgumentIssue] = []

    for name, spec in parameters.items():
        if spec.get("required", False) and name not in args:
            issues.append(ArgumentIssue(field=name, message="is required"))

    for name, value in args.items():
        spec = parameters.get(name)
        if spec is None:
            issues.append(ArgumentIssue(field=name, message="is not a declared parameter"))
            continue
        if value is None and not spec.get("required", False):
            continue
        declared = spec.get("type", "string")
        if not _matches_type(value, declared):
            issues.append(ArgumentIssue(
                field=name,
                message=f"expected {declared}, got {type(value).__name__}",
            ))

    return issues


def parameters_to_json_schema(parameters: Mapping[str, Mapping[str, Any]]) -> Dict[str, Any]:
    """Render a parameter declaration as a JSON Schema object."""
    properties: Dict[str, Any] = {}
    required: List[str] = []
    for name, spec in parameters.items():
        prop: Dict[str, Any] = {"type": spec.get("type", "string")}
        if spec.get("description"):
            prop["description"] = spec["description"]
        if "default" in spec:
            prop["default"] = spec["default"]
        if "items" in spec:
            prop["items"] = spec["items"]
        if "enum" in spec:
            prop["enum"] = list(spec["enum"])
        properties[name] = prop
        if spec.get("required", False):
            required.append(name)

    schema: Dict[str, Any] = {"type": "object", "properties": properties}
    if required:
        schema["required"] = required
    return schema


def _matches_type(value: Any, declared: str) -> bool:
    # bool is a subclass of int; keep them apart
    if declared in ("integer", "number") and isinstance(value, bool):
        return False
    return isinstance(value, PARAMETER_TYPES.get(declared, (object,)))
