"""Argument validation against a tool's declared parameters."""
from typing import Any, Dict, Mapping

from ..errors import ValidationError
from .registry import ToolDef


def _type_ok(declared: str, value: Any) -> bool:
    if declared == "string":
        return isinstance(value, str)
    if declared == "number":
        # bool is an int subclass, but true/false is not a number here
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    return False


def validate_arguments(tool: ToolDef, arguments: Mapping[str, Any]) -> Dict[str, Any]:
    """Return the validated arguments, or raise ValidationError on the first bad parameter.

    Parameters are checked in declared order. Values are never coerced; a
    ``null`` optional argument counts as absent and arguments the tool does
    not declare are dropped.
    """
    if arguments is None:
        arguments = {}
    if not isinstance(arguments, Mapping):
        raise ValidationError("arguments", "must be an object")

    validated: Dict[str, Any] = {}
    for param in tool.params:
        value = arguments.get(param.name)
        if value is None:
            if param.required:
                raise ValidationError(param.name, "is required")
            continue
        if not _type_ok(param.type, value):
            raise ValidationError(param.name, f"must be a {param.type}, got {type(value).__name__}")
        if param.required and isinstance(value, str) and not value.strip():
            raise ValidationError(param.name, "must not be empty")
        validated[param.name] = value
    return validated
