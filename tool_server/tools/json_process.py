"""
JSON Processing Tool

Two operations on arbitrary JSON data:

validate
    `schema` mirrors the shape of `data`. A string leaf names the expected
    type using JavaScript `typeof` names ("string", "number", "boolean",
    "object", "undefined"); a mapping node requires an object value whose
    declared keys all validate recursively. Extra keys in `data` are
    ignored; any other schema node matches anything.

transform
    Applies `transformations` in order to a deep copy of `data`. Each one
    addresses a dot-separated `path`; if the parent of the target cannot be
    reached the transformation is skipped without error.
    - rename: move the value to `newPath` (a sibling key)
    - delete: remove the key
    - add:    set the key to `value`
"""

import copy
from typing import Any, Dict, List, Optional

from ..base import Tool, ToolParameter, ValidationError

# Marks a key that is absent (JavaScript `undefined`)
_MISSING = object()


def _truthy(value: Any) -> bool:
    """JavaScript truthiness for JSON values: containers are always truthy."""
    if isinstance(value, (dict, list)):
        return True
    if value is _MISSING:
        return False
    return bool(value)


def type_name(value: Any) -> str:
    """JavaScript `typeof` for a decoded JSON value."""
    if value is _MISSING:
        return "undefined"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    return "object"


def _index(key: str) -> Optional[int]:
    if key.isascii() and key.isdigit():
        return int(key)
    return None


def _get(container: Any, key: str) -> Any:
    if isinstance(container, dict):
        return container.get(key, _MISSING)
    if isinstance(container, list):
        idx = _index(key)
        if idx is not None and idx < len(container):
            return container[idx]
    return _MISSING


def _set(container: Any, key: str, value: Any) -> None:
    if value is _MISSING:
        _delete(container, key)
    elif isinstance(container, dict):
        container[key] = value
    elif isinstance(container, list):
        idx = _index(key)
        if idx is None:
            return
        if idx >= len(container):
            container.extend([None] * (idx + 1 - len(container)))
        container[idx] = value


def _delete(container: Any, key: str) -> None:
    if isinstance(container, dict):
        container.pop(key, None)
    elif isinstance(container, list):
        idx = _index(key)
        # Deleting an array slot leaves a hole, which serializes as null
        if idx is not None and idx < len(container):
            container[idx] = None


def validate_field(value: Any, schema_field: Any) -> bool:
    if isinstance(schema_field, str):
        return type_name(value) == schema_field

    if isinstance(schema_field, dict):
        if not _truthy(value) or type_name(value) != "object":
            return False
        return all(
            validate_field(_get(value, key), field_type)
            for key, field_type in schema_field.items()
        )

    return True


def apply_transformations(data: Any, transformations: List[Dict[str, Any]]) -> Any:
    """Return a transformed deep copy of `data`; `data` is left untouched."""
    result = copy.deepcopy(data)

    for t in transformations:
        if not isinstance(t, dict) or not isinstance(t.get("path"), str):
            raise ValidationError("Each transformation needs a string 'path'")

        path_parts = t["path"].split(".")
        current = result

        # Navigate to the parent of the target
        for part in path_parts[:-1]:
            current = _get(current, part)
            if not _truthy(current):
                break

        if not _truthy(current):
            continue

        last_part = path_parts[-1]
        operation = t.get("operation")

        if operation == "rename":
            new_path = t.get("newPath")
            if _truthy(new_path):
                _set(current, str(new_path), _get(current, last_part))
                _delete(current, last_part)
        elif operation == "delete":
            _delete(current, last_part)
        elif operation == "add":
            _set(current, last_part, t.get("value", _MISSING))

    return result


class JsonProcessTool(Tool):
    """Validate and transform JSON data."""

    @property
    def name(self) -> str:
        return "jsonProcess"

    @property
    def description(self) -> str:
        return "Validate and transform JSON data"

    @property
    def parameters(self) -> List[ToolParameter]:
        return [
            ToolParameter(
                name="operation",
                type="string",
                description="'validate' or 'transform'",
                required=True
            ),
            ToolParameter(
                name="data",
                type="object",
                description="JSON value to process",
                required=False
            ),
            ToolParameter(
                name="schema",
                type="object",
                description="Expected shape of data (validate)",
                required=False
            ),
            ToolParameter(
                name="transformations",
                type="array",
                description="List of {operation, path, value?, newPath?} (transform)",
                required=False
            )
        ]

    async def execute(
        self,
        operation: str,
        data: Any = None,
        schema: Any = None,
        transformations: Any = None,
        **kwargs
    ) -> Dict[str, Any]:
        if operation == "validate" and _truthy(schema):
            return {"isValid": validate_field(data, schema)}

        if operation == "transform" and _truthy(transformations):
            if not isinstance(transformations, list):
                raise ValidationError("transformations must be an array", tool_name=self.name)
            return {"result": apply_transformations(data, transformations)}

        raise ValidationError(
            "Invalid operation or missing required parameters",
            tool_name=self.name
        )
