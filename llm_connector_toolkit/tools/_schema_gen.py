"""JSON Schema helpers for tool parameters.

Used by :meth:`ToolFactory.register_tool` to infer the ``parameters``
schema when the caller does not provide one, and to turn a declared schema
into a strict pydantic model that validates the model's tool-call arguments.
"""

from __future__ import annotations

import inspect
import logging
from typing import (
    Any,
    Dict,
    List,
    Literal,
    Optional,
    Set,
    Tuple,
    Type,
    Union,
    get_args,
    get_origin,
    get_type_hints,
)

from pydantic import BaseModel, ConfigDict, create_model

logger = logging.getLogger(__name__)

_JSON_SCALARS: Dict[str, Any] = {
    "string": str,
    "integer": int,
    "number": float,
    "boolean": bool,
    "object": Dict[str, Any],
    "null": type(None),
}


def generate_schema_from_function(
    func: Any,
    *,
    exclude_params: Optional[Set[str]] = None,
) -> Dict[str, Any]:
    """Generate a JSON Schema ``object`` from a function's type hints.

    Args:
        func: The callable to inspect.
        exclude_params: Parameter names to exclude.

    Returns:
        A JSON Schema dict ``{"type": "object", "properties": ..., "required": ...}``.
    """
    exclude = exclude_params or set()

    # Resolve string annotations from ``from __future__ import annotations``
    try:
        hints = get_type_hints(func)
    except (NameError, AttributeError, TypeError):
        hints = {}

    sig = inspect.signature(func)

    properties: Dict[str, Any] = {}
    required: List[str] = []

    for param_name, param in sig.parameters.items():
        if param_name in ("self", "cls") or param_name in exclude:
            continue
        if param.kind in (
            inspect.Parameter.VAR_KEYWORD,
            inspect.Parameter.VAR_POSITIONAL,
        ):
            continue

        annotation = hints.get(param_name, param.annotation)
        if annotation is inspect.Parameter.empty:
            continue

        prop_schema = _type_to_schema(annotation)

        if param.default is not inspect.Parameter.empty:
            if param.default is not None:
                prop_schema["default"] = param.default
        else:
            required.append(param_name)

        properties[param_name] = prop_schema

    schema: Dict[str, Any] = {
        "type": "object",
        "properties": properties,
    }
    if required:
        schema["required"] = required

    return schema


def _type_to_schema(annotation: Any) -> Dict[str, Any]:
    """Convert a Python type annotation to a JSON Schema property dict."""
    origin = get_origin(annotation)
    args = get_args(annotation)

    if annotation is type(None):
        return {"type": "null"}
    if annotation is str:
        return {"type": "string"}
    if annotation is int:
        return {"type": "integer"}
    if annotation is float:
        return {"type": "number"}
    if annotation is bool:
        return {"type": "boolean"}

    if origin is Union:
        non_none = [a for a in args if a is not type(None)]
        if len(non_none) == 1 and len(args) == 2:
            inner = _type_to_schema(non_none[0])
            if isinstance(inner.get("type"), str):
                return {**inner, "type": [inner["type"], "null"]}
            return {"anyOf": [inner, {"type": "null"}]}
        return {"anyOf": [_type_to_schema(a) for a in args]}

    if origin is Literal:
        values = list(args)
        if all(isinstance(v, str) for v in values):
            return {"type": "string", "enum": values}
        return {"enum": values}

    if origin is list or annotation is list:
        if args:
            return {"type": "array", "items": _type_to_schema(args[0])}
        return {"type": "array"}

    if origin is dict or annotation is dict:
        return {"type": "object"}

    if isinstance(annotation, type) and issubclass(annotation, BaseModel):
        schema = annotation.model_json_schema()
        schema.pop("title", None)
        return schema

    return {"type": "string"}


def _schema_to_type(prop_schema: Dict[str, Any]) -> Any:
    """Map a JSON Schema property to the Python type pydantic validates against."""
    if "enum" in prop_schema:
        return Literal[tuple(prop_schema["enum"])]  # type: ignore[misc]

    if "anyOf" in prop_schema:
        members = tuple(_schema_to_type(s) for s in prop_schema["anyOf"])
        return Union[members]  # type: ignore[valid-type]

    json_type = prop_schema.get("type")
    if isinstance(json_type, list):
        members = tuple(_schema_to_type({**prop_schema, "type": t}) for t in json_type)
        return Union[members]  # type: ignore[valid-type]

    if json_type == "array":
        items = prop_schema.get("items")
        return List[_schema_to_type(items)] if items else List[Any]  # type: ignore[misc]

    return _JSON_SCALARS.get(json_type, Any)


def build_arguments_model(
    tool_name: str, schema: Optional[Dict[str, Any]]
) -> Type[BaseModel]:
    """Build a strict pydantic model validating arguments against *schema*.

    Unknown fields are rejected, properties listed in ``required`` must be
    present, and every other property defaults to its schema ``default``
    (or ``None``). Values are validated in strict mode so that, e.g., a
    string is never silently coerced into an integer.
    """
    schema = schema or {}
    properties: Dict[str, Any] = schema.get("properties") or {}
    required = set(schema.get("required") or [])

    unknown_required = required - set(properties)
    if unknown_required:
        logger.warning(
            "Tool '%s' lists required parameters without a schema: %s",
            tool_name,
            sorted(unknown_required),
        )

    fields: Dict[str, Tuple[Any, Any]] = {}
    for prop_name, prop_schema in properties.items():
        py_type = _schema_to_type(prop_schema or {})
        if prop_name in required:
            fields[prop_name] = (py_type, ...)
        else:
            fields[prop_name] = (Optional[py_type], prop_schema.get("default"))
    for prop_name in unknown_required:
        fields[prop_name] = (Any, ...)

    model_name = "".join(part[:1].upper() + part[1:] for part in tool_name.split("_"))
    return create_model(  # type: ignore[call-overload]
        f"{model_name}Arguments",
        __config__=ConfigDict(extra="forbid", strict=True),
        **fields,
    )
