"""Typed binding of path variables, query parameters and body fields.

Populates a request dataclass from three sources, converting string values
to the annotated field types.

Resolution rules, per field and independently of every other field:

1. path variables
2. query parameters
3. body fields (only for methods that carry a body: POST, PUT, PATCH)

The first source holding the field name (case-insensitive) wins. A field
found nowhere keeps its default, or the zero value of its type when it has
none. A value that is present but cannot be converted raises
``BindingError``; it is never silently replaced by a default.

Supported field types: ``str``, ``int``, ``float``, ``bool`` and their
``| None`` forms. Fields of any other type receive the raw value. A ``str``
field takes strings and JSON scalars, never objects or arrays; a ``bool``
field takes JSON booleans, the numbers 0 and 1, and the string tokens
``true/false/1/0/yes/no/on/off``.
"""

import math
from collections.abc import Mapping
from typing import Any

from wren._internal.variables import Variables
from wren.errors import BindingError
from wren.http.methods import HttpMethod, parse_method
from wren.shapes import FieldSpec, HandlerDescriptor, Shape

_TRUE = frozenset({"true", "1", "yes", "on"})
_FALSE = frozenset({"false", "0", "no", "off"})

_MISSING = object()


def bind(
    shape: Shape,
    path_vars: Mapping[str, Any],
    query_vars: Mapping[str, Any],
    body_vars: Mapping[str, Any],
) -> Any:
    """Create an instance of *shape* from the three request sources.

    Args:
        shape: Field list of the request type.
        path_vars: Captured route variables.
        query_vars: Parsed query string.
        body_vars: Decoded body fields (empty for bodyless methods).

    Returns:
        A new instance of ``shape.type``.

    Raises:
        BindingError: A present value cannot be converted to its field type.
    """
    sources = (_folded(path_vars), _folded(query_vars), _folded(body_vars))
    values: dict[str, Any] = {}

    for spec in shape.fields:
        raw = _lookup(spec.name, sources)
        if raw is _MISSING:
            values[spec.name] = spec.zero()
        else:
            values[spec.name] = convert(spec, raw)

    return shape.build(values)


def bind_request(
    descriptor: HandlerDescriptor,
    method: str | HttpMethod,
    path_vars: Mapping[str, Any],
    query_vars: Mapping[str, Any],
    body_vars: Mapping[str, Any] | None = None,
) -> Any:
    """Bind the request value for *descriptor*.

    Body fields are ignored unless *method* carries a body. Returns
    ``None`` for handlers that declare no request type.
    """
    if descriptor.request is None:
        return None
    if not parse_method(method).carries_body:
        body_vars = None
    return bind(descriptor.request, path_vars, query_vars, body_vars or {})


def convert(spec: FieldSpec, value: Any) -> Any:
    """Convert *value* to the declared type of *spec*.

    Raises ``BindingError`` when conversion fails.
    """
    target = spec.base_type

    if value is None:
        if spec.optional or target not in (str, int, float, bool):
            return None
        raise BindingError(spec.name, value, target)

    try:
        if target is str:
            return _to_str(value)
        if target is bool:
            return _to_bool(value)
        if target is int:
            return _to_int(value)
        if target is float:
            return _to_float(value)
    except (ValueError, TypeError, AttributeError) as exc:
        raise BindingError(spec.name, value, target) from exc

    # Unknown type: pass the raw value through
    return value


def _to_str(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    # JSON objects and arrays have no string form
    raise TypeError(value)


def _to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return value == 1
    if isinstance(value, str):
        token = value.strip().lower()
        if token in _TRUE:
            return True
        if token in _FALSE:
            return False
    raise ValueError(value)


def _to_int(value: Any) -> int:
    if isinstance(value, bool):
        raise TypeError(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(value)
        return int(value)
    return int(value.strip())


def _to_float(value: Any) -> float:
    if isinstance(value, bool):
        raise TypeError(value)
    if isinstance(value, (int, float)):
        return float(value)
    result = float(value.strip())
    if math.isnan(result) or math.isinf(result):
        raise ValueError(value)
    return result


def _folded(source: Mapping[str, Any]) -> Mapping[str, Any]:
    """Wrap *source* for case-insensitive lookups."""
    if isinstance(source, Variables):
        return source
    return {key.casefold(): value for key, value in source.items()}


def _lookup(name: str, sources: tuple[Mapping[str, Any], ...]) -> Any:
    for source in sources:
        if isinstance(source, Variables):
            if name in source:
                return source[name]
        else:
            key = name.casefold()
            if key in source:
                return source[key]
    return _MISSING
