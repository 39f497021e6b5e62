"""JSON codec — the only place request and response bodies touch ``json``.

The dispatcher treats the codec as a black box with two operations::

    fields = codec.decode(raw_body, shape)   # bytes -> dict
    payload = codec.encode(response_value)   # object -> bytes

Any object with those two methods can replace ``JSONCodec``.
"""

import dataclasses
import json
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Any, Protocol, runtime_checkable
from uuid import UUID

from wren.errors import MalformedBodyError
from wren.shapes import Shape

JSON_CONTENT_TYPE = "application/json; charset=utf-8"


@runtime_checkable
class Codec(Protocol):
    """Structural interface the dispatcher needs from a body codec."""

    content_type: str

    def decode(self, body: bytes, shape: Shape | None = None) -> dict[str, Any]: ...
    def encode(self, value: Any) -> bytes: ...


class WrenJSONEncoder(json.JSONEncoder):
    """JSON encoder that handles dataclasses, enums, datetimes and decimals.

    Extends the standard JSONEncoder to serialize:
    - dataclass instances to objects (field order preserved)
    - Enum values to their underlying value
    - date/datetime/time objects to ISO format strings
    - Decimal and UUID objects to strings
    - sets and frozensets to lists
    """

    def default(self, obj: Any) -> Any:
        if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
            return {f.name: getattr(obj, f.name) for f in dataclasses.fields(obj)}
        if isinstance(obj, Enum):
            return obj.value
        if isinstance(obj, (datetime, date, time)):
            return obj.isoformat()
        if isinstance(obj, (Decimal, UUID)):
            return str(obj)
        if isinstance(obj, (set, frozenset)):
            return list(obj)
        return super().default(obj)


class JSONCodec:
    """Decode request bodies to field maps and encode responses as JSON.

    Args:
        indent: Pretty-print responses with this indent (``None`` = compact).
    """

    __slots__ = ("indent",)

    content_type = JSON_CONTENT_TYPE

    def __init__(self, indent: int | None = None) -> None:
        self.indent = indent

    def decode(self, body: bytes, shape: Shape | None = None) -> dict[str, Any]:
        """Decode *body* into a field-name -> value map.

        An empty body decodes to ``{}``. Anything other than a JSON
        object raises ``MalformedBodyError``. Keys keep their spelling;
        the binder matches them case-insensitively. *shape* is accepted
        for codecs that decode per target type; this one ignores it.
        """
        if not body or not body.strip():
            return {}
        try:
            data = json.loads(body)
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise MalformedBodyError(f"Request body is not valid JSON: {exc}") from exc
        if not isinstance(data, dict):
            msg = f"Request body must be a JSON object, got {type(data).__name__}"
            raise MalformedBodyError(msg)
        return data

    def encode(self, value: Any) -> bytes:
        """Serialize *value* to UTF-8 JSON bytes."""
        return json.dumps(
            value,
            cls=WrenJSONEncoder,
            indent=self.indent,
            ensure_ascii=False,
        ).encode("utf-8")
