"""Request/response shapes and handler descriptors.

A ``Shape`` is the ordered field list of a dataclass, computed once at
registration time. The binder and the schema generator both walk shapes
instead of reflecting on types for every request.

Usage::

    @dataclass
    class Request:
        user_name: str = ""
        active: bool = False

    shape = Shape.from_type(Request)
    [f.name for f in shape.fields]   # ["user_name", "active"]
    shape.build({"user_name": "ada"})  # Request(user_name="ada", active=False)
"""

from __future__ import annotations

import dataclasses
import types
import typing
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Literal

from wren.errors import ConfigurationError

Source = Literal["path", "query", "body"]

# Zero values for fields declared without a default
_ZERO_VALUES: dict[type, Any] = {
    bool: False,
    int: 0,
    float: 0.0,
    str: "",
}


def unwrap_optional(annotation: Any) -> tuple[Any, bool]:
    """Return ``(inner_type, is_optional)`` for ``X | None`` annotations."""
    origin = typing.get_origin(annotation)
    if origin is typing.Union or origin is types.UnionType:
        args = [a for a in typing.get_args(annotation) if a is not type(None)]
        if len(args) == 1:
            return args[0], True
    return annotation, False


@dataclass(frozen=True, slots=True)
class FieldSpec:
    """One bindable field of a shape.

    ``source`` is a documentation hint only. Binding precedence
    (path, then query, then body) never depends on it.
    """

    name: str
    type: Any
    default: Any = dataclasses.MISSING
    default_factory: Any = dataclasses.MISSING
    source: Source | None = None
    description: str | None = None

    @property
    def base_type(self) -> Any:
        """Declared type with ``| None`` stripped."""
        return unwrap_optional(self.type)[0]

    @property
    def optional(self) -> bool:
        return unwrap_optional(self.type)[1]

    @property
    def has_default(self) -> bool:
        return (
            self.default is not dataclasses.MISSING
            or self.default_factory is not dataclasses.MISSING
        )

    def zero(self) -> Any:
        """Value used when no source supplies this field."""
        if self.default is not dataclasses.MISSING:
            return self.default
        if self.default_factory is not dataclasses.MISSING:
            return self.default_factory()
        if self.optional:
            return None
        return _ZERO_VALUES.get(self.base_type)


@dataclass(frozen=True, slots=True)
class Shape:
    """Ordered field list of a request or response type."""

    type: type
    fields: tuple[FieldSpec, ...]

    @property
    def qualname(self) -> str:
        """Fully qualified name, e.g. ``myapp.news.UploadNews.Request``."""
        return f"{self.type.__module__}.{self.type.__qualname__}"

    def __len__(self) -> int:
        return len(self.fields)

    def field_names(self) -> tuple[str, ...]:
        return tuple(f.name for f in self.fields)

    @classmethod
    def from_type(cls, target: type) -> Shape:
        """Build a shape from a dataclass type.

        Field metadata may carry ``"source"`` and ``"description"`` keys::

            title: str = field(default="", metadata={"description": "Headline"})

        Raises ``ConfigurationError`` if *target* is not a dataclass type
        or its annotations cannot be resolved.
        """
        if not isinstance(target, type) or not dataclasses.is_dataclass(target):
            msg = f"{target!r} is not a dataclass type; request/response shapes must be dataclasses"
            raise ConfigurationError(msg)

        try:
            hints = typing.get_type_hints(target)
        except (NameError, TypeError) as exc:
            msg = f"Cannot resolve field types of {target.__qualname__}: {exc}"
            raise ConfigurationError(msg) from exc

        specs: list[FieldSpec] = []
        for f in dataclasses.fields(target):
            if not f.init:
                continue
            metadata: Mapping[str, Any] = f.metadata or {}
            specs.append(
                FieldSpec(
                    name=f.name,
                    type=hints.get(f.name, f.type),
                    default=f.default,
                    default_factory=f.default_factory,
                    source=metadata.get("source"),
                    description=metadata.get("description"),
                )
            )
        return cls(type=target, fields=tuple(specs))

    def build(self, values: Mapping[str, Any]) -> Any:
        """Instantiate the shape's type from a complete name -> value map."""
        return self.type(**values)


@dataclass(frozen=True, slots=True)
class HandlerDescriptor:
    """Everything the core needs to know about one handler.

    ``identity`` is opaque to routing and binding; only the handler
    factory interprets it. ``group`` is a cosmetic tag for the schema
    document and is never used for matching.
    """

    identity: Any
    request: Shape | None = None
    response: Shape | None = None
    group: str = "default"
    summary: str | None = None

    @property
    def name(self) -> str:
        return getattr(self.identity, "__qualname__", str(self.identity))

    @property
    def qualname(self) -> str:
        module = getattr(self.identity, "__module__", None)
        return f"{module}.{self.name}" if module else self.name

    @classmethod
    def for_handler(cls, handler_cls: type, *, group: str | None = None) -> HandlerDescriptor:
        """Describe a handler class with optional nested ``Request``/``Response``.

        The group defaults to the last component of the handler's module
        path, so ``myapp.users`` handlers are tagged ``users``.
        """
        if not callable(getattr(handler_cls, "handle", None)):
            msg = f"Handler {handler_cls.__qualname__} must define handle(self, request)"
            raise ConfigurationError(msg)

        request_type = getattr(handler_cls, "Request", None)
        response_type = getattr(handler_cls, "Response", None)

        return cls(
            identity=handler_cls,
            request=Shape.from_type(request_type) if request_type is not None else None,
            response=Shape.from_type(response_type) if response_type is not None else None,
            group=group or handler_cls.__module__.rsplit(".", 1)[-1] or "default",
            summary=_first_line(handler_cls.__doc__),
        )


def _first_line(doc: str | None) -> str | None:
    if not doc:
        return None
    for line in doc.strip().splitlines():
        if line.strip():
            return line.strip()
    return None
