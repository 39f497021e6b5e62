"""OpenAPI document generation from the route registry.

Walks the registered routes and their request/response shapes and emits an
OpenAPI 3.0.3 document as plain dicts. Independent of the dispatcher: the
same registry can be documented without ever serving a request.

Usage::

    generator = SchemaGenerator(title="News API", version="1.2.0")
    document = generator.generate(registry)
    document["paths"]["/api/news"]["get"]["tags"]   # ["news"]

Descriptions are optional. Pass a ``DocSource`` to pull them from
docstrings or from any mapping keyed by fully qualified member name;
members without documentation are simply left undescribed.
"""

import importlib
import inspect
from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from wren.codec import Codec, JSONCodec
from wren.http.methods import BODYLESS_SCHEMA_METHODS
from wren.routing.registry import RouteRegistry
from wren.routing.route import RouteEntry
from wren.shapes import FieldSpec, HandlerDescriptor, Shape, unwrap_optional

OPENAPI_VERSION = "3.0.3"
JSON_MEDIA_TYPE = "application/json"

# Python type -> OpenAPI type. Everything else is "object".
_TYPE_NAMES: dict[type, str] = {
    bool: "boolean",
    int: "integer",
    float: "number",
    str: "string",
}


def openapi_type(annotation: Any) -> str:
    """Map a field annotation to the OpenAPI type vocabulary."""
    inner, _ = unwrap_optional(annotation)
    return _TYPE_NAMES.get(inner, "object")


# ---------------------------------------------------------------------------
# Documentation sources
# ---------------------------------------------------------------------------


@runtime_checkable
class DocSource(Protocol):
    """Looks up human-readable text by fully qualified member name."""

    def describe(self, qualified_name: str) -> str | None: ...


class MappingDocSource:
    """Documentation held in a plain mapping.

    Usage::

        docs = MappingDocSource({"myapp.news.GetNews": "Latest headlines."})
    """

    __slots__ = ("_docs",)

    def __init__(self, docs: Mapping[str, str]) -> None:
        self._docs = dict(docs)

    def describe(self, qualified_name: str) -> str | None:
        return self._docs.get(qualified_name)


class DocstringSource:
    """Documentation pulled from the code itself.

    Classes are described by their own docstring (dataclass-generated
    signatures are ignored). Dataclass fields are described by
    ``metadata={"description": ...}``.
    """

    __slots__ = ()

    def describe(self, qualified_name: str) -> str | None:
        parts = qualified_name.split(".")
        for split in range(len(parts) - 1, 0, -1):
            try:
                module = importlib.import_module(".".join(parts[:split]))
            except ImportError:
                continue
            return _describe_member(module, parts[split:])
        return None


def _describe_member(owner: Any, path: list[str]) -> str | None:
    for index, name in enumerate(path):
        if index == len(path) - 1 and _is_field(owner, name):
            return owner.__dataclass_fields__[name].metadata.get("description")
        owner = getattr(owner, name, None)
        if owner is None:
            return None

    # Plain values (field defaults, constants) would report their type's doc
    if not (inspect.isclass(owner) or inspect.isroutine(owner) or inspect.ismodule(owner)):
        return None
    doc = getattr(owner, "__doc__", None)
    if not doc or (inspect.isclass(owner) and doc.startswith(f"{owner.__name__}(")):
        return None
    return inspect.cleandoc(doc)


def _is_field(owner: Any, name: str) -> bool:
    return inspect.isclass(owner) and name in getattr(owner, "__dataclass_fields__", {})


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------


class SchemaGenerator:
    """Generates OpenAPI 3.0 documents from a ``RouteRegistry``.

    Args:
        title: ``info.title`` of the document.
        version: ``info.version`` of the document.
        docs: Optional source of descriptions.
    """

    __slots__ = ("docs", "title", "version")

    def __init__(
        self,
        title: str = "API",
        version: str = "1.0.0",
        docs: DocSource | None = None,
    ) -> None:
        self.title = title
        self.version = version
        self.docs = docs

    def generate(self, registry: RouteRegistry) -> dict[str, Any]:
        """Build the document.

        One path item per distinct template, keyed by the original
        template string; one operation per method registered against it.
        When a template/method pair is registered twice the first entry
        is documented, matching routing.
        """
        paths: dict[str, dict[str, Any]] = {}
        tags: dict[str, None] = {}

        for entry in registry:
            path_item = paths.setdefault(entry.template, {})
            key = entry.method.lower()
            if key in path_item:
                continue
            path_item[key] = self._operation(entry)
            tags.setdefault(entry.descriptor.group)

        return {
            "openapi": OPENAPI_VERSION,
            "info": {"title": self.title, "version": self.version},
            "tags": [{"name": name} for name in tags],
            "paths": paths,
        }

    def to_json(self, document: Mapping[str, Any], codec: Codec | None = None) -> bytes:
        """Serialize *document* with *codec* (pretty-printed JSON by default)."""
        return (codec or JSONCodec(indent=2)).encode(document)

    # -- Operations --

    def _operation(self, entry: RouteEntry) -> dict[str, Any]:
        descriptor = entry.descriptor
        operation: dict[str, Any] = {"tags": [descriptor.group]}

        if descriptor.summary:
            operation["summary"] = descriptor.summary
        description = self._describe(descriptor.qualname)
        if description and description != descriptor.summary:
            operation["description"] = description

        parameters = self._parameters(entry)
        if parameters:
            operation["parameters"] = parameters

        if descriptor.request is not None and entry.method not in BODYLESS_SCHEMA_METHODS:
            operation["requestBody"] = {
                "content": {JSON_MEDIA_TYPE: {"schema": self.shape_schema(descriptor.request)}},
            }

        operation["responses"] = self._responses(descriptor)
        return operation

    def _parameters(self, entry: RouteEntry) -> list[dict[str, Any]]:
        """Path variables always; query parameters for bodyless operations.

        Fields hinted ``source="query"`` are listed as query parameters
        for every method.
        """
        request = entry.descriptor.request
        by_name: dict[str, FieldSpec] = {}
        if request is not None:
            by_name = {spec.name.casefold(): spec for spec in request.fields}

        parameters: list[dict[str, Any]] = []
        path_names: set[str] = set()
        for name in entry.pattern.variable_names:
            path_names.add(name.casefold())
            spec = by_name.get(name.casefold())
            parameters.append(
                self._parameter(name, "path", spec, required=True, shape=request)
            )

        if request is None:
            return parameters

        bodyless = entry.method in BODYLESS_SCHEMA_METHODS
        for spec in request.fields:
            if spec.name.casefold() in path_names:
                continue
            if bodyless or spec.source == "query":
                parameters.append(
                    self._parameter(spec.name, "query", spec, required=False, shape=request)
                )
        return parameters

    def _parameter(
        self,
        name: str,
        location: str,
        spec: FieldSpec | None,
        *,
        required: bool,
        shape: Shape | None,
    ) -> dict[str, Any]:
        parameter: dict[str, Any] = {
            "name": name,
            "in": location,
            "required": required,
            "schema": {"type": openapi_type(spec.type) if spec is not None else "string"},
        }
        if spec is not None and shape is not None:
            description = self._field_description(shape, spec)
            if description:
                parameter["description"] = description
        return parameter

    def _responses(self, descriptor: HandlerDescriptor) -> dict[str, Any]:
        success: dict[str, Any] = {"description": "Success"}
        if descriptor.response is not None:
            success["content"] = {
                JSON_MEDIA_TYPE: {"schema": self.shape_schema(descriptor.response)},
            }
        responses: dict[str, Any] = {"200": success}
        if descriptor.request is not None and len(descriptor.request) > 0:
            responses["400"] = {"description": "Request value could not be bound"}
        return responses

    # -- Schemas --

    def shape_schema(self, shape: Shape) -> dict[str, Any]:
        """Object schema with one property per field, in declaration order."""
        properties: dict[str, Any] = {}
        for spec in shape.fields:
            prop: dict[str, Any] = {"type": openapi_type(spec.type)}
            if spec.optional:
                prop["nullable"] = True
            description = self._field_description(shape, spec)
            if description:
                prop["description"] = description
            properties[spec.name] = prop

        schema: dict[str, Any] = {"type": "object", "properties": properties}
        description = self._describe(shape.qualname)
        if description:
            schema["description"] = description
        return schema

    def _field_description(self, shape: Shape, spec: FieldSpec) -> str | None:
        if spec.description:
            return spec.description
        return self._describe(f"{shape.qualname}.{spec.name}")

    def _describe(self, qualified_name: str) -> str | None:
        if self.docs is None:
            return None
        return self.docs.describe(qualified_name)
