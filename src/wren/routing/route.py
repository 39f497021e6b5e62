"""RouteEntry and MatchResult frozen dataclasses."""

from dataclasses import dataclass
from typing import Any

from wren._internal.variables import Variables
from wren.http.methods import HttpMethod
from wren.routing.pattern import PathPattern
from wren.shapes import HandlerDescriptor


@dataclass(frozen=True, slots=True)
class RouteEntry:
    """A registered route. Created during setup, never modified."""

    method: HttpMethod
    pattern: PathPattern
    descriptor: HandlerDescriptor

    @property
    def template(self) -> str:
        return self.pattern.template


@dataclass(frozen=True, slots=True)
class MatchResult:
    """Result of a successful route match.

    ``variables`` holds path variables overlaid with query parameters;
    lookups are case-insensitive.
    """

    entry: RouteEntry
    variables: Variables

    @property
    def descriptor(self) -> HandlerDescriptor:
        return self.entry.descriptor

    @property
    def identity(self) -> Any:
        return self.entry.descriptor.identity
