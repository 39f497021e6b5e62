"""Route matcher — first structural match in registration order.

Matching is a linear scan over the frozen registry. Route tables are
startup-sized, so the scan is cheap; a trie or radix tree is the natural
upgrade for very large tables, but it must keep returning the first
matching entry in registration order.
"""

from collections.abc import Sequence
from urllib.parse import unquote

from wren._internal.variables import Variables
from wren.http.methods import HttpMethod, parse_method
from wren.routing.registry import RouteRegistry
from wren.routing.route import MatchResult, RouteEntry


def split_target(raw_path: str) -> tuple[str, str | None]:
    """Split a request target on the first ``?`` into path and query string."""
    path, sep, query_string = raw_path.partition("?")
    return path, (query_string if sep else None)


def parse_query(query_string: str | None) -> list[tuple[str, str]]:
    """Parse ``key=value`` pairs joined by ``&``.

    Only pairs that split into exactly two parts on ``=`` are kept, so
    ``flag`` and ``a=b=c`` are ignored. Values are percent-decoded; keys
    and ``+`` are left as-is.
    """
    if not query_string:
        return []

    pairs: list[tuple[str, str]] = []
    for parameter in query_string.split("&"):
        parts = parameter.split("=")
        if len(parts) == 2:
            pairs.append((parts[0], unquote(parts[1])))
    return pairs


class RouteMatcher:
    """Matches ``(method, raw_path)`` against a frozen ``RouteRegistry``.

    Usage::

        matcher = RouteMatcher(registry)
        result = matcher.match("GET", "/api/sports?page=2")
        if result is None:
            ...  # no route: fall through to the host's own handling
        result.variables["topic"]  # "sports"

    Creating a matcher freezes the registry: registration must finish
    before matching starts.
    """

    __slots__ = ("_entries",)

    def __init__(self, registry: RouteRegistry) -> None:
        registry.freeze()
        self._entries: tuple[RouteEntry, ...] = registry.entries

    def match(self, method: str | HttpMethod, raw_path: str) -> MatchResult | None:
        """Return the first entry matching *method* and *raw_path*, or ``None``.

        The variables map is seeded from captured path variables, then
        query parameters are merged over it. A query key therefore
        overrides a path variable of the same name: ``/item/{id}``
        matched against ``/item/5?id=9`` yields ``id == "9"``. The binder
        reads its path source from this merged map.

        Raises ``UnknownMethodError`` for an unsupported method token.
        """
        path, query_string = split_target(raw_path)
        return self.match_parts(method, path.split("/"), query_string)

    def match_parts(
        self,
        method: str | HttpMethod,
        parts: Sequence[str],
        query_string: str | None = None,
    ) -> MatchResult | None:
        """Match already-split path *parts*.

        Hosts that decode each segment themselves use this form, so a
        decoded ``?`` or ``/`` inside a segment stays part of that segment.
        """
        verb = parse_method(method)

        for entry in self._entries:
            if entry.method is not verb:
                continue
            captured = entry.pattern.match_segments(parts)
            if captured is None:
                continue

            variables = Variables(captured)
            if query_string is not None:
                variables = variables.merged(parse_query(query_string))
            return MatchResult(entry=entry, variables=variables)

        return None
