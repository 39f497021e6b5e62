"""Route registry — ordered, build-once, read-many.

Entries are appended during a single-threaded setup phase and frozen before
any request is matched. Registration order is significant: the matcher
returns the first structural match.
"""

import logging
from collections.abc import Iterator

from wren.http.methods import HttpMethod, parse_method
from wren.routing.pattern import parse_pattern
from wren.routing.route import RouteEntry
from wren.shapes import HandlerDescriptor

logger = logging.getLogger("wren.routing")


class RouteRegistry:
    """Ordered collection of ``RouteEntry``.

    Usage::

        registry = RouteRegistry()
        registry.register("GET", "/api/news", descriptor)
        registry.freeze()

    No uniqueness check is made: duplicate or overlapping templates are
    allowed and the first registered entry wins when matching.
    """

    __slots__ = ("_entries", "_frozen")

    def __init__(self) -> None:
        self._entries: list[RouteEntry] = []
        self._frozen = False

    def register(
        self,
        method: str | HttpMethod,
        template: str,
        descriptor: HandlerDescriptor,
    ) -> RouteEntry:
        """Parse *template* and append a new entry.

        Raises ``UnknownMethodError`` for an unsupported method token,
        ``InvalidPatternError`` for a malformed template, and
        ``RuntimeError`` once the registry is frozen.
        """
        if self._frozen:
            msg = (
                "Cannot register routes after the registry has been frozen. "
                "Register every route before serving begins."
            )
            raise RuntimeError(msg)

        entry = RouteEntry(
            method=parse_method(method),
            pattern=parse_pattern(template),
            descriptor=descriptor,
        )
        self._entries.append(entry)
        logger.debug("Registered %s %s -> %s", entry.method, template, descriptor.name)
        return entry

    def freeze(self) -> None:
        """End the registration phase. Idempotent."""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def entries(self) -> tuple[RouteEntry, ...]:
        """All entries in registration order."""
        return tuple(self._entries)

    def templates(self) -> list[str]:
        """Distinct templates in first-registration order."""
        return list(dict.fromkeys(entry.template for entry in self._entries))

    def __iter__(self) -> Iterator[RouteEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        state = "frozen" if self._frozen else "open"
        return f"RouteRegistry({len(self._entries)} routes, {state})"
