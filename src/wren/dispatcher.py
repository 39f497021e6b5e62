"""Dispatcher — match, instantiate, bind, invoke, serialize.

Pure orchestration over already-available data: no I/O, no per-request
global state. The caller reads the body and writes the response.
"""

import logging
from dataclasses import dataclass
from collections.abc import Sequence
from typing import Any, Final

from wren._internal.variables import Variables
from wren.binding import bind_request
from wren.codec import JSON_CONTENT_TYPE, Codec, JSONCodec
from wren.errors import HTTPError
from wren.factory import ClassFactory, HandlerFactory
from wren.http.methods import HttpMethod, parse_method
from wren.routing.matcher import RouteMatcher, parse_query, split_target
from wren.routing.registry import RouteRegistry
from wren.routing.route import MatchResult

logger = logging.getLogger("wren.dispatch")


class _Unhandled:
    """Sentinel type for "no route matched"."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "UNHANDLED"

    def __bool__(self) -> bool:
        return False


UNHANDLED: Final = _Unhandled()


@dataclass(frozen=True, slots=True)
class DispatchResult:
    """A serialized response ready for the host to send."""

    body: bytes
    status: int = 200
    content_type: str = JSON_CONTENT_TYPE


class Dispatcher:
    """Dispatches requests to handlers registered in a ``RouteRegistry``.

    Usage::

        dispatcher = Dispatcher(registry, ClassFactory())
        result = dispatcher.dispatch("POST", "/api/news/upload", b'{"title": "Hi"}')
        if result is UNHANDLED:
            ...  # host falls through (404, next app, ...)

    Constructing a dispatcher freezes the registry.
    """

    __slots__ = ("codec", "factory", "matcher")

    def __init__(
        self,
        registry: RouteRegistry,
        factory: HandlerFactory | None = None,
        codec: Codec | None = None,
    ) -> None:
        self.matcher = RouteMatcher(registry)
        self.factory: HandlerFactory = factory or ClassFactory()
        self.codec: Codec = codec or JSONCodec()

    def dispatch(
        self,
        method: str | HttpMethod,
        raw_path: str,
        raw_body: bytes = b"",
    ) -> DispatchResult | _Unhandled:
        """Process one request.

        Returns ``UNHANDLED`` when no route matches. Client errors
        (binding failures, undecodable bodies) end only this request and
        come back as a JSON error ``DispatchResult``. Anything the
        handler raises propagates to the caller.

        Raises ``UnknownMethodError`` for an unsupported method token.
        """
        path, query_string = split_target(raw_path)
        return self.dispatch_parts(method, path.split("/"), query_string, raw_body)

    def dispatch_parts(
        self,
        method: str | HttpMethod,
        parts: Sequence[str],
        query_string: str | None = None,
        raw_body: bytes = b"",
    ) -> DispatchResult | _Unhandled:
        """``dispatch()`` for a path the host has already split into segments."""
        verb = parse_method(method)
        match = self.matcher.match_parts(verb, parts, query_string)
        if match is None:
            return UNHANDLED

        try:
            return self._handle(verb, match, query_string, raw_body)
        except HTTPError as exc:
            logger.warning("%s %s rejected: %s", verb, "/".join(parts), exc)
            return DispatchResult(
                body=self.codec.encode(exc.to_dict()),
                status=exc.status,
                content_type=self.codec.content_type,
            )

    def _handle(
        self,
        verb: HttpMethod,
        match: MatchResult,
        query_string: str | None,
        raw_body: bytes,
    ) -> DispatchResult:
        descriptor = match.descriptor
        handler = self.factory.instantiate(descriptor.identity)

        body_vars: dict[str, Any] = {}
        shape = descriptor.request
        if shape is not None and len(shape) > 0 and verb.carries_body:
            body_vars = self.codec.decode(raw_body, shape)

        request = bind_request(
            descriptor,
            verb,
            match.variables,
            Variables(parse_query(query_string)),
            body_vars,
        )

        response = handler.handle(request)
        return DispatchResult(
            body=self.codec.encode(response),
            content_type=self.codec.content_type,
        )
