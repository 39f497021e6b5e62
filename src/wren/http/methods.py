"""HTTP method tokens.

The closed set of methods wren routes on, plus the subset that carries a
request body.
"""

from enum import StrEnum

from wren.errors import UnknownMethodError


class HttpMethod(StrEnum):
    """A supported HTTP method. Values are the canonical upper-case tokens."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"
    OPTIONS = "OPTIONS"
    HEAD = "HEAD"

    @property
    def carries_body(self) -> bool:
        """Whether body fields take part in binding for this method."""
        return self in BODY_METHODS


# Methods whose body is decoded and offered to the binder
BODY_METHODS: frozenset[HttpMethod] = frozenset({
    HttpMethod.POST,
    HttpMethod.PUT,
    HttpMethod.PATCH,
})

# Methods that never get a requestBody in the schema document
BODYLESS_SCHEMA_METHODS: frozenset[HttpMethod] = frozenset({
    HttpMethod.GET,
    HttpMethod.HEAD,
})


def parse_method(method: str | HttpMethod) -> HttpMethod:
    """Convert a method token to ``HttpMethod``, ignoring case.

    Raises ``UnknownMethodError`` for anything outside the supported set.
    """
    if isinstance(method, HttpMethod):
        return method
    try:
        return HttpMethod(method.strip().upper())
    except (ValueError, AttributeError) as exc:
        raise UnknownMethodError(str(method)) from exc
