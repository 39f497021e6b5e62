"""Wren exception hierarchy.

Shared across the registry, matcher, binder, dispatcher and ASGI layer so
every module raises and catches the same types.

"No route matched" is not an exception: the matcher returns ``None`` and
the dispatcher returns ``UNHANDLED`` so callers can fall through.
"""

from dataclasses import dataclass
from typing import Any


class WrenError(Exception):
    """Base for all wren-specific errors."""


class ConfigurationError(WrenError):
    """Raised when app setup is invalid.

    Surfaces at registration or freeze time and aborts startup.
    """


class InvalidPatternError(ConfigurationError):
    """A route template could not be parsed.

    Raised by ``parse_pattern()`` for an empty variable segment (``{}``)
    or a variable name that repeats within the same template.
    """

    def __init__(self, template: str, reason: str) -> None:
        self.template = template
        self.reason = reason
        super().__init__(f"Invalid route template {template!r}: {reason}")


class UnknownMethodError(WrenError, ValueError):
    """An HTTP method token is not one of the supported methods."""

    def __init__(self, method: str) -> None:
        self.method = method
        super().__init__(f"Unknown HTTP method: {method!r}")


@dataclass(frozen=True, slots=True)
class HTTPError(WrenError):
    """An error that maps directly to an HTTP status code.

    Raised while handling a single request. The dispatcher and the ASGI
    layer turn these into JSON error responses; they never bring down
    the serving process.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready error body."""
        return {"error": {"status": self.status, "detail": self.detail}}


class BindingError(HTTPError):
    """400 — a request value is present but cannot be coerced to its field type."""

    field: str
    raw_value: Any
    target_type: Any

    def __init__(self, field: str, raw_value: Any, target_type: Any) -> None:
        type_name = getattr(target_type, "__name__", str(target_type))
        super().__init__(
            status=400,
            detail=f"Cannot convert {raw_value!r} to {type_name} for field {field!r}",
        )
        # Frozen dataclass base: bypass __setattr__ for the extra attributes
        object.__setattr__(self, "field", field)
        object.__setattr__(self, "raw_value", raw_value)
        object.__setattr__(self, "target_type", target_type)

    def to_dict(self) -> dict[str, Any]:
        body = HTTPError.to_dict(self)
        body["error"]["field"] = self.field
        return body


class MalformedBodyError(HTTPError):
    """400 — the request body could not be decoded into a field map."""

    def __init__(self, detail: str = "Malformed request body") -> None:
        super().__init__(status=400, detail=detail)


class NotFound(HTTPError):  # noqa: N818
    """404 — no route matched and no fallback app was configured."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class MethodNotAllowed(HTTPError):  # noqa: N818
    """405 — the request used a method token wren does not support."""

    def __init__(self, method: str, detail: str = "") -> None:
        super().__init__(
            status=405,
            detail=detail or f"Method not allowed: {method}",
        )
