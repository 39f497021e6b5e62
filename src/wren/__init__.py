"""Wren: class-based JSON request handlers with typed binding.

Routes map an HTTP method and a path template to a handler class. The
request dataclass is filled from path variables, the query string and
the JSON body, and the route table doubles as an OpenAPI document.

Basic usage::

    from dataclasses import dataclass

    from wren import App

    app = App()

    @app.get("/api/news/{topic}")
    class GetNews:
        @dataclass
        class Request:
            topic: str = ""
            limit: int = 10

        @dataclass
        class Response:
            news: list[str]

        def handle(self, request: Request) -> Response:
            return self.Response(news=[f"{request.topic} 1"])

Serve ``app`` with any ASGI server; ``GET /swagger.json`` returns the
OpenAPI document.
"""

__version__ = "0.1.0"
__all__ = [
    "App",
    "AppConfig",
    "BindingError",
    "ClassFactory",
    "ConfigurationError",
    "DispatchResult",
    "Dispatcher",
    "HTTPError",
    "InvalidPatternError",
    "Lifetime",
    "MalformedBodyError",
    "MethodNotAllowed",
    "NotFound",
    "RouteRegistry",
    "SchemaGenerator",
    "UNHANDLED",
    "UnknownMethodError",
    "WrenError",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import wren`` fast while providing a clean top-level API.
    """
    if name == "App":
        from wren.app import App

        return App

    if name == "AppConfig":
        from wren.config import AppConfig

        return AppConfig

    if name in ("DispatchResult", "Dispatcher", "UNHANDLED"):
        from wren import dispatcher as _dispatch

        return getattr(_dispatch, name)

    if name in ("ClassFactory", "Lifetime"):
        from wren import factory as _factory

        return getattr(_factory, name)

    if name == "RouteRegistry":
        from wren.routing.registry import RouteRegistry

        return RouteRegistry

    if name == "SchemaGenerator":
        from wren.schema import SchemaGenerator

        return SchemaGenerator

    if name in (
        "BindingError",
        "ConfigurationError",
        "HTTPError",
        "InvalidPatternError",
        "MalformedBodyError",
        "MethodNotAllowed",
        "NotFound",
        "UnknownMethodError",
        "WrenError",
    ):
        from wren import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
