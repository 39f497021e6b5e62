"""Wren application class.

Mutable during setup (route registration, lifecycle hooks).
Frozen at runtime when ``__call__()`` is first invoked.
"""

import inspect
import logging
import threading
from collections.abc import Callable
from typing import Any

from wren._internal.asgi import ASGIApp, Receive, Scope, Send
from wren._internal.types import HandlerClass
from wren.codec import JSONCodec
from wren.config import AppConfig
from wren.dispatcher import Dispatcher
from wren.factory import ClassFactory, HandlerFactory
from wren.http.methods import HttpMethod
from wren.routing.registry import RouteRegistry
from wren.routing.route import RouteEntry
from wren.schema import DocSource, DocstringSource, SchemaGenerator
from wren.server.handler import handle_request
from wren.shapes import HandlerDescriptor

logger = logging.getLogger("wren")


class App:
    """The wren application.

    Handlers are classes with a ``handle(self, request)`` method and
    optional nested ``Request``/``Response`` dataclasses::

        app = App()

        @app.post("/api/user/create")
        class CreateUser:
            @dataclass
            class Request:
                UserName: str = ""
                Password: str = ""

            @dataclass
            class Response:
                Success: bool = False

            def handle(self, request: Request) -> Response:
                return self.Response(Success=True)

    Routes are registered straight into the ``RouteRegistry``, so a
    malformed template fails at import time rather than being skipped.

    Thread safety:
        The setup phase is single-threaded (decorators at import time).
        The freeze transition uses a Lock + double-check to ensure exactly
        one thread builds the dispatcher, even when several ASGI workers
        call ``__call__()`` concurrently on the first request.
    """

    __slots__ = (
        "_descriptors",
        "_dispatcher",
        "_docs",
        "_fallback",
        "_factory",
        "_freeze_lock",
        "_frozen",
        "_registry",
        "_schema",
        "_schema_json",
        "_shutdown_hooks",
        "_startup_hooks",
        "config",
    )

    def __init__(
        self,
        config: AppConfig | None = None,
        *,
        factory: HandlerFactory | None = None,
        fallback: ASGIApp | None = None,
        docs: DocSource | None = None,
    ) -> None:
        self.config: AppConfig = config or AppConfig()
        self._registry = RouteRegistry()
        self._descriptors: dict[tuple[HandlerClass, str | None], HandlerDescriptor] = {}
        self._factory: HandlerFactory = factory or ClassFactory()
        self._fallback = fallback
        self._docs: DocSource = docs or DocstringSource()
        self._startup_hooks: list[Callable[..., Any]] = []
        self._shutdown_hooks: list[Callable[..., Any]] = []
        self._frozen: bool = False
        self._freeze_lock: threading.Lock = threading.Lock()

        # Compiled state, set during _freeze()
        self._dispatcher: Dispatcher | None = None
        self._schema: dict[str, Any] | None = None
        self._schema_json: bytes | None = None

    # -- Route registration --

    def route(
        self,
        path: str,
        *,
        methods: list[str] | None = None,
        group: str | None = None,
    ) -> Callable[[HandlerClass], HandlerClass]:
        """Register a handler class via decorator.

        Args:
            path: Route template. Use ``{name}`` for path variables.
            methods: HTTP methods. Defaults to ``["GET"]``.
            group: Tag for the schema document. Defaults to the last
                component of the handler's module path.
        """

        def decorator(handler_cls: HandlerClass) -> HandlerClass:
            for method in methods or ["GET"]:
                self.add(method, path, handler_cls, group=group)
            return handler_cls

        return decorator

    def get(self, path: str, *, group: str | None = None) -> Callable[[HandlerClass], HandlerClass]:
        return self.route(path, methods=[HttpMethod.GET], group=group)

    def post(self, path: str, *, group: str | None = None) -> Callable[[HandlerClass], HandlerClass]:
        return self.route(path, methods=[HttpMethod.POST], group=group)

    def put(self, path: str, *, group: str | None = None) -> Callable[[HandlerClass], HandlerClass]:
        return self.route(path, methods=[HttpMethod.PUT], group=group)

    def delete(self, path: str, *, group: str | None = None) -> Callable[[HandlerClass], HandlerClass]:
        return self.route(path, methods=[HttpMethod.DELETE], group=group)

    def patch(self, path: str, *, group: str | None = None) -> Callable[[HandlerClass], HandlerClass]:
        return self.route(path, methods=[HttpMethod.PATCH], group=group)

    def options(self, path: str, *, group: str | None = None) -> Callable[[HandlerClass], HandlerClass]:
        return self.route(path, methods=[HttpMethod.OPTIONS], group=group)

    def head(self, path: str, *, group: str | None = None) -> Callable[[HandlerClass], HandlerClass]:
        return self.route(path, methods=[HttpMethod.HEAD], group=group)

    def add(
        self,
        method: str | HttpMethod,
        path: str,
        handler_cls: HandlerClass,
        *,
        group: str | None = None,
    ) -> RouteEntry:
        """Register *handler_cls* for *method* and *path* without a decorator."""
        self._check_not_frozen()
        key = (handler_cls, group)
        descriptor = self._descriptors.get(key)
        if descriptor is None:
            descriptor = HandlerDescriptor.for_handler(handler_cls, group=group)
            self._descriptors[key] = descriptor
        return self._registry.register(method, path, descriptor)

    # -- Lifecycle hooks --

    def on_startup(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register a function to run once when the ASGI server starts."""
        self._check_not_frozen()
        self._startup_hooks.append(func)
        return func

    def on_shutdown(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register a function to run once when the ASGI server stops."""
        self._check_not_frozen()
        self._shutdown_hooks.append(func)
        return func

    # -- Introspection --

    @property
    def registry(self) -> RouteRegistry:
        """The route registry. Read-only once the app is frozen."""
        return self._registry

    @property
    def dispatcher(self) -> Dispatcher:
        """The frozen dispatcher. Freezes the app on first access."""
        self._ensure_frozen()
        assert self._dispatcher is not None
        return self._dispatcher

    def schema(self) -> dict[str, Any]:
        """Return the OpenAPI document for every registered route."""
        self._ensure_frozen()
        if self._schema is None:
            self._schema = self._schema_generator().generate(self._registry)
        return self._schema

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point.

        Handles lifespan scopes directly, then delegates HTTP scopes to
        the request handler pipeline. Other scope types (websocket) go to
        the fallback app when one is configured.
        """
        if scope["type"] == "lifespan":
            await self._handle_lifespan(scope, receive, send)
            return

        self._ensure_frozen()

        if scope["type"] != "http":
            if self._fallback is not None:
                await self._fallback(scope, receive, send)
            return

        assert self._dispatcher is not None

        await handle_request(
            scope,
            receive,
            send,
            dispatcher=self._dispatcher,
            schema_path=self.config.schema_path,
            schema_body=self._schema_json,
            fallback=self._fallback,
            max_content_length=self.config.max_content_length,
            debug=self.config.debug,
        )

    async def _handle_lifespan(
        self,
        scope: Scope,
        receive: Receive,
        send: Send,
    ) -> None:
        """Run the ASGI lifespan protocol.

        Freezes the app at startup (before first HTTP request), then
        runs registered startup/shutdown hooks and signals completion
        back to the server.
        """
        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                try:
                    self._ensure_frozen()
                    for hook in self._startup_hooks:
                        result = hook()
                        if inspect.isawaitable(result):
                            await result
                    await send({"type": "lifespan.startup.complete"})
                except Exception as exc:
                    logger.exception("Startup failed")
                    await send(
                        {
                            "type": "lifespan.startup.failed",
                            "message": str(exc),
                        }
                    )
                    return

            elif msg_type == "lifespan.shutdown":
                for hook in self._shutdown_hooks:
                    result = hook()
                    if inspect.isawaitable(result):
                        await result
                await send({"type": "lifespan.shutdown.complete"})
                return

    # -- Internal --

    def _schema_generator(self) -> SchemaGenerator:
        return SchemaGenerator(
            title=self.config.title,
            version=self.config.version,
            docs=self._docs,
        )

    def _ensure_frozen(self) -> None:
        """Thread-safe freeze with double-check locking."""
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._freeze()

    def _freeze(self) -> None:
        """Compile the app into its frozen runtime state.

        MUST only be called while holding _freeze_lock.
        """
        if self.config.debug:
            logging.getLogger("wren").setLevel(self.config.log_level.upper())

        # 1. Close registration and build the dispatcher
        self._dispatcher = Dispatcher(
            self._registry,
            self._factory,
            JSONCodec(indent=self.config.json_indent),
        )

        # 2. Generate the schema document up front so shape errors
        #    surface at startup, not on the first docs request
        if self.config.schema_path is not None:
            generator = self._schema_generator()
            self._schema = generator.generate(self._registry)
            self._schema_json = generator.to_json(self._schema)

        self._frozen = True
        logger.debug("Frozen with %d routes", len(self._registry))

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the app after it has started serving requests. "
                "Register routes and hooks before the first request."
            )
            raise RuntimeError(msg)
