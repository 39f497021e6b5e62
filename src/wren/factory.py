"""Handler factories — turn a handler identity into a handler instance.

The dispatcher only needs ``instantiate(identity)``; how instances are
built and how long they live is the factory's business.
"""

import threading
from collections.abc import Callable, Mapping
from enum import Enum
from typing import Any, Protocol, runtime_checkable

from wren._internal.types import HandlerIdentity, Provider
from wren.errors import ConfigurationError


@runtime_checkable
class Handler(Protocol):
    """A request handler: one synchronous call, one return value."""

    def handle(self, request: Any) -> Any: ...


@runtime_checkable
class HandlerFactory(Protocol):
    """Structural interface the dispatcher needs to obtain handlers."""

    def instantiate(self, identity: HandlerIdentity) -> Handler: ...


class Lifetime(Enum):
    """How long a handler instance lives."""

    TRANSIENT = "transient"  # a new instance per request
    SHARED = "shared"  # one instance per handler class for the process


class ClassFactory:
    """Builds handlers by calling the identity (a class) with no arguments.

    Usage::

        factory = ClassFactory(Lifetime.SHARED, providers={GetNews: lambda: GetNews(repo)})
        handler = factory.instantiate(GetNews)

    Providers override construction for specific classes, which is how
    handlers with constructor dependencies are wired up.

    Thread safety:
        ``SHARED`` instances are created under a lock with a double check,
        so concurrent first requests still build exactly one instance.
    """

    __slots__ = ("_instances", "_lock", "_providers", "lifetime")

    def __init__(
        self,
        lifetime: Lifetime = Lifetime.TRANSIENT,
        providers: Mapping[HandlerIdentity, Provider] | None = None,
    ) -> None:
        self.lifetime = lifetime
        self._providers: dict[HandlerIdentity, Provider] = dict(providers or {})
        self._instances: dict[HandlerIdentity, Handler] = {}
        self._lock = threading.Lock()

    def provide(self, identity: HandlerIdentity, provider: Provider) -> None:
        """Register a zero-argument callable that builds *identity*."""
        self._providers[identity] = provider

    def instantiate(self, identity: HandlerIdentity) -> Handler:
        if self.lifetime is Lifetime.TRANSIENT:
            return self._build(identity)

        instance = self._instances.get(identity)
        if instance is not None:
            return instance
        with self._lock:
            instance = self._instances.get(identity)
            if instance is None:
                instance = self._build(identity)
                self._instances[identity] = instance
        return instance

    def _build(self, identity: HandlerIdentity) -> Handler:
        builder: Callable[[], Any] | None = self._providers.get(identity)
        if builder is None:
            if not callable(identity):
                msg = f"No provider registered for handler identity {identity!r}"
                raise ConfigurationError(msg)
            builder = identity
        return builder()
