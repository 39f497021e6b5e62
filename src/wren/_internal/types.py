"""Shared type aliases used across wren modules."""

from collections.abc import Callable
from typing import Any, TypeAlias

# Handler identity: opaque token handed to the handler factory
HandlerIdentity: TypeAlias = Any

# Handler class: provides ``handle(request)``, may nest Request/Response
HandlerClass: TypeAlias = type

# Provider: zero-argument callable building one handler instance
Provider: TypeAlias = Callable[[], Any]
