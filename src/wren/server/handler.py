"""ASGI handler — translates ASGI scope/messages to dispatcher calls.

The only component that touches raw ASGI for HTTP requests. Serves the
schema document, reads the request body, hands the request to the
``Dispatcher`` and sends the serialized result. Requests no route claims
fall through to a wrapped ASGI app, or get a JSON 404.
"""

import logging
from typing import Any
from urllib.parse import quote_from_bytes, unquote_to_bytes

from wren._internal.asgi import ASGIApp, Receive, Scope, Send
from wren.codec import Codec
from wren.dispatcher import UNHANDLED, Dispatcher
from wren.errors import HTTPError, MethodNotAllowed, NotFound, UnknownMethodError
from wren.http.methods import HttpMethod, parse_method
from wren.server.sender import send_response

logger = logging.getLogger("wren.server")

# Bytes left as-is when re-encoding a raw query string; everything else
# (notably raw non-ASCII bytes) becomes %XX
_QUERY_SAFE = "!$&'()*+,;=:@/?%[]~"


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    dispatcher: Dispatcher,
    schema_path: str | None = None,
    schema_body: bytes | None = None,
    fallback: ASGIApp | None = None,
    max_content_length: int,
    debug: bool,
) -> None:
    """Process a single HTTP request through the full pipeline."""
    if scope["type"] != "http":
        return

    codec = dispatcher.codec
    path: str = scope["path"]
    parts = path_segments(scope)
    query_string = query_text(scope)
    target = f"{path}?{query_string}" if query_string else path

    try:
        verb = parse_method(scope["method"])
    except UnknownMethodError:
        if fallback is not None:
            await fallback(scope, receive, send)
            return
        await _send_error(send, MethodNotAllowed(scope["method"]), codec)
        return

    if (
        schema_path is not None
        and schema_body is not None
        and verb in (HttpMethod.GET, HttpMethod.HEAD)
        and path == schema_path
    ):
        await send_response(
            send,
            status=200,
            body=schema_body,
            content_type=codec.content_type,
            head=verb is HttpMethod.HEAD,
        )
        return

    body = b""
    try:
        if verb.carries_body:
            body = await read_body(receive, max_content_length)
        result = dispatcher.dispatch_parts(verb, parts, query_string or None, body)
    except HTTPError as exc:
        logger.warning("%s %s rejected: %s", verb, target, exc)
        await _send_error(send, exc, codec)
        return
    except Exception as exc:
        logger.exception("Unhandled error while dispatching %s %s", verb, target)
        await _send_internal_error(send, exc, codec, debug=debug)
        return

    if result is UNHANDLED:
        if fallback is not None:
            replayed = _replay(body, receive) if verb.carries_body else receive
            await fallback(scope, replayed, send)
            return
        await _send_error(send, NotFound(f"No route matches {verb} {path}"), codec)
        return

    await send_response(
        send,
        status=result.status,
        body=result.body,
        content_type=result.content_type,
        head=verb is HttpMethod.HEAD,
    )


def path_segments(scope: Scope) -> list[str]:
    """Split the request path on ``/`` and decode each segment on its own.

    Built from ``raw_path`` when the server provides it, so an encoded
    ``%2F`` or ``%3F`` stays inside its segment. Segments decode as UTF-8.
    """
    raw_path: bytes | None = scope.get("raw_path")
    if raw_path is None:
        return scope["path"].split("/")
    raw_path = raw_path.partition(b"?")[0]
    return [
        unquote_to_bytes(segment).decode("utf-8", errors="replace")
        for segment in raw_path.split(b"/")
    ]


def query_text(scope: Scope) -> str:
    """The query string as ASCII text.

    Raw non-ASCII bytes are percent-encoded, so they decode exactly like
    their ``%XX`` spelling when values are unquoted as UTF-8.
    """
    return quote_from_bytes(scope.get("query_string", b""), safe=_QUERY_SAFE)


async def read_body(receive: Receive, limit: int) -> bytes:
    """Read the complete request body, refusing anything over *limit* bytes."""
    chunks: list[bytes] = []
    size = 0
    more = True
    while more:
        message = await receive()
        if message["type"] == "http.disconnect":
            break
        chunk = message.get("body", b"")
        size += len(chunk)
        if size > limit:
            raise HTTPError(status=413, detail=f"Request body exceeds {limit} bytes")
        chunks.append(chunk)
        more = message.get("more_body", False)
    return b"".join(chunks)


def _replay(body: bytes, receive: Receive) -> Receive:
    """Hand an already-read body to the next app, then defer to *receive*."""
    sent = False

    async def replay() -> Any:
        nonlocal sent
        if not sent:
            sent = True
            return {"type": "http.request", "body": body, "more_body": False}
        return await receive()

    return replay


async def _send_error(send: Send, exc: HTTPError, codec: Codec) -> None:
    await send_response(
        send,
        status=exc.status,
        body=codec.encode(exc.to_dict()),
        content_type=codec.content_type,
        headers=exc.headers,
    )


async def _send_internal_error(send: Send, exc: Exception, codec: Codec, *, debug: bool) -> None:
    detail = f"{type(exc).__name__}: {exc}" if debug else "Internal Server Error"
    await _send_error(send, HTTPError(status=500, detail=detail), codec)
