"""ASGI handler — the per-request dispatch pipeline.

The only component that touches the ASGI scope directly. For every
HTTP request it:

1. matches the path against the route table (404 if nothing matches),
2. parses query string and URL-encoded body (400 if malformed),
3. resolves the capability for the verb (405 if unsupported),
4. invokes it exactly once with the parsed form,
5. encodes the returned data as JSON (500 with an empty body if the
   data cannot be encoded; the handler's status is dropped),

then sends the handler's status and the encoded body.
"""

import logging
from dataclasses import replace
from typing import Any

from sleepy._internal.asgi import Receive, Scope, Send
from sleepy._internal.invoke import invoke
from sleepy.config import APIConfig
from sleepy.errors import BadRequest, HTTPError, MethodNotAllowed, SerializationError
from sleepy.http.request import Request
from sleepy.http.response import Response, empty
from sleepy.routing.router import Router
from sleepy.server.encoding import encode
from sleepy.server.sender import send_response

logger = logging.getLogger("sleepy.server")


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    router: Router,
    config: APIConfig,
) -> None:
    """Process a single HTTP request through the full pipeline."""
    request = Request.from_asgi(scope, receive)

    try:
        response = await dispatch(request, router=router, config=config)
    except HTTPError as exc:
        logger.debug("%d %s %s — %s", exc.status, request.method, request.path, exc.detail)
        response = empty(exc.status)

    if config.content_type is not None:
        response = replace(response, headers=(("content-type", config.content_type),))

    await send_response(response, send)


async def dispatch(request: Request, *, router: Router, config: APIConfig) -> Response:
    """Resolve, invoke and encode. Raises ``HTTPError`` for 4xx outcomes."""
    route = router.match(request.path)

    try:
        form = await request.form(config.max_form_bytes)
    except ValueError as exc:
        raise BadRequest(str(exc)) from exc

    handler = route.methods.get(request.method)
    if handler is None:
        raise MethodNotAllowed(route.methods.allowed)

    try:
        status, data = _unpack(await invoke(handler, form, thread_limit=config.handler_threads))
    except Exception:
        logger.exception("500 %s %s — handler failed", request.method, request.path)
        return empty(500)

    try:
        body = encode(data)
    except SerializationError:
        logger.exception(
            "500 %s %s — %d result not serializable", request.method, request.path, status
        )
        return empty(500)

    return Response(body=body, status=status)


def _unpack(result: Any) -> tuple[int, Any]:
    """Split a handler result into (status, data).

    Raises ``TypeError`` unless *result* is a two-item tuple or list
    whose first item is an ``int``.
    """
    if not isinstance(result, (tuple, list)) or len(result) != 2:
        msg = f"handler must return (status, data), got {type(result).__name__}"
        raise TypeError(msg)
    status, data = result
    if isinstance(status, bool) or not isinstance(status, int):
        msg = f"handler status must be int, got {type(status).__name__}"
        raise TypeError(msg)
    return status, data
