"""Immutable HTTP request.

Frozen metadata with async body access. Only what the dispatcher needs
is kept: method, path, raw query string and Content-Type.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from typing import Any

from sleepy._internal.asgi import Receive, Scope
from sleepy.errors import IncompleteBody
from sleepy.http.forms import FormData, has_form_body, parse_form


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    Metadata is frozen at creation. The method is kept exactly as sent;
    ``get`` and ``GET`` are different verbs. The body is read
    asynchronously and at most once; ``form()`` caches its result.
    """

    method: str
    path: str
    query_string: bytes
    content_type: str | None

    # Private: ASGI receive callable for body streaming
    _receive: Receive

    # Private: mutable cache for body and parsed form data
    _cache: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    async def stream(self) -> AsyncIterator[bytes]:
        """Stream the request body in chunks.

        Raises ``IncompleteBody`` if the client disconnects before the
        last chunk arrives.
        """
        while True:
            message = await self._receive()
            if message["type"] == "http.disconnect":
                msg = "client disconnected before the request body was complete"
                raise IncompleteBody(msg)
            chunk = message.get("body", b"")
            if chunk:
                yield chunk
            if not message.get("more_body", False):
                return

    async def body(self, limit: int | None = None) -> bytes:
        """Read the full request body.

        Raises ``ValueError`` as soon as more than *limit* bytes arrive,
        and ``IncompleteBody`` (a ``ValueError``) on an early disconnect.
        """
        if "_body" in self._cache:
            return self._cache["_body"]
        buffer = bytearray()
        async for chunk in self.stream():
            buffer.extend(chunk)
            if limit is not None and len(buffer) > limit:
                msg = f"request body exceeds {limit} bytes"
                raise ValueError(msg)
        result = bytes(buffer)
        self._cache["_body"] = result
        return result

    async def form(self, max_body: int) -> FormData:
        """Parse query string and URL-encoded body into ``FormData``.

        Raises ``ValueError`` if either part is malformed or the body
        was cut short.
        """
        if "_form" in self._cache:
            return self._cache["_form"]

        body = b""
        if has_form_body(self.method, self.content_type):
            body = await self.body(limit=max_body)

        result = parse_form(
            self.method,
            self.query_string,
            body,
            self.content_type,
            max_body=max_body,
        )
        self._cache["_form"] = result
        return result

    @classmethod
    def from_asgi(cls, scope: Scope, receive: Receive) -> Request:
        """Create a Request from an ASGI scope and receive callable."""
        content_type: str | None = None
        for name, value in scope.get("headers", ()):
            if name.lower() == b"content-type":
                content_type = value.decode("latin-1")
                break
        return cls(
            method=scope["method"],
            path=scope["path"],
            query_string=scope.get("query_string", b""),
            content_type=content_type,
            _receive=receive,
        )
