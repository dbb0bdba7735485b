"""Async test client for sleepy APIs.

Requests go straight into the API's ASGI callable. Nothing is bound or
listened on, and the result comes back as the same ``Response`` value
the dispatcher builds.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import urlencode

from sleepy.api import API
from sleepy.http.forms import FORM_URLENCODED
from sleepy.http.response import Response


def _http_scope(method: str, path: str, query: str, headers: dict[str, str]) -> dict[str, Any]:
    """An ASGI 3.0 ``http`` scope for a request from a local client."""
    return {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": method,
        "scheme": "http",
        "path": path,
        "raw_path": path.encode("latin-1"),
        "query_string": query.encode("latin-1"),
        "root_path": "",
        "headers": [(k.lower().encode("latin-1"), v.encode("latin-1")) for k, v in headers.items()],
        "server": ("testserver", 80),
        "client": ("127.0.0.1", 0),
    }


class _Exchange:
    """One request body going in, one response coming out."""

    __slots__ = ("_pending", "chunks", "headers", "status")

    def __init__(self, body: bytes) -> None:
        self._pending: list[bytes] = [body]
        self.status = 0
        self.headers: tuple[tuple[str, str], ...] = ()
        self.chunks: list[bytes] = []

    async def receive(self) -> dict[str, Any]:
        if self._pending:
            return {"type": "http.request", "body": self._pending.pop(), "more_body": False}
        return {"type": "http.disconnect"}

    async def send(self, message: dict[str, Any]) -> None:
        kind = message["type"]
        if kind == "http.response.start":
            self.status = message["status"]
            self.headers = tuple(
                (k.decode("latin-1"), v.decode("latin-1")) for k, v in message.get("headers", ())
            )
        elif kind == "http.response.body":
            self.chunks.append(message.get("body", b""))

    def response(self) -> Response:
        return Response(body=b"".join(self.chunks), status=self.status, headers=self.headers)


class TestClient:
    """Async test client for sleepy APIs.

    Usage::

        async with TestClient(api) as client:
            response = await client.get("/items", query={"page": "2"})
            assert response.status == 200
            assert response.json() == {"ok": True}
    """

    __test__ = False  # not a pytest test class

    __slots__ = ("api",)

    def __init__(self, api: API) -> None:
        self.api = api

    async def __aenter__(self) -> TestClient:
        return self

    async def __aexit__(self, *args: object) -> None:
        return None

    async def get(self, path: str, *, query: dict[str, Any] | None = None) -> Response:
        return await self.request("GET", path, query=query)

    async def post(
        self,
        path: str,
        *,
        query: dict[str, Any] | None = None,
        form: dict[str, Any] | None = None,
        body: bytes | None = None,
        headers: dict[str, str] | None = None,
    ) -> Response:
        return await self.request("POST", path, query=query, form=form, body=body, headers=headers)

    async def put(
        self,
        path: str,
        *,
        query: dict[str, Any] | None = None,
        form: dict[str, Any] | None = None,
        body: bytes | None = None,
        headers: dict[str, str] | None = None,
    ) -> Response:
        return await self.request("PUT", path, query=query, form=form, body=body, headers=headers)

    async def delete(self, path: str, *, query: dict[str, Any] | None = None) -> Response:
        return await self.request("DELETE", path, query=query)

    async def request(
        self,
        method: str,
        path: str,
        *,
        query: dict[str, Any] | None = None,
        form: dict[str, Any] | None = None,
        body: bytes | None = None,
        headers: dict[str, str] | None = None,
    ) -> Response:
        """Send any method through the API and collect the response.

        A raw query string may follow ``?`` in *path*; *query* is
        appended to it. *query* and *form* are URL-encoded with
        ``doseq=True``, so list values repeat the field. Passing *form*
        replaces *body* and sets the URL-encoded Content-Type.
        """
        target, _, raw_query = path.partition("?")
        if query:
            raw_query = "&".join(filter(None, (raw_query, urlencode(query, doseq=True))))

        sent_headers: dict[str, str] = {}
        payload = body or b""
        if form is not None:
            payload = urlencode(form, doseq=True).encode("utf-8")
            sent_headers["content-type"] = FORM_URLENCODED
        sent_headers.update(headers or {})

        exchange = _Exchange(payload)
        scope = _http_scope(method, target, raw_query, sent_headers)
        await self.api(scope, exchange.receive, exchange.send)
        return exchange.response()
