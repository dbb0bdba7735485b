"""Tests for sleepy.http.request — Request construction and body access."""

from typing import Any

import pytest

from sleepy.errors import IncompleteBody
from sleepy.http.request import Request


def _receive_chunks(*chunks: bytes):
    messages = [
        {"type": "http.request", "body": chunk, "more_body": i < len(chunks) - 1}
        for i, chunk in enumerate(chunks)
    ]

    async def receive() -> dict[str, Any]:
        if messages:
            return messages.pop(0)
        return {"type": "http.disconnect"}

    return receive


def _scope(method: str = "GET", query: bytes = b"", content_type: str | None = None) -> dict:
    headers = []
    if content_type is not None:
        headers.append((b"content-type", content_type.encode("latin-1")))
    return {
        "type": "http",
        "method": method,
        "path": "/items",
        "query_string": query,
        "headers": headers,
    }


class TestFromAsgi:
    def test_fields(self) -> None:
        request = Request.from_asgi(
            _scope("POST", b"a=1", "text/plain"), _receive_chunks(b"")
        )
        assert request.method == "POST"
        assert request.path == "/items"
        assert request.query_string == b"a=1"
        assert request.content_type == "text/plain"

    def test_method_kept_as_sent(self) -> None:
        request = Request.from_asgi(_scope("get"), _receive_chunks(b""))
        assert request.method == "get"

    def test_content_type_header_is_case_insensitive(self) -> None:
        scope = _scope()
        scope["headers"] = [(b"Content-Type", b"application/json")]
        request = Request.from_asgi(scope, _receive_chunks(b""))
        assert request.content_type == "application/json"

    def test_no_content_type(self) -> None:
        request = Request.from_asgi(_scope(), _receive_chunks(b""))
        assert request.content_type is None

    def test_frozen(self) -> None:
        request = Request.from_asgi(_scope(), _receive_chunks(b""))
        with pytest.raises(AttributeError):
            request.method = "PUT"  # type: ignore[misc]


class TestBody:
    async def test_joins_chunks(self) -> None:
        request = Request.from_asgi(_scope("POST"), _receive_chunks(b"a=", b"1"))
        assert await request.body() == b"a=1"

    async def test_cached(self) -> None:
        request = Request.from_asgi(_scope("POST"), _receive_chunks(b"abc"))
        assert await request.body() == b"abc"
        assert await request.body() == b"abc"

    async def test_limit(self) -> None:
        request = Request.from_asgi(_scope("POST"), _receive_chunks(b"12345", b"67890"))
        with pytest.raises(ValueError):
            await request.body(limit=8)


class TestForm:
    async def test_combines_body_and_query(self) -> None:
        request = Request.from_asgi(
            _scope("POST", b"name=q", "application/x-www-form-urlencoded"),
            _receive_chunks(b"name=b&x=1"),
        )
        form = await request.form(1024)
        assert form.get_list("name") == ["b", "q"]
        assert form["x"] == "1"

    async def test_body_not_read_for_get(self) -> None:
        async def receive() -> dict[str, Any]:
            raise AssertionError("body must not be read")

        request = Request.from_asgi(_scope("GET", b"a=1"), receive)
        form = await request.form(1024)
        assert form["a"] == "1"

    async def test_cached(self) -> None:
        request = Request.from_asgi(_scope("GET", b"a=1"), _receive_chunks(b""))
        assert await request.form(1024) is await request.form(1024)

    async def test_oversized_body(self) -> None:
        request = Request.from_asgi(
            _scope("POST", b"", "application/x-www-form-urlencoded"),
            _receive_chunks(b"a=" + b"x" * 100),
        )
        with pytest.raises(ValueError):
            await request.form(16)


def _receive_then_disconnect(*chunks: bytes):
    messages = [{"type": "http.request", "body": chunk, "more_body": True} for chunk in chunks]

    async def receive() -> dict[str, Any]:
        if messages:
            return messages.pop(0)
        return {"type": "http.disconnect"}

    return receive


class TestDisconnect:
    async def test_body_raises_on_early_disconnect(self) -> None:
        request = Request.from_asgi(_scope("POST"), _receive_then_disconnect(b"name=ali"))
        with pytest.raises(IncompleteBody):
            await request.body()

    async def test_disconnect_is_a_value_error(self) -> None:
        request = Request.from_asgi(_scope("POST"), _receive_then_disconnect())
        with pytest.raises(ValueError):
            await request.body()

    async def test_form_raises_on_truncated_body(self) -> None:
        request = Request.from_asgi(
            _scope("POST", b"", "application/x-www-form-urlencoded"),
            _receive_then_disconnect(b"name=alice-and-the-rest"),
        )
        with pytest.raises(IncompleteBody):
            await request.form(1024)
