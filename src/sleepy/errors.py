"""Sleepy exception hierarchy.

Shared across API, Router, handler and CLI so every module raises and
catches the same types.
"""

from dataclasses import dataclass


class SleepyError(Exception):
    """Base for all sleepy-specific errors."""


class ConfigurationError(SleepyError):
    """Raised when an API cannot be started as configured.

    ``API.start()`` raises it before any socket is opened when no
    resource has been registered.
    """


class SerializationError(SleepyError, ValueError):
    """Raised when handler data cannot be encoded as JSON."""


class IncompleteBody(SleepyError, ValueError):
    """Raised when the client disconnects before the request body ends.

    A ``ValueError``, so the dispatcher answers it like any other
    malformed form: 400, and the handler is never called.
    """


@dataclass(frozen=True, slots=True)
class HTTPError(SleepyError):
    """An error that maps directly to an HTTP status code.

    Raised inside the request pipeline. The ASGI handler catches these
    and answers with the status and an empty body.
    """

    status: int
    detail: str = ""

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class BadRequest(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """400 — the query string or form body could not be parsed."""

    def __init__(self, detail: str = "Bad Request") -> None:
        super().__init__(status=400, detail=detail)


class NotFound(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """404 — no route matched the request path."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class MethodNotAllowed(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """405 — the resource does not implement the requested verb.

    The allowed verbs are kept for logging only; no ``Allow`` header is
    written.
    """

    def __init__(self, allowed: frozenset[str], detail: str = "") -> None:
        allow_value = ", ".join(sorted(allowed)) or "none"
        default_detail = f"Method not allowed. Allowed methods: {allow_value}"
        super().__init__(status=405, detail=detail or default_detail)
