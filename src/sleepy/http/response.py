"""HTTP response value.

The dispatcher builds exactly one per request and the sender writes it
out. The test client reads results back into the same type.
"""

from __future__ import annotations

import json as json_module
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class Response:
    """A status, a body and the headers to send with it.

    The body is the encoded handler data, or empty on error paths.
    """

    body: bytes = b""
    status: int = 200
    headers: tuple[tuple[str, str], ...] = ()

    @property
    def text(self) -> str:
        """Body as string."""
        return self.body.decode("utf-8")

    def json(self) -> Any:
        """Body decoded as JSON."""
        return json_module.loads(self.body)

    def header(self, name: str) -> str | None:
        """Return the first value of header *name* (case-insensitive)."""
        lowered = name.lower()
        for key, value in self.headers:
            if key.lower() == lowered:
                return value
        return None


def empty(status: int) -> Response:
    """An empty-bodied response, as written on every error path."""
    return Response(status=status)
