"""Write a sleepy ``Response`` to an ASGI ``send`` callable."""

from sleepy._internal.asgi import Send
from sleepy.http.response import Response

# Informational, No Content and Not Modified never carry a body
_BODYLESS = frozenset({204, 304})


async def send_response(response: Response, send: Send) -> None:
    """Emit ``http.response.start`` and a single ``http.response.body``.

    Header names are lowercased. ``content-length`` is appended to
    whatever headers the response carries.
    """
    status = response.status
    body = b"" if 100 <= status < 200 or status in _BODYLESS else response.body

    headers = [
        (name.lower().encode("latin-1"), value.encode("latin-1"))
        for name, value in response.headers
    ]
    headers.append((b"content-length", b"%d" % len(body)))

    await send({"type": "http.response.start", "status": status, "headers": headers})
    await send({"type": "http.response.body", "body": body})
