"""Form data parsing — query string plus URL-encoded body.

``FormData`` is the read-only, multi-valued mapping handed to every
capability method. ``parse_form()`` builds it from the raw query string
and body, and rejects malformed input with ``ValueError`` so the
dispatcher can answer 400.

Parsing uses stdlib ``urllib.parse``. Percent-escapes and UTF-8 are
validated strictly; ``;`` is not accepted as a pair separator.
"""

import re
from collections.abc import Iterator, Mapping
from urllib.parse import unquote_to_bytes

_BAD_ESCAPE = re.compile(rb"%(?![0-9A-Fa-f]{2})")

# RFC 7230 token and quoted-string
_TOKEN = r"[!#$%&'*+.^_`|~0-9A-Za-z-]+"
_QUOTED = r'"(?:[^"\\]|\\.)*"'
_MEDIA_TYPE = re.compile(rf"{_TOKEN}(?:/{_TOKEN})?")
_PARAMETER = re.compile(rf"\s*;\s*({_TOKEN})\s*=\s*(?:{_TOKEN}|{_QUOTED})\s*")

# Methods whose body carries form fields
BODY_METHODS = frozenset({"POST", "PUT", "PATCH"})

FORM_URLENCODED = "application/x-www-form-urlencoded"


class FormData(Mapping[str, str]):
    """Immutable parsed form data.

    Implements ``Mapping[str, str]``.

    ``__getitem__`` returns the first value for a key.
    ``get_list`` returns all values for a key, in request order.

    Usage::

        def get(self, form):
            page = form.get("page", "1")
            tags = form.get_list("tag")
    """

    __slots__ = ("_data",)

    def __init__(self, data: dict[str, list[str]] | None = None) -> None:
        object.__setattr__(self, "_data", {k: list(v) for k, v in (data or {}).items()})

    def __getitem__(self, key: str) -> str:
        return self._data[key][0]

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        items = ", ".join(f"{k!r}: {self.get_list(k)!r}" for k in self)
        return f"FormData({{{items}}})"

    def __setattr__(self, name: str, value: object) -> None:
        msg = "FormData is read-only"
        raise AttributeError(msg)

    def get(self, key: str, default: str | None = None) -> str | None:  # type: ignore[override]
        """Return the first value for *key*, or *default* if missing."""
        values = self._data.get(key)
        if values:
            return values[0]
        return default

    def get_list(self, key: str) -> list[str]:
        """Return all values for *key* (repeated fields, multi-selects)."""
        return list(self._data.get(key, []))

    def to_dict(self) -> dict[str, list[str]]:
        """Return a copy of the underlying multi-value data."""
        return {k: list(v) for k, v in self._data.items()}


def _unescape(raw: bytes) -> str:
    return unquote_to_bytes(raw.replace(b"+", b" ")).decode("utf-8")


def parse_pairs(raw: bytes) -> list[tuple[str, str]]:
    """Parse one ``application/x-www-form-urlencoded`` byte string.

    Blank values are kept. Empty segments between ``&`` are skipped.

    Raises ``ValueError`` on a ``;`` separator, an invalid
    percent-escape, or bytes that are not UTF-8.
    """
    pairs: list[tuple[str, str]] = []
    for segment in raw.split(b"&"):
        if not segment:
            continue
        if b";" in segment:
            msg = f"invalid semicolon separator in {segment!r}"
            raise ValueError(msg)
        if _BAD_ESCAPE.search(segment):
            msg = f"invalid percent-escape in {segment!r}"
            raise ValueError(msg)
        name, _, value = segment.partition(b"=")
        pairs.append((_unescape(name), _unescape(value)))
    return pairs


def media_type(content_type: str) -> str:
    """Return the lowercased media type of a Content-Type value.

    The media type is ``type/subtype`` or a bare token such as ``text``.
    Every parameter must be ``name=token`` or ``name="quoted"``, and no
    name may repeat. A single trailing ``;`` is tolerated.

    Raises ``ValueError`` if the value does not follow that grammar.
    """
    base, _, _ = content_type.partition(";")
    main = base.strip().lower()
    if not _MEDIA_TYPE.fullmatch(main):
        msg = f"malformed Content-Type: {content_type!r}"
        raise ValueError(msg)

    rest = content_type[len(base):]
    seen: set[str] = set()
    while rest.strip():
        param = _PARAMETER.match(rest)
        if param is None:
            if rest.strip() == ";":
                break
            msg = f"malformed Content-Type parameter in {content_type!r}"
            raise ValueError(msg)
        name = param.group(1).lower()
        if name in seen:
            msg = f"duplicate Content-Type parameter {name!r}"
            raise ValueError(msg)
        seen.add(name)
        rest = rest[param.end():]
    return main


def has_form_body(method: str, content_type: str | None) -> bool:
    """Whether a request with this method and Content-Type carries form fields.

    Raises ``ValueError`` if *content_type* is malformed.
    """
    if method not in BODY_METHODS or not content_type:
        return False
    return media_type(content_type) == FORM_URLENCODED


def parse_form(
    method: str,
    query_string: bytes,
    body: bytes,
    content_type: str | None,
    *,
    max_body: int,
) -> FormData:
    """Combine body and query string fields into one ``FormData``.

    The body is read only for POST, PUT and PATCH with a URL-encoded
    content type; any other body is ignored. Body values come before
    query values for the same key.

    Raises:
        ValueError: If either part is malformed, the Content-Type header
            cannot be parsed, or the body exceeds *max_body* bytes.
    """
    data: dict[str, list[str]] = {}

    if has_form_body(method, content_type):
        if len(body) > max_body:
            msg = f"form body too large ({len(body)} > {max_body} bytes)"
            raise ValueError(msg)
        for name, value in parse_pairs(body):
            data.setdefault(name, []).append(value)

    for name, value in parse_pairs(query_string):
        data.setdefault(name, []).append(value)

    return FormData(data)
