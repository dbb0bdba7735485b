"""JSON encoding of handler data.

Output is compact (``{"ok":true}``), UTF-8, and strict: NaN and
infinities are rejected rather than written as non-standard tokens.
Dataclass instances are encoded as objects.
"""

import dataclasses
import json as json_module
from typing import Any

from sleepy.errors import SerializationError


def _default(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: getattr(value, f.name) for f in dataclasses.fields(value)}
    msg = f"Object of type {type(value).__name__} is not JSON serializable"
    raise TypeError(msg)


def encode(data: Any) -> bytes:
    """Encode *data* as a JSON response body.

    Raises ``SerializationError`` for values JSON cannot represent:
    unsupported types, cyclic structures, NaN or infinity.
    """
    try:
        text = json_module.dumps(
            data,
            separators=(",", ":"),
            ensure_ascii=False,
            allow_nan=False,
            default=_default,
        )
    except (TypeError, ValueError, RecursionError) as exc:
        raise SerializationError(str(exc)) from exc
    return text.encode("utf-8")
