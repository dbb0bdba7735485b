"""Resource capabilities — one abstract class per supported HTTP verb.

A resource declares what it supports by inheriting from the matching
capability classes::

    class Items(GetSupported, PostSupported):
        def get(self, form):
            return 200, list(store)

        def post(self, form):
            store.append(form["name"])
            return 201, {"created": form["name"]}

Capabilities are resolved once, when the resource is registered, into
a frozen ``MethodTable``. A resource that implements none of them is
valid; it answers every request with 405.
"""

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable, Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, TypeAlias

from sleepy.http.forms import FormData

# (status, data) returned by every capability method
Result: TypeAlias = tuple[int, Any]

# A capability method, bound or plain, sync or async
CapabilityHandler: TypeAlias = Callable[[FormData], Result | Awaitable[Result]]


class GetSupported(ABC):
    """A resource that answers HTTP GET."""

    @abstractmethod
    def get(self, form: FormData) -> Result:
        """Retrieve the resource."""


class PostSupported(ABC):
    """A resource that answers HTTP POST."""

    @abstractmethod
    def post(self, form: FormData) -> Result:
        """Create a new member of the resource."""


class PutSupported(ABC):
    """A resource that answers HTTP PUT."""

    @abstractmethod
    def put(self, form: FormData) -> Result:
        """Replace the resource."""


class DeleteSupported(ABC):
    """A resource that answers HTTP DELETE."""

    @abstractmethod
    def delete(self, form: FormData) -> Result:
        """Remove the resource."""


# verb -> (capability class, method name)
CAPABILITIES: dict[str, tuple[type[ABC], str]] = {
    "GET": (GetSupported, "get"),
    "POST": (PostSupported, "post"),
    "PUT": (PutSupported, "put"),
    "DELETE": (DeleteSupported, "delete"),
}


@dataclass(frozen=True, slots=True)
class MethodTable(Mapping[str, CapabilityHandler]):
    """Frozen mapping of HTTP verb to the handler that serves it.

    Built once per route. Lookups for verbs outside GET/POST/PUT/DELETE
    simply miss.
    """

    _handlers: Mapping[str, CapabilityHandler] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_handlers", MappingProxyType(dict(self._handlers)))

    def __getitem__(self, verb: str) -> CapabilityHandler:
        return self._handlers[verb]

    def __iter__(self) -> Iterator[str]:
        return iter(self._handlers)

    def __len__(self) -> int:
        return len(self._handlers)

    @property
    def allowed(self) -> frozenset[str]:
        """The verbs this table can serve."""
        return frozenset(self._handlers)

    @classmethod
    def of(cls, resource: object) -> "MethodTable":
        """Resolve the capabilities a resource declares through inheritance."""
        handlers: dict[str, CapabilityHandler] = {}
        for verb, (capability, method_name) in CAPABILITIES.items():
            if isinstance(resource, capability):
                handlers[verb] = getattr(resource, method_name)
        return cls(handlers)

    @classmethod
    def from_functions(
        cls,
        *,
        get: CapabilityHandler | None = None,
        post: CapabilityHandler | None = None,
        put: CapabilityHandler | None = None,
        delete: CapabilityHandler | None = None,
    ) -> "MethodTable":
        """Build a table from plain function values, one per verb."""
        given = {"GET": get, "POST": post, "PUT": put, "DELETE": delete}
        return cls({verb: fn for verb, fn in given.items() if fn is not None})
