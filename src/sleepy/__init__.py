"""Sleepy — a small HTTP router for resource objects.

Resources declare the HTTP verbs they answer by implementing capability
classes. Sleepy routes each request to the matching method and encodes
the returned data as JSON.

Basic usage::

    from sleepy import API, GetSupported

    class Items(GetSupported):
        def get(self, form):
            return 200, {"ok": True}

    api = API()
    api.add_resource(Items(), "/items")
    api.start(3000)
"""

__version__ = "0.1.0"
__all__ = [
    "API",
    "APIConfig",
    "BadRequest",
    "ConfigurationError",
    "DeleteSupported",
    "FormData",
    "GetSupported",
    "HTTPError",
    "IncompleteBody",
    "MethodNotAllowed",
    "MethodTable",
    "NotFound",
    "PostSupported",
    "PutSupported",
    "SerializationError",
    "SleepyError",
    "add_resource",
    "default_api",
    "start",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import sleepy`` fast while providing a clean top-level API.
    """
    if name == "API":
        from sleepy.api import API

        return API

    if name == "APIConfig":
        from sleepy.config import APIConfig

        return APIConfig

    if name == "FormData":
        from sleepy.http.forms import FormData

        return FormData

    if name in ("DeleteSupported", "GetSupported", "MethodTable", "PostSupported", "PutSupported"):
        from sleepy import resource as _resource

        return getattr(_resource, name)

    if name in ("add_resource", "default_api", "start"):
        from sleepy import default as _default

        return getattr(_default, name)

    if name in (
        "BadRequest",
        "ConfigurationError",
        "HTTPError",
        "IncompleteBody",
        "MethodNotAllowed",
        "NotFound",
        "SerializationError",
        "SleepyError",
    ):
        from sleepy import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
