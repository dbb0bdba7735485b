"""The process-wide default API.

``default_api`` is created once, when this module is first imported,
and lives for the rest of the process. The module-level helpers
register on it and start it, for scripts that only ever serve one API::

    import sleepy

    sleepy.add_resource(Items(), "/items")
    sleepy.start(3000)

Code that needs more than one API should create ``API`` instances
directly.
"""

from sleepy.api import API

default_api: API = API()


def add_resource(resource: object, path: str) -> None:
    """Add *resource* at *path* on the default API."""
    default_api.add_resource(resource, path)


def start(port: int | None = None, *, host: str | None = None) -> None:
    """Start the default API. See ``API.start``."""
    default_api.start(port, host=host)
