"""Find the API that ``sleepy run`` should serve."""

import importlib

from sleepy.api import API
from sleepy.errors import ConfigurationError


def resolve_api(target: str) -> API:
    """Load the API named by *target*, written ``module`` or ``module:name``.

    ``module:name`` looks up *name* in the module; when it is a function
    rather than an ``API``, it is called with no arguments to build one.
    A bare ``module`` uses its ``api`` attribute, and falls back to the
    process-wide default API for scripts that register with
    ``sleepy.add_resource``.

    The API must already hold at least one resource, so nothing is
    imported into a server that could never answer a request.

    Raises:
        ModuleNotFoundError: If the module cannot be imported.
        AttributeError: If ``module:name`` names a missing attribute.
        ConfigurationError: If the target is not an API, building it
            failed, or it has no resources.
    """
    module_name, _, name = target.partition(":")
    module = importlib.import_module(module_name)

    if name:
        found = getattr(module, name)
    else:
        found = getattr(module, "api", None)
        if found is None:
            from sleepy import default

            found = default.default_api

    if callable(found) and not isinstance(found, API):
        try:
            found = found()
        except Exception as exc:
            msg = f"building the API from {target!r} failed: {exc}"
            raise ConfigurationError(msg) from exc

    if not isinstance(found, API):
        msg = f"{target!r} is a {type(found).__name__}, but sleepy run needs an API"
        raise ConfigurationError(msg)

    if not found.routes:
        msg = f"{target!r} has no resources; call add_resource() before serving it"
        raise ConfigurationError(msg)

    return found
