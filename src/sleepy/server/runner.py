"""Hand a sleepy API to pounce and serve it until shutdown."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sleepy.api import API
    from sleepy.config import APIConfig


def run_server(api: API, host: str, port: int, *, config: APIConfig) -> None:
    """Bind *host*:*port* and block while pounce serves *api*.

    The API object itself is the ASGI application, so pounce's
    ``Server`` is driven directly rather than through an import string.
    Worker count, logging and connection settings come from *config*;
    *host* and *port* have already been resolved by the caller.

    Errors raised while binding, such as ``OSError`` for a port in use,
    reach the caller as-is.
    """
    from pounce.config import ServerConfig
    from pounce.server import Server

    settings = {
        "workers": config.workers,
        "log_level": config.log_level,
        "log_format": config.log_format,
        "lifecycle_logging": config.lifecycle_logging,
        "backlog": config.backlog,
        "keep_alive_timeout": config.keep_alive_timeout,
    }
    Server(ServerConfig(host=host, port=port, **settings), api).run()
