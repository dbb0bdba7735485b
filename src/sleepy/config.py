"""API configuration.

``APIConfig`` holds everything ``API.start()`` and the request pipeline
read at runtime. Replace it with ``dataclasses.replace`` to derive a
variant.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class APIConfig:
    """API configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = APIConfig(port=3000, content_type="application/json")
    """

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    workers: int = 1  # 0 = auto-detect from CPU count

    # Limits
    max_form_bytes: int = 10 * 1024 * 1024  # 10 MB

    # Sync capability methods running at once on each event loop; more wait
    handler_threads: int = 40

    # Responses carry no content-type unless one is configured
    content_type: str | None = None

    # Forwarded to pounce
    log_level: str = "info"
    log_format: str = "text"
    lifecycle_logging: bool = False
    backlog: int = 2048
    keep_alive_timeout: float = 5.0
