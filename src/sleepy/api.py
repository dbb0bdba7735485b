"""The sleepy API — a group of resources served on one port.

An API routes each request to the matching capability on the resource
registered for the path, and marshals the returned data to JSON.

Several APIs can run side by side on separate ports; each keeps its own
route table.
"""

import logging

from sleepy._internal.asgi import Receive, Scope, Send
from sleepy.config import APIConfig
from sleepy.errors import ConfigurationError
from sleepy.resource import CapabilityHandler, MethodTable
from sleepy.routing.route import Route
from sleepy.routing.router import Router
from sleepy.server.handler import handle_request

logger = logging.getLogger("sleepy.api")


class API:
    """A set of resources, each bound to a path.

    Usage::

        from sleepy import API, GetSupported

        class Items(GetSupported):
            def get(self, form):
                return 200, {"ok": True}

        api = API()
        api.add_resource(Items(), "/items")
        api.start(3000)

    The route table is allocated here, so an API is usable as an ASGI
    application as soon as it exists. Registration stays open while
    serving; a request always sees a complete table.
    """

    __slots__ = ("_router", "config")

    def __init__(self, config: APIConfig | None = None) -> None:
        self.config: APIConfig = config or APIConfig()
        self._router: Router = Router()

    # -- Registration --

    def add_resource(self, resource: object, path: str) -> None:
        """Add a resource to the API at *path*.

        Requests to *path* are routed to the capability on *resource*
        that matches the HTTP method. Registering a path again replaces
        the earlier resource.
        """
        self._add(Route(path, resource, MethodTable.of(resource)))

    def add_handlers(
        self,
        path: str,
        *,
        get: CapabilityHandler | None = None,
        post: CapabilityHandler | None = None,
        put: CapabilityHandler | None = None,
        delete: CapabilityHandler | None = None,
    ) -> None:
        """Register plain functions at *path*, one per verb.

        Equivalent to ``add_resource`` with a resource that implements
        exactly the given verbs::

            api.add_handlers("/health", get=lambda form: (200, "ok"))
        """
        table = MethodTable.from_functions(get=get, post=post, put=put, delete=delete)
        self._add(Route(path, table, table))

    def _add(self, route: Route) -> None:
        self._router.add(route)
        logger.debug(
            "Registered %r -> %s [%s]",
            route.path,
            type(route.resource).__name__,
            ", ".join(sorted(route.methods.allowed)) or "no methods",
        )

    @property
    def routes(self) -> list[Route]:
        """All registered routes, in registration order."""
        return self._router.routes

    # -- Server --

    def start(self, port: int | None = None, *, host: str | None = None) -> None:
        """Serve requests on *port* until the server stops.

        Blocks for the life of the server. Transport failures, such as a
        port that is already bound, propagate to the caller.

        Raises:
            ConfigurationError: If no resource has been added. Raised
                before any socket is opened.
        """
        if len(self._router) == 0:
            msg = "You must add at least one resource to this API."
            raise ConfigurationError(msg)

        _host = host or self.config.host
        _port = self.config.port if port is None else port

        logger.info("Serving %d route(s) on %s:%d", len(self._router), _host, _port)

        from sleepy.server.runner import run_server

        run_server(self, _host, _port, config=self.config)

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point.

        Acknowledges lifespan events and hands HTTP scopes to the
        request pipeline. Other scope types are ignored.
        """
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        if scope["type"] != "http":
            return

        await handle_request(scope, receive, send, router=self._router, config=self.config)

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Answer the ASGI lifespan protocol. There are no hooks to run."""
        while True:
            message = await receive()
            if message["type"] == "lifespan.startup":
                await send({"type": "lifespan.startup.complete"})
            elif message["type"] == "lifespan.shutdown":
                await send({"type": "lifespan.shutdown.complete"})
                return
