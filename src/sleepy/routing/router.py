"""Route table with exact and subtree matching.

The table is replaced, never mutated in place, so a request being
matched on one worker thread always sees a complete table while another
thread registers a route.
"""

import threading
from types import MappingProxyType

from sleepy.errors import NotFound
from sleepy.routing.route import Route


class Router:
    """Route table keyed by literal path pattern.

    Usage::

        router = Router()
        router.add(Route("/items", items, MethodTable.of(items)))
        route = router.match("/items")

    Adding a pattern that already exists replaces its route.
    """

    __slots__ = ("_lock", "_routes")

    def __init__(self) -> None:
        self._routes: MappingProxyType[str, Route] = MappingProxyType({})
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._routes)

    def add(self, route: Route) -> None:
        """Bind ``route.path`` to ``route``, replacing any earlier binding."""
        with self._lock:
            routes = dict(self._routes)
            routes[route.path] = route
            self._routes = MappingProxyType(routes)

    @property
    def routes(self) -> list[Route]:
        """Return all registered routes in first-registration order."""
        return list(self._routes.values())

    def match(self, path: str) -> Route:
        """Find the route for a request path.

        An exact pattern wins outright. Otherwise the longest subtree
        pattern (ending in ``/``) that prefixes *path* is used.

        Raises ``NotFound`` if nothing matches.
        """
        routes = self._routes

        exact = routes.get(path)
        if exact is not None:
            return exact

        best: Route | None = None
        for pattern, route in routes.items():
            if not route.is_subtree or not path.startswith(pattern):
                continue
            if best is None or len(pattern) > len(best.path):
                best = route

        if best is None:
            raise NotFound(f"No route matches {path!r}")
        return best
