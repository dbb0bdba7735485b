"""Route frozen dataclass."""

from dataclasses import dataclass

from sleepy.resource import MethodTable


@dataclass(frozen=True, slots=True)
class Route:
    """A frozen binding of one path pattern to one resource.

    ``methods`` is resolved from the resource when the route is created
    and never changes afterwards.
    """

    path: str
    resource: object
    methods: MethodTable

    @property
    def is_subtree(self) -> bool:
        """True if the pattern also matches paths below it."""
        return self.path.endswith("/")
