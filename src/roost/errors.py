"""Roost exception hierarchy.

Shared across the route table, the resolvers, and the router so every
module raises and catches the same types.

Navigation failures are not raised out of ``Router.trigger_route()``:
they are handed to the ``on_route_error`` callback (routes and pages) or
to the failing module's own ``error()`` method.
"""


class RoostError(Exception):
    """Base for all roost-specific errors."""


class ConfigurationError(RoostError):
    """Raised when route or module configuration is invalid.

    Typically raised while the route table is built, before the router
    starts navigating.
    """


class RouteNotFound(RoostError, LookupError):  # noqa: N818
    """No route definition matches the requested path."""

    def __init__(self, path: str, detail: str = "") -> None:
        self.path = path
        super().__init__(detail or f"No route matches {path!r}")


class ScriptResolutionError(RoostError):
    """A script identifier could not be turned into a factory or instance."""

    def __init__(self, script: str, detail: str = "") -> None:
        self.script = script
        super().__init__(detail or f"Cannot resolve script {script!r}")


class ModuleDefinitionNotFound(ConfigurationError):  # noqa: N818
    """A page declares a module name that has no module definition."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"No module definition named {name!r}")
