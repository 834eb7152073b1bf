"""Roost — a client-side navigation engine for async Python.

Resolves paths to pages through an ordered regex route table, caches page
and module instances, and drives their load/show/hide/destroy lifecycle
while keeping session history consistent.

Basic usage::

    from roost import Router

    router = Router(
        pages={
            r"^profile/([0-9]+)$": {
                "script": "app.pages:Profile",
                "data": "https://api.example.com/profile/$1",
            },
        },
    )
    router.start()
    await router.trigger_route("profile/32")
"""

__version__ = "0.1.0"

# Public name -> (module, attribute)
_LAZY_IMPORTS: dict[str, tuple[str, str]] = {
    "ConfigurationError": ("roost.errors", "ConfigurationError"),
    "Document": ("roost.dom", "Document"),
    "Element": ("roost.dom", "Element"),
    "ImportResolver": ("roost.resolver", "ImportResolver"),
    "MemoryHistory": ("roost.history", "MemoryHistory"),
    "Module": ("roost.module", "Module"),
    "ModuleDefinition": ("roost.routing.route", "ModuleDefinition"),
    "QueryParams": ("roost.url", "QueryParams"),
    "RegistryResolver": ("roost.resolver", "RegistryResolver"),
    "RoostError": ("roost.errors", "RoostError"),
    "RouteDefinition": ("roost.routing.route", "RouteDefinition"),
    "RouteNotFound": ("roost.errors", "RouteNotFound"),
    "RouteTable": ("roost.routing.table", "RouteTable"),
    "Router": ("roost.router", "Router"),
    "RouterConfig": ("roost.config", "RouterConfig"),
    "ScriptResolutionError": ("roost.errors", "ScriptResolutionError"),
}

__all__ = [
    "ConfigurationError",
    "Document",
    "Element",
    "ImportResolver",
    "MemoryHistory",
    "Module",
    "ModuleDefinition",
    "QueryParams",
    "RegistryResolver",
    "RoostError",
    "RouteDefinition",
    "RouteNotFound",
    "RouteTable",
    "Router",
    "RouterConfig",
    "ScriptResolutionError",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import roost`` cheap (httpx is only imported with the router).
    """
    target = _LAZY_IMPORTS.get(name)
    if target is None:
        msg = f"module {__name__!r} has no attribute {name!r}"
        raise AttributeError(msg)

    import importlib

    module_name, attr = target
    value = getattr(importlib.import_module(module_name), attr)
    globals()[name] = value
    return value
