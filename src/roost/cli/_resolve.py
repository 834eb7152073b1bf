"""Locate the route table named on the command line.

``roost routes`` and ``roost match`` only need a ``RouteTable``, so the
import target may be any object a table can be taken from:

- a ``Router`` (its ``route_table``),
- a ``RouteTable``,
- a pages configuration, as passed to ``Router(pages=...)``,
- a zero-argument callable returning one of the above.

Without an attribute (``"myapp.routes"``) the module's ``router`` is
used, falling back to its ``pages``.
"""

import importlib
from collections.abc import Mapping
from typing import Any

from roost.errors import ConfigurationError
from roost.router import Router
from roost.routing.table import RouteTable

_DEFAULT_ATTRIBUTES = ("router", "pages")


def _attribute(module: Any, import_string: str, name: str) -> Any:
    if name:
        return getattr(module, name)
    for candidate in _DEFAULT_ATTRIBUTES:
        if hasattr(module, candidate):
            return getattr(module, candidate)
    msg = f"{import_string!r} defines neither 'router' nor 'pages'"
    raise AttributeError(msg)


def as_route_table(obj: Any, import_string: str) -> RouteTable:
    """Take a ``RouteTable`` from a router, a table or a pages configuration."""
    if isinstance(obj, Router):
        return obj.route_table
    if isinstance(obj, RouteTable):
        return obj
    if isinstance(obj, Mapping | list | tuple):
        try:
            return RouteTable(obj)
        except (ConfigurationError, TypeError, ValueError) as exc:
            msg = f"{import_string!r} is not a valid pages configuration: {exc}"
            raise TypeError(msg) from exc
    msg = (
        f"{import_string!r} resolved to {type(obj).__name__}; "
        "expected a roost Router, RouteTable or pages configuration"
    )
    raise TypeError(msg)


def resolve_route_table(import_string: str) -> RouteTable:
    """Import ``"module:attribute"`` and return its route table.

    Raises:
        ModuleNotFoundError: The module cannot be imported.
        AttributeError: The attribute (or both defaults) is missing.
        TypeError: The target holds no route table, or a factory raised.
    """
    module_path, _, name = import_string.partition(":")
    obj = _attribute(importlib.import_module(module_path), import_string, name)

    if callable(obj) and not isinstance(obj, Router | RouteTable):
        try:
            obj = obj()
        except Exception as exc:
            msg = f"Calling {import_string!r} failed: {exc}"
            raise TypeError(msg) from exc

    return as_route_table(obj, import_string)
