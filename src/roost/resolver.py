"""Script resolution — turns a script identifier into a page or module.

A resolver maps the ``script`` of a route or module definition to either
a factory (a class, or a callable returning an instance) or a ready
instance. Factories are called as ``factory(element, options)``.

Two resolvers ship with roost:

- ``ImportResolver`` — ``"package.module:attribute"`` import strings.
- ``RegistryResolver`` — an explicit name → object mapping.
"""

import importlib
from collections.abc import Mapping
from typing import Any, Protocol

from roost._internal.invoke import is_factory
from roost.errors import ScriptResolutionError


class ScriptResolver(Protocol):
    """Protocol for script resolvers.

    Accepts any object with a synchronous ``resolve`` method::

        class Scripts:
            def resolve(self, script: str) -> Any:
                return {"home": HomePage}[script]
    """

    def resolve(self, script: str) -> Any: ...


class ImportResolver:
    """Resolve ``"module:attribute"`` import strings.

    When the attribute portion is omitted the module itself is returned.
    Dotted attributes (``"pkg.pages:Admin.Dashboard"``) are followed.
    Results are cached per script identifier.
    """

    __slots__ = ("_cache",)

    def __init__(self) -> None:
        self._cache: dict[str, Any] = {}

    def resolve(self, script: str) -> Any:
        if script in self._cache:
            return self._cache[script]

        module_path, _, attr_path = script.partition(":")
        try:
            obj: Any = importlib.import_module(module_path)
        except ImportError as exc:
            raise ScriptResolutionError(script, f"Cannot import {module_path!r}: {exc}") from exc

        for attr in filter(None, attr_path.split(".")):
            try:
                obj = getattr(obj, attr)
            except AttributeError as exc:
                msg = f"{script!r}: {type(obj).__name__} has no attribute {attr!r}"
                raise ScriptResolutionError(script, msg) from exc

        self._cache[script] = obj
        return obj


class RegistryResolver:
    """Resolve scripts from an explicit mapping.

    Usage::

        resolver = RegistryResolver({"home": HomePage, "nav": nav_instance})
        resolver.register("profile", ProfilePage)
    """

    __slots__ = ("_registry",)

    def __init__(self, registry: Mapping[str, Any] | None = None) -> None:
        self._registry: dict[str, Any] = dict(registry or {})

    def register(self, script: str, target: Any) -> None:
        self._registry[script] = target

    def resolve(self, script: str) -> Any:
        try:
            return self._registry[script]
        except KeyError:
            raise ScriptResolutionError(script, f"No script registered as {script!r}") from None


def as_resolver(resolver: ScriptResolver | Mapping[str, Any] | None) -> ScriptResolver:
    """Normalize the ``resolver=`` argument of ``Router``."""
    if resolver is None:
        return ImportResolver()
    if isinstance(resolver, Mapping):
        return RegistryResolver(resolver)
    return resolver


def instantiate(target: Any, element: Any, options: dict[str, Any]) -> Any:
    """Produce an instance from a resolved script.

    Factories are called with ``(element, options)``; anything else is
    already an instance and is returned unchanged.
    """
    if is_factory(target):
        return target(element, options)
    return target
