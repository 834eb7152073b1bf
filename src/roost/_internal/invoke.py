"""Invoke helpers — call sync or async collaborators uniformly.

Pages, modules and router callbacks can be ``def`` or ``async def``, and
page/module instances are duck-typed: any capability they lack is a
no-op, never an error. This module keeps both checks in one place.

Usage::

    from roost._internal.invoke import call_capability, invoke

    result = await invoke(callback, router, path)
    await call_capability(page, "show")
"""

import inspect
from typing import Any


async def invoke(handler: Any, *args: Any, **kwargs: Any) -> Any:
    """Call a handler and await the result if it's awaitable."""
    result = handler(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result


def has_capability(instance: Any, name: str) -> bool:
    """Return True if *instance* exposes a callable *name*."""
    return callable(getattr(instance, name, None))


async def call_capability(instance: Any, name: str, *args: Any) -> Any:
    """Call ``instance.<name>(*args)`` if present, awaiting the result.

    Returns ``None`` without calling anything when the instance does not
    implement the capability.
    """
    method = getattr(instance, name, None)
    if not callable(method):
        return None
    return await invoke(method, *args)


def is_factory(obj: Any) -> bool:
    """Return True if *obj* should be called to produce an instance.

    Classes are always factories. Other callables are factories unless
    they already look like an instance (they expose ``load``).
    """
    if inspect.isclass(obj):
        return True
    return callable(obj) and not has_capability(obj, "load")
