"""Module entries and the global module registry.

Every module instance the router creates is tracked by a ``ModuleEntry``.
Page-scoped entries live on their ``PageEntry`` and are rebuilt whenever
the page reloads. Global entries live in the ``GlobalModuleRegistry`` and
persist across navigations until a reset destroys them.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import Any

from roost.cache._state import LoadState
from roost.routing.route import ModuleDefinition


@dataclass(slots=True)
class ModuleEntry:
    """A module instance plus the router's view of its lifecycle.

    Attributes:
        element: The element composed into the page: the instance's
            ``el`` if it has one, else the element it was built with.
        active: True only between a successful ``show()`` and the next
            ``hide()``. Gates whether ``hide()`` is called at all.
        settled: Set once the in-flight load (success or failure) is over,
            so concurrent navigations wait instead of loading twice.
    """

    name: str
    definition: ModuleDefinition
    instance: Any
    element: Any
    state: LoadState = LoadState.UNLOADED
    active: bool = False
    error: Exception | None = None
    settled: asyncio.Event = field(default_factory=asyncio.Event, repr=False)

    @property
    def is_global(self) -> bool:
        return self.definition.global_


class GlobalModuleRegistry:
    """Module name → singleton ``ModuleEntry``.

    Usage::

        registry = GlobalModuleRegistry()
        registry.put(entry)
        registry.get("nav")
        [e.name for e in registry.active()]
    """

    __slots__ = ("_entries",)

    def __init__(self) -> None:
        self._entries: dict[str, ModuleEntry] = {}

    def get(self, name: str) -> ModuleEntry | None:
        return self._entries.get(name)

    def put(self, entry: ModuleEntry) -> None:
        """Register *entry*. A name can hold one singleton at a time."""
        existing = self._entries.get(entry.name)
        if existing is not None and existing is not entry:
            msg = f"Global module {entry.name!r} is already registered"
            raise ValueError(msg)
        self._entries[entry.name] = entry

    def evict(self, name: str) -> ModuleEntry | None:
        """Remove and return the entry for *name*, if any."""
        return self._entries.pop(name, None)

    def active(self) -> list[ModuleEntry]:
        """Entries currently shown, in registration order."""
        return [entry for entry in self._entries.values() if entry.active]

    def names(self) -> list[str]:
        return list(self._entries)

    def without(self, names: Iterable[str]) -> list[ModuleEntry]:
        """Entries whose name is not in *names*."""
        keep = set(names)
        return [entry for name, entry in self._entries.items() if name not in keep]

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __iter__(self) -> Iterator[ModuleEntry]:
        return iter(list(self._entries.values()))

    def __len__(self) -> int:
        return len(self._entries)
