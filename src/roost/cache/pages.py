"""Page entries and the page cache.

One ``PageEntry`` per canonical route key. An entry is created when a
navigation first instantiates the page, and lives until a reset destroys
it or its load fails.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

from roost.cache._state import LoadState
from roost.cache.modules import ModuleEntry
from roost.routing.route import RouteDefinition


@dataclass(slots=True)
class PageEntry:
    """A cached page instance.

    Attributes:
        key: Canonical route key (``route_key(path)``).
        element: The instance's ``el``, else the element it was built with.
            Referenced, not owned: destroying the instance is what frees it.
        modules: Page-scoped module entries from the most recent load,
            in declared order.
        signature: The ``data`` option of the most recent load. A
            navigation with different data reloads the page.
    """

    key: str
    definition: RouteDefinition
    instance: Any
    element: Any
    signature: Any = None
    modules: list[ModuleEntry] = field(default_factory=list)
    state: LoadState = LoadState.UNLOADED
    error: Exception | None = None
    settled: asyncio.Event = field(default_factory=asyncio.Event, repr=False)

    def matches(self, signature: Any) -> bool:
        """True if a navigation with *signature* can reuse this entry."""
        return self.state.is_ready and self.signature == signature


class PageCache:
    """Route key → ``PageEntry``.

    Usage::

        cache = PageCache()
        cache.put(entry)
        cache.get("profile/32")
        cache.evict("profile/32")
    """

    __slots__ = ("_entries",)

    def __init__(self) -> None:
        self._entries: dict[str, PageEntry] = {}

    def get(self, key: str) -> PageEntry | None:
        return self._entries.get(key)

    def put(self, entry: PageEntry) -> None:
        """Cache *entry*. A key holds at most one page instance."""
        existing = self._entries.get(entry.key)
        if existing is not None and existing is not entry:
            msg = f"Page {entry.key!r} is already cached"
            raise ValueError(msg)
        self._entries[entry.key] = entry

    def evict(self, key: str, entry: PageEntry | None = None) -> PageEntry | None:
        """Remove and return the entry for *key*.

        With *entry* given, only evicts if the cached entry is that one.
        """
        current = self._entries.get(key)
        if current is None or (entry is not None and current is not entry):
            return None
        return self._entries.pop(key)

    def keys(self) -> list[str]:
        return list(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __iter__(self) -> Iterator[PageEntry]:
        return iter(list(self._entries.values()))

    def __len__(self) -> int:
        return len(self._entries)
