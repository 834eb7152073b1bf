"""History adapter — the browser-history contract and an in-memory stand-in.

The router registers navigations with ``push_state``/``replace_state`` and
subscribes to ``popstate``. ``MemoryHistory`` implements the same
contract with a session-history stack, so back/forward traversal can be
driven without a browser::

    history = MemoryHistory(href="https://example.com/")
    router = Router(pages=..., history=history)
    router.start()
    await router.trigger_route("docs")
    history.back()      # fires popstate with the previous state
    await router.join()
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Protocol, TypeAlias
from urllib.parse import urljoin, urlsplit

PopStateListener: TypeAlias = Callable[["PopStateEvent"], Any]


@dataclass(frozen=True, slots=True)
class PopStateEvent:
    """Fired when the active history entry changes by traversal."""

    state: Any = None
    type: str = "popstate"


class Location(Protocol):
    """Read-only view of the current URL."""

    @property
    def href(self) -> str: ...
    @property
    def pathname(self) -> str: ...
    @property
    def hash(self) -> str: ...
    @property
    def hostname(self) -> str: ...


class HistoryAdapter(Protocol):
    """What the router needs from the host's session history."""

    @property
    def location(self) -> Location: ...

    def push_state(self, state: Any, title: str, url: str) -> None: ...
    def replace_state(self, state: Any, title: str, url: str) -> None: ...
    def add_event_listener(self, type: str, listener: PopStateListener) -> None: ...
    def remove_event_listener(self, type: str, listener: PopStateListener) -> None: ...


@dataclass(frozen=True, slots=True)
class UrlLocation:
    """A ``Location`` over an absolute URL string."""

    href: str

    @property
    def pathname(self) -> str:
        return urlsplit(self.href).path or "/"

    @property
    def hash(self) -> str:
        fragment = urlsplit(self.href).fragment
        return f"#{fragment}" if fragment else ""

    @property
    def hostname(self) -> str:
        return urlsplit(self.href).hostname or ""

    @property
    def search(self) -> str:
        query = urlsplit(self.href).query
        return f"?{query}" if query else ""


@dataclass(slots=True)
class _Entry:
    state: Any
    title: str
    href: str


@dataclass(slots=True)
class MemoryHistory:
    """Session history kept in memory.

    ``push_state`` drops any forward entries, like a browser does.
    ``back``/``forward``/``go`` move the cursor and fire ``popstate``
    synchronously to every listener.
    """

    href: str = "http://localhost/"
    _entries: list[_Entry] = field(default_factory=list, repr=False)
    _index: int = field(default=0, repr=False)
    _listeners: dict[str, list[PopStateListener]] = field(default_factory=dict, repr=False)

    def __post_init__(self) -> None:
        if not self._entries:
            self._entries.append(_Entry(state=None, title="", href=self.href))

    @property
    def location(self) -> UrlLocation:
        return UrlLocation(self._entries[self._index].href)

    @property
    def state(self) -> Any:
        return self._entries[self._index].state

    @property
    def length(self) -> int:
        return len(self._entries)

    @property
    def entries(self) -> list[tuple[Any, str]]:
        """``(state, href)`` pairs, oldest first."""
        return [(e.state, e.href) for e in self._entries]

    def _resolve(self, url: str) -> str:
        return urljoin(self._entries[self._index].href, url)

    def push_state(self, state: Any, title: str, url: str) -> None:
        del self._entries[self._index + 1 :]
        self._entries.append(_Entry(state=state, title=title, href=self._resolve(url)))
        self._index = len(self._entries) - 1

    def replace_state(self, state: Any, title: str, url: str) -> None:
        self._entries[self._index] = _Entry(state=state, title=title, href=self._resolve(url))

    def add_event_listener(self, type: str, listener: PopStateListener) -> None:
        listeners = self._listeners.setdefault(type, [])
        if listener not in listeners:
            listeners.append(listener)

    def remove_event_listener(self, type: str, listener: PopStateListener) -> None:
        listeners = self._listeners.get(type, [])
        if listener in listeners:
            listeners.remove(listener)

    def listener_count(self, type: str = "popstate") -> int:
        return len(self._listeners.get(type, []))

    def go(self, delta: int) -> None:
        """Move *delta* entries; out-of-range moves are ignored."""
        target = self._index + delta
        if delta == 0 or not 0 <= target < len(self._entries):
            return
        self._index = target
        event = PopStateEvent(state=self._entries[target].state)
        for listener in list(self._listeners.get("popstate", [])):
            listener(event)

    def back(self) -> None:
        self.go(-1)

    def forward(self) -> None:
        self.go(1)
