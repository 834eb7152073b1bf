"""Test doubles for roost applications.

``StubModule`` implements every page/module capability and records each
call, so navigation behaviour can be asserted without real pages::

    from roost.testing import RecordingFactory, StubModule

    page = StubModule()
    router = Router(pages={"^home$": {"script": "home"}}, resolver={"home": page})
    router.start()
    await router.trigger_route("home")
    assert page.count("load") == 1

``RecordingFactory`` stands in for a page class and remembers the
``(element, options)`` every instance was built with.
"""

import asyncio
from collections.abc import Callable, Mapping
from typing import Any

from roost.dom import Element


class StubModule:
    """A page or module that records lifecycle calls.

    Args:
        el: Element owned by the stub. A fresh ``<div>`` when omitted.
        options: Construction options, kept on ``self.options``.
        load_error: Raised from ``load()`` when set.
        fetch_error: Raised from ``fetch_data()`` when set.
        data: Returned from ``fetch_data()``.
        title: Exposed as the ``title`` attribute.
    """

    def __init__(
        self,
        el: Any = None,
        options: Mapping[str, Any] | None = None,
        *,
        load_error: Exception | None = None,
        fetch_error: Exception | None = None,
        data: Any = None,
        title: str | None = None,
    ) -> None:
        self.el = el if el is not None else Element("div")
        self.options: dict[str, Any] = dict(options or {})
        self.load_error = load_error
        self.fetch_error = fetch_error
        self.data = data
        self.title = title
        self.calls: list[str] = []
        self.errors: list[BaseException] = []
        self.load_gate: asyncio.Event | None = None
        self.fetch_gate: asyncio.Event | None = None

    def count(self, name: str) -> int:
        """How many times capability *name* was called."""
        return self.calls.count(name)

    def hold_load(self) -> asyncio.Event:
        """Make ``load()`` wait until the returned event is set."""
        self.load_gate = asyncio.Event()
        return self.load_gate

    def hold_fetch(self) -> asyncio.Event:
        """Make ``fetch_data()`` wait until the returned event is set."""
        self.fetch_gate = asyncio.Event()
        return self.fetch_gate

    async def load(self) -> None:
        self.calls.append("load")
        if self.load_gate is not None:
            await self.load_gate.wait()
        if self.load_error is not None:
            raise self.load_error

    async def fetch_data(self) -> Any:
        self.calls.append("fetch_data")
        if self.fetch_gate is not None:
            await self.fetch_gate.wait()
        if self.fetch_error is not None:
            raise self.fetch_error
        return self.data

    async def show(self) -> None:
        self.calls.append("show")

    async def hide(self) -> None:
        self.calls.append("hide")

    async def error(self, exc: BaseException) -> None:
        self.calls.append("error")
        self.errors.append(exc)

    def destroy(self) -> None:
        self.calls.append("destroy")


class RecordingFactory:
    """Callable page/module factory that records its arguments.

    Each call builds a new instance with *make* (``StubModule`` by
    default) and appends ``(element, options)`` to ``calls``.
    """

    def __init__(self, make: Callable[..., Any] | None = None) -> None:
        self.make = make or StubModule
        self.calls: list[tuple[Any, dict[str, Any]]] = []
        self.instances: list[Any] = []

    def __call__(self, el: Any, options: dict[str, Any]) -> Any:
        self.calls.append((el, options))
        instance = self.make(el, options)
        self.instances.append(instance)
        return instance

    @property
    def call_count(self) -> int:
        return len(self.calls)

    @property
    def last_options(self) -> dict[str, Any]:
        """Options of the most recent call. Raises IndexError before any."""
        return self.calls[-1][1]
