"""Shared fixtures for roost tests."""

from collections.abc import Callable, Iterator
from typing import Any

import pytest

from roost.config import RouterConfig
from roost.dom import Element
from roost.history import MemoryHistory
from roost.router import Router


@pytest.fixture
def history() -> MemoryHistory:
    return MemoryHistory(href="http://localhost/")


@pytest.fixture
def container() -> Element:
    return Element("main")


@pytest.fixture
def make_router(history: MemoryHistory, container: Element) -> Iterator[Callable[..., Router]]:
    """Build and start a Router with in-memory history and no show delay."""
    routers: list[Router] = []

    def _make(**kwargs: Any) -> Router:
        kwargs.setdefault("history", history)
        kwargs.setdefault("container", container)
        kwargs.setdefault("config", RouterConfig(show_delay=0))
        router = Router(**kwargs)
        router.start()
        routers.append(router)
        return router

    yield _make

    for router in routers:
        router.stop()
