"""Ordered route table with first-match-wins regex matching.

Route patterns are regular expressions, tried in registration order.
The first pattern that matches anywhere in the path wins; specificity
plays no part, so more specific routes must be registered first.
"""

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any, TypeAlias

from roost.errors import ConfigurationError, RouteNotFound
from roost.routing.route import RouteDefinition, RouteMatch
from roost.url import route_key

PagesConfig: TypeAlias = (
    Mapping[str, Mapping[str, Any] | RouteDefinition | None]
    | Iterable[tuple[str, Mapping[str, Any] | RouteDefinition | None] | RouteDefinition]
)


@dataclass(frozen=True, slots=True)
class _CompiledRoute:
    regex: re.Pattern[str]
    definition: RouteDefinition


class RouteTable:
    """Ordered route table.

    Usage::

        table = RouteTable()
        table.add(RouteDefinition.from_config("^users$", {"script": "app:Users"}))
        table.add(RouteDefinition.from_config(r"^users/(\\d+)$", {"data": "/api/users/$1"}))
        match = table.resolve("/users/42")
        match.data  # "/api/users/42"
    """

    __slots__ = ("_routes",)

    def __init__(self, pages: PagesConfig | None = None) -> None:
        self._routes: list[_CompiledRoute] = []
        if pages is not None:
            self.extend(pages)

    def add(self, definition: RouteDefinition) -> None:
        """Append a definition. Compiles its pattern once."""
        try:
            regex = re.compile(definition.pattern)
        except re.error as exc:
            msg = f"Invalid route pattern {definition.pattern!r}: {exc}"
            raise ConfigurationError(msg) from exc
        self._routes.append(_CompiledRoute(regex, definition))

    def extend(self, pages: PagesConfig) -> None:
        """Add definitions from a mapping or an ordered list of pairs."""
        items = pages.items() if isinstance(pages, Mapping) else pages
        for item in items:
            if isinstance(item, RouteDefinition):
                self.add(item)
                continue
            pattern, config = item
            if isinstance(config, RouteDefinition):
                self.add(config)
            else:
                self.add(RouteDefinition.from_config(pattern, config))

    @property
    def definitions(self) -> list[RouteDefinition]:
        """All definitions in registration order."""
        return [route.definition for route in self._routes]

    def __len__(self) -> int:
        return len(self._routes)

    def find(self, path: str) -> RouteMatch | None:
        """Return the first match for *path*, or ``None``."""
        key = route_key(path)
        for route in self._routes:
            m = route.regex.search(key)
            if m is not None:
                return RouteMatch(definition=route.definition, path=key, groups=m.groups())
        return None

    def resolve(self, path: str) -> RouteMatch:
        """Match *path* against the table.

        Returns a ``RouteMatch`` on success.
        Raises ``RouteNotFound`` if no pattern matches.
        """
        match = self.find(path)
        if match is None:
            raise RouteNotFound(path)
        return match
