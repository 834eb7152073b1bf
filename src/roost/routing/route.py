"""RouteDefinition, ModuleDefinition and RouteMatch frozen dataclasses.

Definitions are usually written as plain mappings (the way a settings
file would declare them) and normalized with ``from_config()``::

    RouteDefinition.from_config(
        r"^profile/([0-9]+)$",
        {"script": "app.pages:Profile", "data": "https://api/profile/$1"},
    )
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from roost.errors import ConfigurationError

_PLACEHOLDER = re.compile(r"\$(\d+)")


def _empty() -> Mapping[str, Any]:
    return MappingProxyType({})


# Config keys accepted for pages; camelCase spellings map to snake_case
_PAGE_ALIASES = {
    "customPageClass": "custom_page_class",
    "requestOptions": "request_options",
}
_PAGE_FIELDS = frozenset(
    {
        "script",
        "data",
        "modules",
        "template",
        "styles",
        "title",
        "custom_page_class",
        "request_options",
    }
)

_MODULE_ALIASES = {
    "global": "global_",
    "requestOptions": "request_options",
}
_MODULE_FIELDS = frozenset(
    {"script", "global_", "el", "options", "request_options", "template"}
)


def _normalize_keys(
    config: Mapping[str, Any],
    aliases: Mapping[str, str],
) -> dict[str, Any]:
    return {aliases.get(key, key): value for key, value in config.items()}


def _as_tuple(value: Any, what: str) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    if isinstance(value, Iterable):
        return tuple(value)
    msg = f"{what} must be a string or a list of strings, got {type(value).__name__}"
    raise ConfigurationError(msg)


def _frozen_mapping(value: Any, what: str) -> Mapping[str, Any]:
    if value is None:
        return _empty()
    if not isinstance(value, Mapping):
        msg = f"{what} must be a mapping, got {type(value).__name__}"
        raise ConfigurationError(msg)
    return MappingProxyType(dict(value))


@dataclass(frozen=True, slots=True)
class RouteDefinition:
    """A frozen page route definition.

    Attributes:
        pattern: Regular expression source. Never anchored implicitly —
            write ``^`` and ``$`` where you need them.
        script: Script identifier resolved to the page factory. ``None``
            uses the default ``roost.module.Module``.
        data: Data source handed to the page. String values may carry
            ``$1``, ``$2``... placeholders bound to capture groups.
        modules: Module names composed into the page, in order.
        custom_page_class: Space-separated CSS classes for the page element.
        request_options: Page-level request options; win over router-level.
        extra: Any other configured key, passed through to the page.
    """

    pattern: str
    script: str | None = None
    data: Any = None
    modules: tuple[str, ...] = ()
    template: str | None = None
    styles: tuple[str, ...] = ()
    title: str | None = None
    custom_page_class: str | None = None
    request_options: Mapping[str, Any] = field(default_factory=_empty)
    extra: Mapping[str, Any] = field(default_factory=_empty)

    @classmethod
    def from_config(cls, pattern: str, config: Mapping[str, Any] | None) -> RouteDefinition:
        """Build a definition from a configuration mapping."""
        if config is None:
            config = {}
        if not isinstance(config, Mapping):
            msg = f"Route {pattern!r}: configuration must be a mapping"
            raise ConfigurationError(msg)
        values = _normalize_keys(config, _PAGE_ALIASES)
        known = {k: v for k, v in values.items() if k in _PAGE_FIELDS}
        extra = {k: v for k, v in values.items() if k not in _PAGE_FIELDS}
        return cls(
            pattern=pattern,
            script=known.get("script"),
            data=known.get("data"),
            modules=_as_tuple(known.get("modules"), f"Route {pattern!r} modules"),
            template=known.get("template"),
            styles=_as_tuple(known.get("styles"), f"Route {pattern!r} styles"),
            title=known.get("title"),
            custom_page_class=known.get("custom_page_class"),
            request_options=_frozen_mapping(
                known.get("request_options"), f"Route {pattern!r} request_options"
            ),
            extra=MappingProxyType(extra),
        )

    @property
    def css_classes(self) -> tuple[str, ...]:
        """Custom page classes split on whitespace."""
        if not self.custom_page_class:
            return ()
        return tuple(self.custom_page_class.split())


@dataclass(frozen=True, slots=True)
class ModuleDefinition:
    """A frozen module definition.

    Attributes:
        name: Key the module is referenced by from page definitions.
        global_: Singleton shared by every page that declares it.
        el: Fixed mount element for a global module.
        options: Options merged into the module constructor's options.
    """

    name: str
    script: str | None = None
    global_: bool = False
    el: Any = None
    options: Mapping[str, Any] = field(default_factory=_empty)
    request_options: Mapping[str, Any] = field(default_factory=_empty)
    template: str | None = None
    extra: Mapping[str, Any] = field(default_factory=_empty)

    @classmethod
    def from_config(cls, name: str, config: Mapping[str, Any] | None) -> ModuleDefinition:
        """Build a definition from a configuration mapping."""
        if config is None:
            config = {}
        if not isinstance(config, Mapping):
            msg = f"Module {name!r}: configuration must be a mapping"
            raise ConfigurationError(msg)
        values = _normalize_keys(config, _MODULE_ALIASES)
        known = {k: v for k, v in values.items() if k in _MODULE_FIELDS}
        extra = {k: v for k, v in values.items() if k not in _MODULE_FIELDS}
        return cls(
            name=name,
            script=known.get("script"),
            global_=bool(known.get("global_", False)),
            el=known.get("el"),
            options=_frozen_mapping(known.get("options"), f"Module {name!r} options"),
            request_options=_frozen_mapping(
                known.get("request_options"), f"Module {name!r} request_options"
            ),
            template=known.get("template"),
            extra=MappingProxyType(extra),
        )


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route match."""

    definition: RouteDefinition
    path: str
    groups: tuple[str | None, ...] = ()

    def expand(self, template: str) -> str:
        """Substitute ``$N`` placeholders with capture group *N*.

        Unmatched or out-of-range groups substitute as an empty string.
        ``$0`` is left untouched.
        """

        def _sub(m: re.Match[str]) -> str:
            index = int(m.group(1))
            if index == 0:
                return m.group(0)
            if index > len(self.groups):
                return ""
            return self.groups[index - 1] or ""

        return _PLACEHOLDER.sub(_sub, template)

    @property
    def data(self) -> Any:
        """The definition's data with placeholders expanded."""
        data = self.definition.data
        if isinstance(data, str):
            return self.expand(data)
        return data
