"""Default page/module implementation.

Used whenever a route or module definition names no ``script``. It
implements the full capability set the router drives and fetches its
own resources over HTTP with httpx:

- ``styles`` — stylesheet URLs; their text lands in ``module.stylesheets``
- ``template`` — template URL; its text is stored on ``el.inner_html``
  verbatim (nothing is rendered)
- ``data`` — a URL whose JSON body becomes ``module.data``, or any
  non-string value used as-is

``request_options`` are passed to every request as httpx keyword
arguments (``headers``, ``params``, ``cookies``, ``timeout``...).

Subclass it for real pages::

    class ProfilePage(Module):
        @property
        def title(self) -> str:
            return f"Profile — {self.data['name']}"
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import anyio
import httpx

from roost._internal.results import StepResult, run_step
from roost.dom import Element

logger = logging.getLogger("roost.module")

# httpx request keyword arguments honoured from request_options
_REQUEST_KEYS = frozenset(
    {"headers", "params", "cookies", "timeout", "follow_redirects", "auth", "extensions"}
)


class Module:
    """A page or module that loads its own styles, template, and data.

    Args:
        el: The element this module owns. A fresh ``<div>`` when omitted.
        options: Construction options. Recognized keys: ``data``,
            ``template``, ``styles``, ``request_options``, ``http_client``,
            and the ``*_class`` names toggled by the lifecycle methods.
    """

    def __init__(self, el: Any = None, options: Mapping[str, Any] | None = None) -> None:
        self.el = el if el is not None else Element("div")
        self.options: dict[str, Any] = dict(options or {})
        self.active_class: str = self.options.get("active_class", "module-active")
        self.loaded_class: str = self.options.get("loaded_class", "module-loaded")
        self.disabled_class: str = self.options.get("disabled_class", "module-disabled")
        self.error_class: str = self.options.get("error_class", "module-error")

        self.data: Any = None
        self.stylesheets: list[str] = []
        self.loaded = False
        self.active = False
        self.disabled = False
        self.last_error: BaseException | None = None
        self._data_fetched = False

    # -- HTTP --

    @property
    def request_options(self) -> dict[str, Any]:
        options = self.options.get("request_options") or {}
        return {k: v for k, v in options.items() if k in _REQUEST_KEYS}

    async def _get(self, url: str) -> httpx.Response:
        client: httpx.AsyncClient | None = self.options.get("http_client")
        if client is not None:
            response = await client.get(url, **self.request_options)
        else:
            async with httpx.AsyncClient() as owned:
                response = await owned.get(url, **self.request_options)
        response.raise_for_status()
        return response

    # -- Capabilities --

    async def get_template(self) -> str:
        """Fetch the template text, or ``""`` without a template URL."""
        url = self.options.get("template")
        if not url:
            return ""
        response = await self._get(url)
        return response.text

    async def fetch_data(self) -> Any:
        """Fetch (once) and return this module's data."""
        if self._data_fetched:
            return self.data
        source = self.options.get("data")
        if isinstance(source, str):
            response = await self._get(source)
            self.data = response.json()
        else:
            self.data = source
        self._data_fetched = True
        return self.data

    async def _fetch_styles(self) -> list[str]:
        styles = self.options.get("styles") or ()
        if isinstance(styles, str):
            styles = (styles,)
        sheets: list[str] = []
        for url in styles:
            response = await self._get(url)
            sheets.append(response.text)
        return sheets

    async def load(self) -> None:
        """Fetch styles, template, and data concurrently.

        Raises the first failure after every fetch has settled.
        """
        results: dict[str, StepResult] = {}

        async def _run(key: str, func: Any) -> None:
            results[key] = await run_step(func)

        async with anyio.create_task_group() as tg:
            tg.start_soon(_run, "styles", self._fetch_styles)
            tg.start_soon(_run, "template", self.get_template)
            tg.start_soon(_run, "data", self.fetch_data)

        for key in ("styles", "template", "data"):
            if results[key].error is not None:
                logger.debug("%s: %s fetch failed", type(self).__name__, key)
                raise results[key].error

        self.stylesheets = results["styles"].value
        template = results["template"].value
        if template:
            self.el.inner_html = template
        self.el.class_list.add(self.loaded_class)
        self.loaded = True

    async def show(self) -> None:
        self.el.class_list.add(self.active_class)
        self.active = True

    async def hide(self) -> None:
        self.el.class_list.remove(self.active_class)
        self.active = False

    async def error(self, exc: BaseException) -> None:
        self.last_error = exc
        self.el.class_list.add(self.error_class)

    def enable(self) -> None:
        self.el.class_list.remove(self.disabled_class)
        self.disabled = False

    def disable(self) -> None:
        self.el.class_list.add(self.disabled_class)
        self.disabled = True

    def destroy(self) -> None:
        """Detach the element and drop lifecycle classes."""
        parent = getattr(self.el, "parent", None)
        if parent is not None:
            parent.remove_child(self.el)
        self.el.class_list.remove(
            self.active_class, self.loaded_class, self.disabled_class, self.error_class
        )
        self.loaded = False
        self.active = False
