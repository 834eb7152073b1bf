"""Router — the navigation orchestrator.

Resolves a path to a page definition, instantiates and caches the page
and its modules, and drives their load/show/hide/destroy lifecycle while
keeping session history in step::

    router = Router(
        pages={
            r"^profile/([0-9]+)$": {
                "script": "app.pages:Profile",
                "data": "https://api.example.com/profile/$1",
                "modules": ["nav"],
            },
            "^home$": {"script": "app.pages:Home", "title": "Home"},
        },
        modules={"nav": {"script": "app.modules:Nav", "global": True}},
        container=Element("main"),
    )
    router.start()
    await router.trigger_route("profile/32")

Application-level failures never propagate out of ``trigger_route``:
unknown routes and page load failures are reported through
``on_route_error``, module failures through the module's own ``error()``.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Coroutine, Iterable, Iterator, Mapping
from dataclasses import dataclass
from typing import Any

import anyio

from roost._internal.invoke import call_capability, has_capability, invoke
from roost._internal.results import StepResult, run_step
from roost._internal.types import Callback, Options
from roost.cache import GlobalModuleRegistry, LoadState, ModuleEntry, PageCache, PageEntry
from roost.config import RouterConfig
from roost.dom import Document, Element, Event
from roost.errors import ConfigurationError, ModuleDefinitionNotFound, RouteNotFound
from roost.history import HistoryAdapter, MemoryHistory
from roost.module import Module
from roost.resolver import ScriptResolver, as_resolver, instantiate
from roost.routing.route import ModuleDefinition, RouteDefinition
from roost.routing.table import PagesConfig, RouteTable
from roost.url import QueryParams, route_key, split_params, strip_leading_slash

logger = logging.getLogger("roost.router")
modules_logger = logging.getLogger("roost.modules")


@dataclass(frozen=True, slots=True)
class NavigationRequest:
    """One ``trigger_route`` call, numbered in issue order."""

    path: str
    query: QueryParams
    sequence: int
    replace: bool = False
    trigger_url_change: bool = True
    data: Any = None


class Router:
    """Client-side navigation orchestrator.

    Args:
        config: Tunables (show delay, page CSS classes, link interception).
        pages: Route definitions in priority order, as a mapping or a list
            of ``(pattern, definition)`` pairs. The first match wins.
        modules: Module definitions by name.
        container: Element pages are attached to while shown.
        history: Session history. A ``MemoryHistory`` when omitted.
        resolver: ``ScriptResolver`` or a name → object mapping. Import
            strings (``"pkg.mod:Attr"``) when omitted.
        document: Receives the title of the shown page.
        request_options: Defaults merged under every page's and module's
            ``request_options``.
        http_client: ``httpx.AsyncClient`` handed to default ``Module``
            instances.
        on_route_change: ``(router, path)`` at the start of every navigation.
        on_page_load: ``(router, path)`` once a page is loaded.
        on_route_error: ``(router, exc)`` for unknown routes and page failures.
        on_route_request: ``(router, path) -> path`` to redirect a navigation.
    """

    def __init__(
        self,
        config: RouterConfig | None = None,
        *,
        pages: PagesConfig = (),
        modules: Mapping[str, Mapping[str, Any] | ModuleDefinition | None] | None = None,
        container: Any = None,
        history: HistoryAdapter | None = None,
        resolver: ScriptResolver | Mapping[str, Any] | None = None,
        document: Document | None = None,
        request_options: Mapping[str, Any] | None = None,
        http_client: Any = None,
        on_route_change: Callback | None = None,
        on_page_load: Callback | None = None,
        on_route_error: Callback | None = None,
        on_route_request: Callback | None = None,
    ) -> None:
        self.config = config or RouterConfig()
        self.route_table = RouteTable(pages)
        self.module_definitions: dict[str, ModuleDefinition] = {}
        for name, definition in (modules or {}).items():
            if not isinstance(definition, ModuleDefinition):
                definition = ModuleDefinition.from_config(name, definition)
            self.module_definitions[name] = definition

        self.container = container if container is not None else Element("div")
        self.history: HistoryAdapter = history if history is not None else MemoryHistory()
        self.resolver = as_resolver(resolver)
        self.document = document if document is not None else Document()
        self.request_options: dict[str, Any] = dict(request_options or {})
        self.http_client = http_client

        self.on_route_change = on_route_change
        self.on_page_load = on_page_load
        self.on_route_error = on_route_error
        self.on_route_request = on_route_request

        self._pages = PageCache()
        self._global_modules = GlobalModuleRegistry()
        self._active: PageEntry | None = None
        self._current_url: str | None = None
        self._initial_title = ""
        self._started = False
        self._sequence = 0
        self._last_request: NavigationRequest | None = None
        self._bound: list[Any] = []
        self._tasks: set[asyncio.Task[Any]] = set()

    # -- Lifecycle --

    def start(self) -> None:
        """Capture the document title and subscribe to popstate."""
        if self._started:
            return
        self._initial_title = self.document.title
        self.history.add_event_listener("popstate", self._on_popstate)
        self._started = True
        logger.debug("Router started (%d routes)", len(self.route_table))

    def stop(self) -> None:
        """Unsubscribe from popstate and unbind link interception.

        Cached pages and modules are left untouched.
        """
        if not self._started:
            return
        self.history.remove_event_listener("popstate", self._on_popstate)
        for element in list(self._bound):
            self._unbind_links(element)
        self._started = False
        logger.debug("Router stopped")

    async def join(self) -> None:
        """Wait for navigations spawned by popstate and link clicks.

        Failures of those navigations are logged when they finish, not
        raised here.
        """
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    # -- Properties --

    @property
    def pages(self) -> PageCache:
        return self._pages

    @property
    def global_modules(self) -> GlobalModuleRegistry:
        return self._global_modules

    @property
    def active_page(self) -> PageEntry | None:
        return self._active

    @property
    def active_path(self) -> str | None:
        return self._active.key if self._active is not None else None

    @property
    def last_request(self) -> NavigationRequest | None:
        return self._last_request

    # -- Navigation --

    async def trigger_route(
        self,
        path: str,
        *,
        replace: bool = False,
        trigger_url_change: bool = True,
        data: Any = None,
    ) -> None:
        """Navigate to *path*.

        Returns once the target page is shown, or once the failure has been
        reported. Raises ``ConfigurationError`` if the router is not started.
        """
        if not self._started:
            msg = "Router.start() must be called before trigger_route()"
            raise ConfigurationError(msg)

        self._sequence += 1
        request = NavigationRequest(
            path=path,
            query=QueryParams.from_url(path),
            sequence=self._sequence,
            replace=replace,
            trigger_url_change=trigger_url_change,
            data=data,
        )
        self._last_request = request
        self._current_url = strip_leading_slash(path)
        logger.log(
            logging.INFO if self.config.log_navigation else logging.DEBUG,
            "Navigating to %r (#%d)",
            path,
            request.sequence,
        )
        await self._fire(self.on_route_change, path)

        if self.route_table.find(path) is None:
            logger.debug("No route matches %r", path)
            await self._fire(self.on_route_error, RouteNotFound(path))
            return

        target = path
        if self.on_route_request is not None:
            requested = await invoke(self.on_route_request, self, path)
            if requested and requested != path:
                logger.debug("Route request for %r redirected to %r", path, requested)
                target = requested

        if trigger_url_change:
            self.register_url(path, replace=replace)

        entry = await self.load_page(target, data=data)

        if self._is_stale(request):
            logger.debug("Navigation to %r superseded by #%d", path, self._sequence)
            return
        if target != path and trigger_url_change:
            self.register_url(target)
        if entry is None:
            return

        if self._active is None:
            # Previous page went away without a hide (reset or failed reload)
            await self._hide_global_modules(target)
        elif self._active is not entry:
            await self._hide_entry(self._active, next_path=target)
        if self._is_stale(request):
            logger.debug("Navigation to %r superseded by #%d", path, self._sequence)
            return
        await self.show_page(target)

    def _is_stale(self, request: NavigationRequest) -> bool:
        return request.sequence != self._sequence

    async def load_page(self, path: str, *, data: Any = None) -> PageEntry | None:
        """Load the page for *path* and its modules.

        Reuses the cached page when its data is unchanged. A cached page
        whose data changed is replaced only once the new instance has
        loaded. Returns the page entry, or ``None`` when the route is
        unknown or the page failed (the failure is reported through
        ``on_route_error``).
        """
        sequence = self._sequence
        match = self.route_table.find(path)
        if match is None:
            await self._fire(self.on_route_error, RouteNotFound(path))
            return None

        definition = match.definition
        key = match.path
        signature = data if data is not None else match.data
        request_options = {**self.request_options, **definition.request_options}

        entry = self._pages.get(key)
        if entry is not None and entry.state is LoadState.LOADING:
            await entry.settled.wait()
            entry = self._pages.get(key)

        if entry is not None:
            if entry.matches(signature):
                await self._load_global_modules(definition, request_options)
                await self._fire(self.on_page_load, path)
                return entry
            logger.debug("Reloading %r: data changed", key)
            self._pages.evict(key, entry)
        previous = entry

        options = self._page_options(definition, signature, request_options)
        placeholder = Element("div")
        try:
            instance = instantiate(self._resolve_script(definition.script), placeholder, options)
        except Exception as exc:
            await self._page_failed(key, exc, previous, sequence)
            return None

        element = _element_of(instance, placeholder)
        element.class_list.add(self.config.page_class, *definition.css_classes)
        entry = PageEntry(
            key=key,
            definition=definition,
            instance=instance,
            element=element,
            signature=signature,
            state=LoadState.LOADING,
        )
        self._pages.put(entry)

        module_entries = self._create_modules(definition, request_options, scoped=True)
        entry.modules = [m for m in module_entries if not m.is_global]
        for module in module_entries:
            self._compose(entry, module)

        page_result: StepResult | None = None

        async with anyio.create_task_group() as tg:
            async def _load_page_instance() -> None:
                nonlocal page_result
                page_result = await run_step(call_capability, instance, "load")

            tg.start_soon(_load_page_instance)
            for module in module_entries:
                tg.start_soon(self._load_module, module)

        entry.settled.set()
        if page_result is not None and page_result.error is not None:
            entry.state = LoadState.FAILED
            entry.error = page_result.error
            self._pages.evict(key, entry)
            await self._page_failed(key, page_result.error, previous, sequence)
            return None

        entry.state = LoadState.LOADED
        if previous is not None:
            await self._destroy_page(previous)
        await self._fire(self.on_page_load, path)
        return entry

    async def _page_failed(
        self, key: str, exc: Exception, previous: PageEntry | None, sequence: int
    ) -> None:
        """Report a page failure and put back what was visible before.

        A replaced entry returns to the cache. The active page is shown
        again unless a newer navigation started meanwhile.
        """
        logger.warning("Page %r failed to load", key, exc_info=exc)
        if previous is not None and key not in self._pages:
            self._pages.put(previous)
        await self._fire(self.on_route_error, exc)
        if sequence != self._sequence:
            logger.debug("Not restoring after %r: navigation superseded", key)
            return
        if self._active is not None:
            await self.show_page(self._active.key)

    async def show_page(self, path: str) -> None:
        """Attach the cached page for *path* and show it with its modules.

        Waits for module loads (including ``fetch_data``) and
        ``RouterConfig.show_delay`` before calling ``show()``.
        """
        entry = self._pages.get(route_key(path))
        if entry is None:
            logger.debug("show_page(%r): page not cached", path)
            return

        if entry.element.parent is not self.container:
            self.container.append_child(entry.element)
        modules = list(self._modules_of(entry))
        for module in modules:
            self._compose(entry, module)

        for module in modules:
            if module.state is LoadState.LOADING:
                await module.settled.wait()
        await anyio.sleep(self.config.show_delay)

        await self._call(entry.instance, "show", what=f"page {entry.key!r}")
        entry.state = LoadState.SHOWN
        self._active = entry
        self._bind_links(entry.element)

        for module in modules:
            if not module.state.is_ready:
                continue
            if await self._call(module.instance, "show", what=f"module {module.name!r}"):
                module.state = LoadState.SHOWN
                if module.is_global:
                    module.active = True
                    self._bind_links(module.element)

        self._update_title(entry)

    async def hide_page(self, path: str, *, next_path: str | None = None) -> None:
        """Hide the cached page for *path* and detach it from the container.

        Active global modules not required by the page at *next_path* are
        hidden too.
        """
        entry = self._pages.get(route_key(path))
        if entry is None:
            return
        await self._hide_entry(entry, next_path=next_path)

    async def _hide_entry(self, entry: PageEntry, *, next_path: str | None) -> None:
        await self._call(entry.instance, "hide", what=f"page {entry.key!r}")
        entry.state = LoadState.HIDDEN
        self._unbind_links(entry.element)

        for module in entry.modules:
            if module.state is LoadState.SHOWN:
                await self._call(module.instance, "hide", what=f"module {module.name!r}")
                module.state = LoadState.HIDDEN

        await self._hide_global_modules(next_path)

        if entry.element.parent is not None:
            entry.element.parent.remove_child(entry.element)
        if self._active is entry:
            self._active = None

    async def _hide_global_modules(self, next_path: str | None) -> None:
        required: set[str] = set()
        if next_path is not None:
            definition = self.get_page_config_by_path(next_path)
            if definition is not None:
                required = set(definition.modules)
        for module in self._global_modules.active():
            if module.name in required:
                continue
            await self._call(module.instance, "hide", what=f"module {module.name!r}")
            module.active = False
            module.state = LoadState.HIDDEN
            self._unbind_links(module.element)

    # -- Modules --

    def _module_definition(self, name: str) -> ModuleDefinition:
        try:
            return self.module_definitions[name]
        except KeyError:
            raise ModuleDefinitionNotFound(name) from None

    def _create_modules(
        self,
        definition: RouteDefinition,
        request_options: Mapping[str, Any],
        *,
        scoped: bool,
    ) -> list[ModuleEntry]:
        """Module entries for *definition* in declared order.

        Global modules come from the registry, created on first use.
        Page-scoped modules are created fresh when *scoped* is True.
        """
        entries: list[ModuleEntry] = []
        for name in definition.modules:
            try:
                module_def = self._module_definition(name)
            except ModuleDefinitionNotFound as exc:
                modules_logger.warning("Page %r: %s; skipping", definition.pattern, exc)
                continue

            if module_def.global_:
                existing = self._global_modules.get(name)
                if existing is not None:
                    entries.append(existing)
                    continue
            elif not scoped:
                continue

            module = self._create_module(module_def, request_options)
            if module is None:
                continue
            if module.is_global:
                self._global_modules.put(module)
            entries.append(module)
        return entries

    def _create_module(
        self, definition: ModuleDefinition, request_options: Mapping[str, Any]
    ) -> ModuleEntry | None:
        element = definition.el if definition.el is not None else Element("div")
        options = self._module_options(definition, request_options)
        try:
            instance = instantiate(self._resolve_script(definition.script), element, options)
        except Exception:
            modules_logger.warning("Module %r could not be created", definition.name, exc_info=True)
            return None
        return ModuleEntry(
            name=definition.name,
            definition=definition,
            instance=instance,
            element=_element_of(instance, element),
        )

    async def _load_global_modules(
        self, definition: RouteDefinition, request_options: Mapping[str, Any]
    ) -> None:
        modules = self._create_modules(definition, request_options, scoped=False)
        if not modules:
            return
        async with anyio.create_task_group() as tg:
            for module in modules:
                tg.start_soon(self._load_module, module)

    async def _load_module(self, module: ModuleEntry) -> None:
        """Load *module* once; concurrent callers wait for the first load."""
        if module.state is LoadState.LOADING:
            await module.settled.wait()
            return
        if module.state is not LoadState.UNLOADED:
            return

        module.state = LoadState.LOADING
        result = await run_step(_load_and_fetch, module.instance)
        if result.ok:
            module.state = LoadState.LOADED
            module.settled.set()
            return

        module.state = LoadState.FAILED
        module.error = result.error
        if module.is_global and self._global_modules.get(module.name) is module:
            self._global_modules.evict(module.name)
        module.settled.set()
        modules_logger.warning("Module %r failed to load: %s", module.name, result.error)
        await self._call(module.instance, "error", result.error, what=f"module {module.name!r}")

    def _modules_of(self, entry: PageEntry) -> Iterator[ModuleEntry]:
        """Page-scoped and global module entries of *entry* in declared order."""
        scoped = {module.name: module for module in entry.modules}
        for name in entry.definition.modules:
            module = scoped.get(name) or self._global_modules.get(name)
            if module is not None:
                yield module

    def _compose(self, entry: PageEntry, module: ModuleEntry) -> None:
        # Global modules with a fixed mount element stay where they live
        if module.is_global and module.definition.el is not None:
            return
        if module.element is entry.element or module.element.contains(entry.element):
            return
        entry.element.append_child(module.element)

    # -- Reset --

    async def reset(self) -> None:
        """Destroy every cached page and global module except the active set.

        The active page and the global modules its definition requires
        survive.
        """
        active = self._active
        required = set(active.definition.modules) if active is not None else set()
        for entry in self._pages:
            if entry is not active:
                await self._destroy_page(entry)
        for module in self._global_modules.without(required):
            await self._destroy_module(module)

    async def reset_page(self, paths: str | Iterable[str]) -> None:
        """Destroy the cached page(s) for *paths*, active or not."""
        for path in _names(paths):
            entry = self._pages.get(route_key(path))
            if entry is not None:
                await self._destroy_page(entry)

    async def reset_global_module(self, names: str | Iterable[str]) -> None:
        """Destroy the named global module(s)."""
        for name in _names(names):
            module = self._global_modules.get(name)
            if module is not None:
                await self._destroy_module(module)

    async def _destroy_page(self, entry: PageEntry) -> None:
        self._pages.evict(entry.key, entry)
        if self._active is entry:
            self._active = None
        self._unbind_links(entry.element)
        for module in entry.modules:
            await self._call(module.instance, "destroy", what=f"module {module.name!r}")
            module.state = LoadState.UNLOADED
        await self._call(entry.instance, "destroy", what=f"page {entry.key!r}")
        entry.state = LoadState.UNLOADED
        if entry.element.parent is not None:
            entry.element.parent.remove_child(entry.element)
        logger.debug("Destroyed page %r", entry.key)

    async def _destroy_module(self, module: ModuleEntry) -> None:
        self._global_modules.evict(module.name)
        self._unbind_links(module.element)
        module.active = False
        await self._call(module.instance, "destroy", what=f"module {module.name!r}")
        module.state = LoadState.UNLOADED
        if module.definition.el is None and module.element.parent is not None:
            module.element.parent.remove_child(module.element)
        modules_logger.debug("Destroyed global module %r", module.name)

    # -- Queries --

    def get_query_params(self, url: str | None = None) -> QueryParams:
        """Query parameters of *url*, or of the current location."""
        if url is None:
            url = self.history.location.href
        return QueryParams.from_url(url)

    def get_relative_url(self) -> str:
        """The current path without its leading slash.

        Before any navigation, taken from the location hash if present,
        else from the location path.
        """
        if self._current_url is not None:
            return self._current_url
        location = self.history.location
        if location.hash:
            return strip_leading_slash(location.hash[1:])
        return strip_leading_slash(location.pathname)

    def get_relative_url_params(self) -> list[str]:
        """Segments of ``get_relative_url()``."""
        return split_params(self.get_relative_url())

    def get_page_config_by_path(self, path: str) -> RouteDefinition | None:
        """Definition of the first route matching *path*, or ``None``."""
        match = self.route_table.find(path)
        return match.definition if match is not None else None

    def register_url(self, path: str, *, replace: bool = False) -> str:
        """Write *path* to history and make it the current URL."""
        state = {"path": path}
        if replace:
            self.history.replace_state(state, "", path)
        else:
            self.history.push_state(state, "", path)
        self._current_url = strip_leading_slash(path)
        return path

    # -- Events --

    def _spawn(self, coro: Coroutine[Any, Any, Any]) -> None:
        task = asyncio.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._task_done)

    def _task_done(self, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Spawned navigation failed", exc_info=exc)

    def _on_popstate(self, event: Any) -> None:
        state = getattr(event, "state", None)
        path = state.get("path") if isinstance(state, Mapping) else None
        if not path:
            return
        logger.debug("popstate → %r", path)
        self._spawn(self.trigger_route(path, trigger_url_change=False))

    def _on_click(self, event: Event) -> None:
        if event.default_prevented:
            return
        target = event.target
        anchor = target.closest("a") if target is not None else None
        if anchor is None:
            return
        owner = event.current_target
        if owner is not None and not owner.contains(anchor):
            return
        href = anchor.get_attribute("href")
        if not href:
            return
        event.prevent_default()
        self._spawn(self.trigger_route(href))

    def _bind_links(self, element: Any) -> None:
        if not self.config.intercept_links or not has_capability(element, "add_event_listener"):
            return
        element.add_event_listener("click", self._on_click, capture=True)
        if element not in self._bound:
            self._bound.append(element)

    def _unbind_links(self, element: Any) -> None:
        if element not in self._bound:
            return
        element.remove_event_listener("click", self._on_click, capture=True)
        self._bound.remove(element)

    # -- Helpers --

    async def _fire(self, callback: Callback | None, *args: Any) -> None:
        if callback is not None:
            await invoke(callback, self, *args)

    async def _call(self, instance: Any, name: str, *args: Any, what: str) -> bool:
        """Call an optional capability; log and return False if it raises."""
        result = await run_step(call_capability, instance, name, *args)
        if not result.ok:
            modules_logger.warning("%s: %s() raised %r", what, name, result.error)
        return result.ok

    def _resolve_script(self, script: str | None) -> Any:
        if script is None:
            return Module
        return self.resolver.resolve(script)

    def _page_options(
        self, definition: RouteDefinition, data: Any, request_options: Mapping[str, Any]
    ) -> Options:
        options: Options = dict(definition.extra)
        options.update(
            data=data,
            template=definition.template,
            styles=list(definition.styles),
            request_options=dict(request_options),
        )
        options.update(self.config.page_class_options())
        if definition.script is None and self.http_client is not None:
            options["http_client"] = self.http_client
        return options

    def _module_options(
        self, definition: ModuleDefinition, request_options: Mapping[str, Any]
    ) -> Options:
        options: Options = {**definition.extra, **definition.options}
        options.update(
            request_options={**request_options, **definition.request_options},
            template=definition.template,
            el=definition.el,
        )
        if definition.script is None and self.http_client is not None:
            options["http_client"] = self.http_client
        return options

    def _update_title(self, entry: PageEntry) -> None:
        title = getattr(entry.instance, "title", None)
        if not isinstance(title, str) or not title:
            title = entry.definition.title or self._initial_title
        self.document.title = title


async def _load_and_fetch(instance: Any) -> None:
    await call_capability(instance, "load")
    await call_capability(instance, "fetch_data")


def _element_of(instance: Any, fallback: Any) -> Any:
    element = getattr(instance, "el", None)
    return element if element is not None else fallback


def _names(value: str | Iterable[str]) -> list[str]:
    if isinstance(value, str):
        return [value]
    return list(value)
