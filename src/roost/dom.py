"""Element and Document — the attachable node interface the router drives.

The router never renders anything. It only composes element trees
(attach a page to the container, append module elements to a page),
toggles classes, and listens for clicks. ``ElementLike`` is that
contract; any host tree exposing it can be driven.

``Element`` is an in-memory implementation of the contract with DOM-style
event dispatch (capture phase root → target, then bubble phase target →
root). It backs headless use and the test suite::

    container = Element("main")
    page = Element("section")
    link = page.append_child(Element("a", href="profile/32"))
    container.append_child(page)
    link.click()
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable, TypeAlias

Listener: TypeAlias = Callable[["Event"], Any]


@runtime_checkable
class ElementLike(Protocol):
    """What the router needs from a page, module, or container element."""

    @property
    def parent(self) -> Any: ...

    @property
    def class_list(self) -> ClassList: ...

    def append_child(self, child: Any) -> Any: ...
    def remove_child(self, child: Any) -> Any: ...
    def contains(self, other: Any) -> bool: ...
    def add_event_listener(self, type: str, listener: Listener, capture: bool = False) -> None: ...
    def remove_event_listener(self, type: str, listener: Listener, capture: bool = False) -> None: ...


@dataclass(slots=True)
class Event:
    """A dispatched event.

    ``target`` is set by ``Element.dispatch_event``; ``current_target``
    tracks the element whose listeners are running.
    """

    type: str
    bubbles: bool = True
    cancelable: bool = True
    target: Element | None = None
    current_target: Element | None = None
    default_prevented: bool = False
    _stopped: bool = field(default=False, repr=False)

    def prevent_default(self) -> None:
        if self.cancelable:
            self.default_prevented = True

    def stop_propagation(self) -> None:
        self._stopped = True


class ClassList:
    """Ordered set of CSS class names."""

    __slots__ = ("_names",)

    def __init__(self, names: str | None = None) -> None:
        self._names: list[str] = []
        if names:
            self.add(*names.split())

    def add(self, *names: str) -> None:
        for name in names:
            if name and name not in self._names:
                self._names.append(name)

    def remove(self, *names: str) -> None:
        for name in names:
            if name in self._names:
                self._names.remove(name)

    def toggle(self, name: str, force: bool | None = None) -> bool:
        on = name not in self._names if force is None else force
        if on:
            self.add(name)
        else:
            self.remove(name)
        return on

    def contains(self, name: str) -> bool:
        return name in self._names

    def __contains__(self, name: object) -> bool:
        return name in self._names

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._names))

    def __len__(self) -> int:
        return len(self._names)

    def __str__(self) -> str:
        return " ".join(self._names)

    def __repr__(self) -> str:
        return f"ClassList({str(self)!r})"


class Element:
    """In-memory element tree node.

    Attributes are plain strings; ``inner_html`` is stored verbatim and
    never parsed.
    """

    __slots__ = ("_listeners", "attributes", "children", "class_list", "inner_html", "parent", "tag")

    def __init__(self, tag: str = "div", *, class_name: str | None = None, **attributes: str) -> None:
        self.tag = tag.lower()
        self.attributes: dict[str, str] = dict(attributes)
        self.class_list = ClassList(class_name)
        self.children: list[Element] = []
        self.parent: Element | None = None
        self.inner_html: str = ""
        # (type, capture) -> listeners in registration order
        self._listeners: dict[tuple[str, bool], list[Listener]] = {}

    def __repr__(self) -> str:
        classes = f" class={str(self.class_list)!r}" if len(self.class_list) else ""
        return f"<Element {self.tag}{classes}>"

    # -- Attributes --

    def get_attribute(self, name: str) -> str | None:
        return self.attributes.get(name)

    def set_attribute(self, name: str, value: str) -> None:
        self.attributes[name] = value

    @property
    def href(self) -> str | None:
        return self.attributes.get("href")

    # -- Tree --

    def append_child(self, child: Element) -> Element:
        """Append *child*, moving it out of its current parent first."""
        if child is self or child.contains(self):
            msg = "Cannot append an element to itself or its descendant"
            raise ValueError(msg)
        if child.parent is not None:
            child.parent.remove_child(child)
        self.children.append(child)
        child.parent = self
        return child

    def remove_child(self, child: Element) -> Element:
        """Remove a direct child. Raises ``ValueError`` if it is not one."""
        if child.parent is not self:
            msg = f"{child!r} is not a child of {self!r}"
            raise ValueError(msg)
        self.children.remove(child)
        child.parent = None
        return child

    def remove(self) -> None:
        """Detach from the parent, if attached."""
        if self.parent is not None:
            self.parent.remove_child(self)

    def contains(self, other: Any) -> bool:
        """True if *other* is this element or one of its descendants."""
        node = other
        while node is not None:
            if node is self:
                return True
            node = getattr(node, "parent", None)
        return False

    def closest(self, tag: str) -> Element | None:
        """Nearest inclusive ancestor with the given tag name."""
        tag = tag.lower()
        node: Element | None = self
        while node is not None:
            if node.tag == tag:
                return node
            node = node.parent
        return None

    def ancestors(self) -> list[Element]:
        """Inclusive ancestors from this element up to the root."""
        path: list[Element] = []
        node: Element | None = self
        while node is not None:
            path.append(node)
            node = node.parent
        return path

    # -- Events --

    def add_event_listener(self, type: str, listener: Listener, capture: bool = False) -> None:
        listeners = self._listeners.setdefault((type, capture), [])
        if listener not in listeners:
            listeners.append(listener)

    def remove_event_listener(self, type: str, listener: Listener, capture: bool = False) -> None:
        listeners = self._listeners.get((type, capture), [])
        if listener in listeners:
            listeners.remove(listener)

    def has_listener(self, type: str, listener: Listener, capture: bool = False) -> bool:
        return listener in self._listeners.get((type, capture), [])

    def dispatch_event(self, event: Event) -> bool:
        """Dispatch *event* with this element as the target.

        Returns False if a listener called ``prevent_default()``.
        """
        event.target = self
        path = self.ancestors()

        for node in reversed(path):
            node._fire(event, capture=True)
            if event._stopped:
                break

        if not event._stopped:
            for node in path:
                if node is not self and not event.bubbles:
                    break
                node._fire(event, capture=False)
                if event._stopped:
                    break

        event.current_target = None
        return not event.default_prevented

    def click(self) -> Event:
        """Dispatch a bubbling, cancelable ``click`` and return the event."""
        event = Event("click")
        self.dispatch_event(event)
        return event

    def _fire(self, event: Event, *, capture: bool) -> None:
        event.current_target = self
        for listener in list(self._listeners.get((event.type, capture), [])):
            listener(event)


@dataclass(slots=True)
class Document:
    """Holds the document title the router keeps in sync."""

    title: str = ""
