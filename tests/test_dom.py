"""Tests for roost.dom — in-memory elements and event dispatch."""

import pytest

from roost.dom import ClassList, Document, Element, ElementLike, Event


class TestClassList:
    def test_parse_and_dedupe(self) -> None:
        classes = ClassList("page  page custom")
        assert list(classes) == ["page", "custom"]
        assert str(classes) == "page custom"

    def test_add_remove_contains(self) -> None:
        classes = ClassList()
        classes.add("a", "b")
        classes.remove("a", "missing")
        assert "b" in classes
        assert classes.contains("b")
        assert "a" not in classes

    def test_toggle(self) -> None:
        classes = ClassList()
        assert classes.toggle("on") is True
        assert classes.toggle("on") is False
        assert classes.toggle("on", force=True) is True
        assert len(classes) == 1


class TestTree:
    def test_append_sets_parent(self) -> None:
        parent, child = Element("div"), Element("span")
        assert parent.append_child(child) is child
        assert child.parent is parent
        assert parent.children == [child]

    def test_append_moves_from_old_parent(self) -> None:
        first, second, child = Element(), Element(), Element()
        first.append_child(child)
        second.append_child(child)
        assert first.children == []
        assert child.parent is second

    def test_cannot_append_ancestor(self) -> None:
        parent, child = Element(), Element()
        parent.append_child(child)
        with pytest.raises(ValueError):
            child.append_child(parent)

    def test_remove_child_requires_child(self) -> None:
        with pytest.raises(ValueError, match="not a child"):
            Element().remove_child(Element())

    def test_remove_detaches(self) -> None:
        parent, child = Element(), Element()
        parent.append_child(child)
        child.remove()
        assert child.parent is None
        child.remove()

    def test_contains_and_closest(self) -> None:
        page = Element("section")
        link = page.append_child(Element("a", href="x"))
        icon = link.append_child(Element("i"))
        assert page.contains(icon)
        assert not icon.contains(page)
        assert icon.closest("A") is link
        assert page.closest("a") is None
        assert icon.ancestors() == [icon, link, page]

    def test_attributes(self) -> None:
        link = Element("a", href="profile/32")
        assert link.href == "profile/32"
        link.set_attribute("href", "home")
        assert link.get_attribute("href") == "home"
        assert link.get_attribute("title") is None

    def test_satisfies_element_protocol(self) -> None:
        assert isinstance(Element(), ElementLike)


class TestEvents:
    def test_capture_then_bubble_order(self) -> None:
        root = Element("main")
        page = root.append_child(Element("section"))
        link = page.append_child(Element("a"))
        seen: list[str] = []
        root.add_event_listener("click", lambda e: seen.append("root-capture"), capture=True)
        page.add_event_listener("click", lambda e: seen.append("page-capture"), capture=True)
        page.add_event_listener("click", lambda e: seen.append("page-bubble"))
        root.add_event_listener("click", lambda e: seen.append("root-bubble"))
        link.click()
        assert seen == ["root-capture", "page-capture", "page-bubble", "root-bubble"]

    def test_target_and_current_target(self) -> None:
        page = Element("section")
        link = page.append_child(Element("a"))
        seen: list[tuple[Element | None, Element | None]] = []
        page.add_event_listener("click", lambda e: seen.append((e.target, e.current_target)))
        event = link.click()
        assert seen == [(link, page)]
        assert event.current_target is None

    def test_prevent_default(self) -> None:
        page = Element()
        link = page.append_child(Element("a"))
        page.add_event_listener("click", lambda e: e.prevent_default(), capture=True)
        event = link.click()
        assert event.default_prevented
        assert link.dispatch_event(Event("click")) is False

    def test_non_cancelable_event(self) -> None:
        event = Event("click", cancelable=False)
        event.prevent_default()
        assert not event.default_prevented

    def test_stop_propagation(self) -> None:
        root = Element()
        link = root.append_child(Element("a"))
        seen: list[str] = []
        link.add_event_listener("click", lambda e: e.stop_propagation())
        root.add_event_listener("click", lambda e: seen.append("root"))
        link.click()
        assert seen == []

    def test_listener_registration(self) -> None:
        el = Element()
        calls: list[Event] = []

        def listener(event: Event) -> None:
            calls.append(event)

        el.add_event_listener("click", listener, capture=True)
        el.add_event_listener("click", listener, capture=True)
        assert el.has_listener("click", listener, capture=True)
        assert not el.has_listener("click", listener)
        el.click()
        assert len(calls) == 1
        el.remove_event_listener("click", listener, capture=True)
        el.click()
        assert len(calls) == 1


class TestDocument:
    def test_title(self) -> None:
        doc = Document(title="Start")
        doc.title = "Changed"
        assert doc.title == "Changed"
