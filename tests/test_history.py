"""Tests for roost.history — MemoryHistory and UrlLocation."""

from roost.history import MemoryHistory, PopStateEvent, UrlLocation


class TestUrlLocation:
    def test_parts(self) -> None:
        loc = UrlLocation("https://example.com/my/path?x=1#frag")
        assert loc.pathname == "/my/path"
        assert loc.hash == "#frag"
        assert loc.hostname == "example.com"
        assert loc.search == "?x=1"

    def test_empty_parts(self) -> None:
        loc = UrlLocation("https://example.com")
        assert loc.pathname == "/"
        assert loc.hash == ""
        assert loc.search == ""


class TestMemoryHistory:
    def test_initial_entry(self) -> None:
        history = MemoryHistory(href="http://localhost/")
        assert history.length == 1
        assert history.state is None
        assert history.location.href == "http://localhost/"

    def test_push_state_resolves_relative_url(self) -> None:
        history = MemoryHistory(href="http://localhost/")
        history.push_state({"path": "my/url"}, "", "my/url")
        assert history.length == 2
        assert history.state == {"path": "my/url"}
        assert history.location.href == "http://localhost/my/url"

    def test_replace_state(self) -> None:
        history = MemoryHistory(href="http://localhost/")
        history.replace_state({"path": "home"}, "", "home")
        assert history.length == 1
        assert history.entries == [({"path": "home"}, "http://localhost/home")]

    def test_back_fires_popstate(self) -> None:
        history = MemoryHistory(href="http://localhost/")
        events: list[PopStateEvent] = []
        history.add_event_listener("popstate", events.append)
        history.push_state({"path": "a"}, "", "/a")
        history.push_state({"path": "b"}, "", "/b")
        history.back()
        assert events == [PopStateEvent(state={"path": "a"})]
        history.forward()
        assert events[-1].state == {"path": "b"}

    def test_push_truncates_forward_entries(self) -> None:
        history = MemoryHistory(href="http://localhost/")
        history.push_state({"path": "a"}, "", "/a")
        history.push_state({"path": "b"}, "", "/b")
        history.back()
        history.push_state({"path": "c"}, "", "/c")
        assert [state for state, _ in history.entries] == [None, {"path": "a"}, {"path": "c"}]

    def test_out_of_range_go_is_ignored(self) -> None:
        history = MemoryHistory()
        events: list[PopStateEvent] = []
        history.add_event_listener("popstate", events.append)
        history.back()
        history.go(5)
        assert events == []

    def test_listener_dedupe_and_removal(self) -> None:
        history = MemoryHistory()
        events: list[PopStateEvent] = []
        history.add_event_listener("popstate", events.append)
        history.add_event_listener("popstate", events.append)
        assert history.listener_count() == 1
        history.remove_event_listener("popstate", events.append)
        assert history.listener_count() == 0
