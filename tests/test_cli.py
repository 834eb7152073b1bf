"""Tests for roost.cli — CLI entrypoint, routes and match commands."""

import types

import pytest

from roost.cli import main
from roost.router import Router


@pytest.fixture
def _fake_router_module(monkeypatch: pytest.MonkeyPatch) -> None:
    """Register a fake module with a roost Router on sys.modules."""
    mod = types.ModuleType("_fake_roost_cli")
    mod.router = Router(  # type: ignore[attr-defined]
        pages={
            r"^profile/([0-9]+)$": {
                "script": "app.pages:Profile",
                "data": "https://api.example.com/profile/$1",
                "modules": ["nav", "footer"],
            },
            "^home$": {},
        },
    )
    mod.empty = Router()  # type: ignore[attr-defined]
    mod.pages = {"^about$": {"script": "app.pages:About"}}  # type: ignore[attr-defined]
    monkeypatch.setitem(__import__("sys").modules, "_fake_roost_cli", mod)


class TestCLIHelp:
    def test_help_exits_zero(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--help"])
        assert exc_info.value.code == 0

    def test_routes_help_exits_zero(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["routes", "--help"])
        assert exc_info.value.code == 0

    def test_match_help_exits_zero(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["match", "--help"])
        assert exc_info.value.code == 0


class TestCLIMissingArgs:
    def test_routes_missing_app(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["routes"])
        assert exc_info.value.code == 2

    def test_match_missing_path(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["match", "myapp:router"])
        assert exc_info.value.code == 2


class TestCLINoCommand:
    def test_no_command_exits_zero(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 0
        captured = capsys.readouterr()
        assert "roost" in captured.out


@pytest.mark.usefixtures("_fake_router_module")
class TestRoutesCommand:
    def test_lists_routes_in_order(self, capsys: pytest.CaptureFixture[str]) -> None:
        main(["routes", "_fake_roost_cli"])
        lines = capsys.readouterr().out.splitlines()
        assert lines[0].split() == ["PATTERN", "SCRIPT", "MODULES"]
        assert lines[2].startswith("^profile/([0-9]+)$")
        assert "app.pages:Profile" in lines[2]
        assert "nav, footer" in lines[2]
        assert "(default Module)" in lines[3]

    def test_empty_table(self, capsys: pytest.CaptureFixture[str]) -> None:
        main(["routes", "_fake_roost_cli:empty"])
        assert capsys.readouterr().out.strip() == "No routes registered."

    def test_pages_mapping(self, capsys: pytest.CaptureFixture[str]) -> None:
        main(["routes", "_fake_roost_cli:pages"])
        lines = capsys.readouterr().out.splitlines()
        assert lines[2].split() == ["^about$", "app.pages:About", "-"]

    def test_unresolvable_app(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["routes", "_fake_roost_cli:missing"])
        assert exc_info.value.code == 1
        assert capsys.readouterr().err.startswith("Error:")


@pytest.mark.usefixtures("_fake_router_module")
class TestMatchCommand:
    def test_match_prints_expanded_data(self, capsys: pytest.CaptureFixture[str]) -> None:
        main(["match", "_fake_roost_cli", "/profile/32"])
        out = capsys.readouterr().out
        assert "pattern: ^profile/([0-9]+)$" in out
        assert "key:     profile/32" in out
        assert "groups:  ['32']" in out
        assert "data:    https://api.example.com/profile/32" in out
        assert "modules: nav, footer" in out

    def test_default_module(self, capsys: pytest.CaptureFixture[str]) -> None:
        main(["match", "_fake_roost_cli", "home"])
        out = capsys.readouterr().out
        assert "script:  (default Module)" in out
        assert "data:" not in out

    def test_no_match_exits_one(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["match", "_fake_roost_cli", "nowhere"])
        assert exc_info.value.code == 1
        assert "No route matches 'nowhere'" in capsys.readouterr().err
