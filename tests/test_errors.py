"""Tests for the roost exception hierarchy."""

import pytest

from roost.errors import (
    ConfigurationError,
    ModuleDefinitionNotFound,
    RoostError,
    RouteNotFound,
    ScriptResolutionError,
)


class TestHierarchy:
    @pytest.mark.parametrize(
        "exc",
        [
            ConfigurationError("bad"),
            RouteNotFound("nope"),
            ScriptResolutionError("app:Page"),
            ModuleDefinitionNotFound("nav"),
        ],
    )
    def test_all_are_roost_errors(self, exc: Exception) -> None:
        assert isinstance(exc, RoostError)

    def test_route_not_found_is_lookup_error(self) -> None:
        with pytest.raises(LookupError):
            raise RouteNotFound("nope")

    def test_missing_module_definition_is_configuration_error(self) -> None:
        assert isinstance(ModuleDefinitionNotFound("nav"), ConfigurationError)


class TestMessages:
    def test_route_not_found(self) -> None:
        exc = RouteNotFound("profile/32")
        assert exc.path == "profile/32"
        assert str(exc) == "No route matches 'profile/32'"

    def test_route_not_found_detail(self) -> None:
        assert str(RouteNotFound("x", "custom detail")) == "custom detail"

    def test_script_resolution_error(self) -> None:
        exc = ScriptResolutionError("app.pages:Home")
        assert exc.script == "app.pages:Home"
        assert "app.pages:Home" in str(exc)

    def test_module_definition_not_found(self) -> None:
        exc = ModuleDefinitionNotFound("ghost")
        assert exc.name == "ghost"
        assert str(exc) == "No module definition named 'ghost'"
