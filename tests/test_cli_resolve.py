"""Tests for wren.cli._resolve — App import resolution."""

import sys
import types

import pytest

from wren.app import App
from wren.cli._resolve import resolve_app


@pytest.fixture
def _fake_app_module(monkeypatch: pytest.MonkeyPatch) -> None:
    """Register a fake module with a wren App on sys.modules."""
    mod = types.ModuleType("_fake_wren_app")
    mod.app = App()  # type: ignore[attr-defined]
    mod.custom = App()  # type: ignore[attr-defined]
    mod.not_an_app = "just a string"  # type: ignore[attr-defined]
    mod.broken_factory = lambda: 1 / 0  # type: ignore[attr-defined]
    monkeypatch.setitem(sys.modules, "_fake_wren_app", mod)


@pytest.mark.usefixtures("_fake_app_module")
class TestResolveApp:
    def test_explicit_attribute(self) -> None:
        assert isinstance(resolve_app("_fake_wren_app:app"), App)

    def test_custom_attribute(self) -> None:
        assert isinstance(resolve_app("_fake_wren_app:custom"), App)

    def test_default_attribute(self) -> None:
        """Omitting :attr defaults to 'app'."""
        assert isinstance(resolve_app("_fake_wren_app"), App)

    def test_missing_module(self) -> None:
        with pytest.raises(ModuleNotFoundError):
            resolve_app("nonexistent_module_xyz:app")

    def test_missing_attribute(self) -> None:
        with pytest.raises(AttributeError):
            resolve_app("_fake_wren_app:does_not_exist")

    def test_wrong_type(self) -> None:
        with pytest.raises(TypeError, match=r"not a wren\.App instance"):
            resolve_app("_fake_wren_app:not_an_app")

    def test_factory_error(self) -> None:
        with pytest.raises(TypeError, match="Factory function"):
            resolve_app("_fake_wren_app:broken_factory")
