"""Tests for wren.cli — entrypoint, argument parsing, routes and schema commands."""

import json
import sys
import types
from dataclasses import dataclass
from pathlib import Path

import pytest

from wren.app import App
from wren.cli import main


def _make_app() -> App:
    app = App()

    @app.get("/api/news")
    class GetNews:
        def handle(self, request: None) -> list[str]:
            return []

    @app.post("/api/user/create")
    class CreateUser:
        @dataclass
        class Request:
            UserName: str = ""
            Password: str = ""

        def handle(self, request: Request) -> None:
            return None

    return app


@pytest.fixture
def _fake_app_module(monkeypatch: pytest.MonkeyPatch) -> None:
    """Register a fake module with wren Apps on sys.modules."""
    mod = types.ModuleType("_fake_wren_cli_app")
    mod.app = _make_app()  # type: ignore[attr-defined]
    mod.empty = App()  # type: ignore[attr-defined]
    mod.create_app = _make_app  # type: ignore[attr-defined]
    monkeypatch.setitem(sys.modules, "_fake_wren_cli_app", mod)


class TestCLIHelp:
    def test_help_exits_zero(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--help"])
        assert exc_info.value.code == 0

    def test_routes_help_exits_zero(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["routes", "--help"])
        assert exc_info.value.code == 0

    def test_schema_help_exits_zero(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["schema", "--help"])
        assert exc_info.value.code == 0


class TestCLIMissingArgs:
    def test_routes_missing_app(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["routes"])
        assert exc_info.value.code == 2

    def test_schema_missing_app(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["schema"])
        assert exc_info.value.code == 2


class TestCLINoCommand:
    def test_no_command_exits_zero(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 0
        captured = capsys.readouterr()
        assert "wren" in captured.out


@pytest.mark.usefixtures("_fake_app_module")
class TestRoutesCommand:
    def test_table(self, capsys: pytest.CaptureFixture[str]) -> None:
        main(["routes", "_fake_wren_cli_app:app"])
        lines = capsys.readouterr().out.splitlines()
        assert lines[0].split() == ["METHOD", "PATH", "HANDLER"]
        assert lines[2].split()[:2] == ["GET", "/api/news"]
        assert lines[3].split()[:2] == ["POST", "/api/user/create"]
        assert "CreateUser" in lines[3]

    def test_empty_app(self, capsys: pytest.CaptureFixture[str]) -> None:
        main(["routes", "_fake_wren_cli_app:empty"])
        assert "No routes registered." in capsys.readouterr().out

    def test_factory(self, capsys: pytest.CaptureFixture[str]) -> None:
        main(["routes", "_fake_wren_cli_app:create_app"])
        assert "/api/news" in capsys.readouterr().out

    def test_bad_import(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["routes", "nonexistent_module_xyz:app"])
        assert exc_info.value.code == 1
        assert "Error:" in capsys.readouterr().err


@pytest.mark.usefixtures("_fake_app_module")
class TestSchemaCommand:
    def test_stdout(self, capsys: pytest.CaptureFixture[str]) -> None:
        main(["schema", "_fake_wren_cli_app:app"])
        document = json.loads(capsys.readouterr().out)
        assert document["openapi"] == "3.0.3"
        operation = document["paths"]["/api/user/create"]["post"]
        schema = operation["requestBody"]["content"]["application/json"]["schema"]
        assert set(schema["properties"]) == {"UserName", "Password"}

    def test_compact(self, capsys: pytest.CaptureFixture[str]) -> None:
        main(["schema", "_fake_wren_cli_app:app", "--indent", "0"])
        out = capsys.readouterr().out
        assert out.count("\n") == 1

    def test_output_file(self, tmp_path: Path) -> None:
        target = tmp_path / "openapi.json"
        main(["schema", "_fake_wren_cli_app:app", "-o", str(target)])
        assert "/api/news" in json.loads(target.read_text())["paths"]
