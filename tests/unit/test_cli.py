"""
Tests for the region redirect CLI.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from src.api.deps import get_settings
from src.app_shell.cli import build_parser, main

PROJECT_ROOT = Path(__file__).parent.parent.parent


@pytest.fixture
def cli_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Point the CLI at the project config and a temporary data dir."""
    monkeypatch.chdir(PROJECT_ROOT)
    monkeypatch.setenv("REGION_REDIRECT_CONFIG", str(PROJECT_ROOT / "region_redirect.yaml"))
    monkeypatch.setenv("REGION_REDIRECT_DATA_DIR", str(tmp_path / "data"))
    get_settings.cache_clear()
    yield tmp_path
    get_settings.cache_clear()


class TestCommands:
    """Each subcommand against a fresh SQLite database."""

    def test_seed_twice(self, cli_env: Path, capsys: pytest.CaptureFixture[str]) -> None:
        main(["seed"])
        main(["seed"])

        out = capsys.readouterr().out
        assert "Seeded defaults for: states, countries" in out
        assert "nothing seeded" in out
        assert (cli_env / "data" / "region_redirect.db").exists()

    def test_resolve(self, cli_env: Path, capsys: pytest.CaptureFixture[str]) -> None:
        main(["resolve", "--region", "tx"])
        main(["resolve", "--region", "CA", "--country", "FR"])

        lines = capsys.readouterr().out.splitlines()
        assert lines == ["302 -> https://www.defendonlineprivacy.com/tx/", "no redirect"]

    def test_show_enabled_only(self, cli_env: Path, capsys: pytest.CaptureFixture[str]) -> None:
        main(["show", "states", "--enabled-only"])

        lines = capsys.readouterr().out.splitlines()
        assert [line.split()[0] for line in lines] == ["IN", "KS", "TX"]
        assert "(Texas)" in lines[-1]

    def test_reset(self, cli_env: Path, capsys: pytest.CaptureFixture[str]) -> None:
        main(["reset", "countries"])

        assert "Reset countries to defaults." in capsys.readouterr().out

    def test_missing_config_exits(
        self, cli_env: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("REGION_REDIRECT_CONFIG", str(cli_env / "missing.yaml"))
        get_settings.cache_clear()

        with pytest.raises(SystemExit) as exc:
            main(["seed"])

        assert exc.value.code == 1


class TestParser:
    """Argument parsing."""

    def test_unknown_category_rejected(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args(["show", "planets"])

    def test_command_required(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args([])
