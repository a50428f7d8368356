"""End-to-end tests for the rebed command line."""

from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from rebed import __version__
from rebed.cli import app


@pytest.fixture
def runner():
    """Create CLI runner."""
    return CliRunner()


@pytest.fixture()
def assets(tmp_path: Path) -> Path:
    """A bundled asset directory: web page, stylesheet and default config."""
    root = tmp_path / "assets"
    (root / "web" / "css").mkdir(parents=True)
    (root / "web" / "index.html").write_text("<h1>Hello</h1>")
    (root / "web" / "css" / "site.css").write_text("h1 { color: red; }")
    (root / "config.ini").write_text("[server]\nport = 8080\n")
    return root


class TestCommands:
    """Each command materializes the asset tree with its own policy."""

    def test_create(self, runner: CliRunner, assets: Path, dest: Path) -> None:
        result = runner.invoke(app, ["create", str(assets), "--dest", str(dest)])
        assert result.exit_code == 0, result.output
        assert (dest / "web" / "index.html").read_text() == "<h1>Hello</h1>"
        assert (dest / "web" / "css" / "site.css").read_text() == "h1 { color: red; }"
        assert (dest / "config.ini").read_text() == "[server]\nport = 8080\n"

    def test_tree(self, runner: CliRunner, assets: Path, dest: Path) -> None:
        result = runner.invoke(app, ["tree", str(assets), "--dest", str(dest)])
        assert result.exit_code == 0, result.output
        assert (dest / "web" / "css").is_dir()
        assert not (dest / "config.ini").exists()

    def test_touch(self, runner: CliRunner, assets: Path, dest: Path) -> None:
        (dest / "config.ini").write_text("port = 9000\n")
        result = runner.invoke(app, ["touch", str(assets), "-d", str(dest)])
        assert result.exit_code == 0, result.output
        assert (dest / "config.ini").read_text() == "port = 9000\n"
        assert (dest / "web" / "index.html").read_text() == ""

    def test_patch(self, runner: CliRunner, assets: Path, dest: Path) -> None:
        (dest / "config.ini").write_text("port = 9000\n")
        result = runner.invoke(app, ["patch", str(assets), "--dest", str(dest)])
        assert result.exit_code == 0, result.output
        assert (dest / "config.ini").read_text() == "port = 9000\n"
        assert (dest / "web" / "index.html").read_text() == "<h1>Hello</h1>"

    def test_patch_empty(self, runner: CliRunner, assets: Path, dest: Path) -> None:
        result = runner.invoke(app, ["patch", str(assets), "--dest", str(dest), "--empty"])
        assert result.exit_code == 0, result.output
        assert (dest / "web" / "index.html").read_text() == ""

    def test_summary_printed(self, runner: CliRunner, assets: Path, dest: Path) -> None:
        result = runner.invoke(app, ["create", str(assets), "--dest", str(dest)])
        assert "created" in result.stdout
        assert "directories" in result.stdout

    def test_verbose_lists_paths(self, runner: CliRunner, assets: Path, dest: Path) -> None:
        (dest / "config.ini").write_text("old")
        result = runner.invoke(app, ["create", str(assets), "--dest", str(dest), "--verbose"])
        assert result.exit_code == 0, result.output
        assert "overwritten:" in result.stdout
        assert "index.html" in result.stdout


class TestEnvironment:
    """REBED_SOURCE and REBED_DEST stand in for missing arguments."""

    def test_env_source_and_dest(
        self, runner: CliRunner, assets: Path, dest: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("REBED_SOURCE", str(assets))
        monkeypatch.setenv("REBED_DEST", str(dest))
        result = runner.invoke(app, ["create"])
        assert result.exit_code == 0, result.output
        assert (dest / "web" / "index.html").exists()

    def test_cwd_destination(
        self, runner: CliRunner, assets: Path, dest: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.delenv("REBED_DEST", raising=False)
        monkeypatch.chdir(dest)
        result = runner.invoke(app, ["tree", str(assets)])
        assert result.exit_code == 0, result.output
        assert (dest / "web" / "css").is_dir()


class TestFailures:
    """Errors are reported and exit with status 1."""

    def test_missing_source(
        self, runner: CliRunner, dest: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.delenv("REBED_SOURCE", raising=False)
        result = runner.invoke(app, ["create", "--dest", str(dest)])
        assert result.exit_code == 1
        assert "Error" in result.stdout

    def test_unknown_package(self, runner: CliRunner, dest: Path) -> None:
        result = runner.invoke(app, ["create", "rebed_no_such_pkg:web", "--dest", str(dest)])
        assert result.exit_code == 1
        assert "Error" in result.stdout

    def test_destination_is_file(self, runner: CliRunner, assets: Path, tmp_path: Path) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("occupied")
        result = runner.invoke(app, ["create", str(assets), "--dest", str(blocker)])
        assert result.exit_code == 1
        assert "Cannot create directory" in result.stdout


def test_version(runner: CliRunner) -> None:
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.stdout
