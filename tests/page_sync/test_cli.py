"""CLI tests for the page-sync and page-sync-watch commands."""

from pathlib import Path
from unittest.mock import patch

import pytest
import typer
from typer.testing import CliRunner

from page_sync.__main__ import app, watch_app
from page_sync.cli import CLIError, cli_error_handler
from page_sync.config import CONFIG_ENV_VAR
from page_sync.reporting import ISSUES_MESSAGE, SUCCESS_MESSAGE

runner = CliRunner()


@pytest.fixture(autouse=True)
def no_logging_setup(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep CLI runs from reconfiguring global logging."""
    monkeypatch.setattr("page_sync.cli.sync.setup_logging", lambda: None)
    monkeypatch.setattr("page_sync.cli.watch.setup_logging", lambda: None)


class TestSyncCommand:
    """Tests for 'page-sync [SOURCE] [TARGET]'."""

    def test_sync_success(self, sync_files: tuple[Path, Path]) -> None:
        """Test that a clean sync exits 0 and prints the summary."""
        source_path, target_path = sync_files

        result = runner.invoke(app, [str(source_path), str(target_path)])

        assert result.exit_code == 0, result.output
        assert "Functions extracted" in result.output
        assert SUCCESS_MESSAGE in result.output
        assert "async function loadData()" in target_path.read_text(encoding="utf-8")

    def test_sync_default_paths(
        self, sync_files: tuple[Path, Path], monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test that ./src/app/page.js and ./index.html are the defaults."""
        _, target_path = sync_files
        monkeypatch.chdir(target_path.parent)

        result = runner.invoke(app, [])

        assert result.exit_code == 0, result.output
        assert "let employees = [];" in target_path.read_text(encoding="utf-8")

    def test_sync_with_issues_still_succeeds(self, tmp_path: Path) -> None:
        """Test that skipped items are reported without failing the command."""
        source_path = tmp_path / "page.js"
        source_path.write_text("const [count, setCount] = useState(0);\n", encoding="utf-8")
        target_path = tmp_path / "index.html"
        target_path.write_text("<html></html>\n", encoding="utf-8")

        result = runner.invoke(app, [str(source_path), str(target_path)])

        assert result.exit_code == 0, result.output
        assert "Could not update state variable: count" in result.output
        assert ISSUES_MESSAGE in result.output

    def test_sync_parse_failure_exits_1(self, sync_files: tuple[Path, Path]) -> None:
        """Test that a syntax error fails the command and keeps the target."""
        source_path, target_path = sync_files
        source_path.write_text("function broken( {\n", encoding="utf-8")
        before = target_path.read_bytes()

        result = runner.invoke(app, [str(source_path), str(target_path)])

        assert result.exit_code == 1
        assert "Sync failed" in result.output
        assert target_path.read_bytes() == before

    def test_sync_missing_source_exits_1(self, tmp_path: Path) -> None:
        """Test that a missing source file fails the command."""
        target_path = tmp_path / "index.html"
        target_path.write_text("<html></html>\n", encoding="utf-8")

        with patch("page_sync.cli.sync.SyncOrchestrator") as orchestrator_class:
            result = runner.invoke(app, [str(tmp_path / "missing.js"), str(target_path)])

        assert result.exit_code == 1
        assert "Sync failed" in result.output
        assert "React file not found" in result.output
        assert "run from the project root" in result.output
        orchestrator_class.assert_not_called()

    def test_sync_invalid_config_exits_1(
        self,
        sync_files: tuple[Path, Path],
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Test that a broken PAGE_SYNC_CONFIG fails the command."""
        source_path, target_path = sync_files
        config_file = tmp_path / "page-sync.yaml"
        config_file.write_text("unknown_key: 1\n", encoding="utf-8")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(config_file))

        result = runner.invoke(app, [str(source_path), str(target_path)])

        assert result.exit_code == 1
        assert CONFIG_ENV_VAR in result.output

    def test_sync_rejects_flags(self, sync_files: tuple[Path, Path]) -> None:
        """Test that the sync command takes positional arguments only."""
        source_path, target_path = sync_files

        result = runner.invoke(app, ["--force", str(source_path), str(target_path)])

        assert result.exit_code != 0


class TestWatchCommand:
    """Tests for 'page-sync-watch [SOURCE] [TARGET]'."""

    def test_watch_runs_watcher(self, sync_files: tuple[Path, Path]) -> None:
        """Test that the watcher is built from the arguments and run."""
        source_path, target_path = sync_files

        with patch("page_sync.cli.watch.SourceWatcher") as watcher_class:
            result = runner.invoke(
                watch_app,
                [str(source_path), str(target_path), "--poll-interval", "0.2", "--debounce", "0"],
            )

        assert result.exit_code == 0, result.output
        args, kwargs = watcher_class.call_args
        assert args[:2] == (source_path, target_path)
        assert kwargs["poll_interval"] == 0.2
        assert kwargs["debounce_delay"] == 0.0
        watcher_class.return_value.run.assert_called_once()

    def test_watch_invalid_config_exits_1(
        self,
        sync_files: tuple[Path, Path],
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Test that a broken PAGE_SYNC_CONFIG stops the watcher from starting."""
        source_path, target_path = sync_files
        config_file = tmp_path / "page-sync.yaml"
        config_file.write_text("- not\n- a mapping\n", encoding="utf-8")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(config_file))

        with patch("page_sync.cli.watch.SourceWatcher") as watcher_class:
            result = runner.invoke(watch_app, [str(source_path), str(target_path)])

        assert result.exit_code == 1
        assert "Watch failed" in result.output
        assert CONFIG_ENV_VAR in result.output
        watcher_class.assert_not_called()


class TestCLIError:
    """Test CLI error rendering and the error handler."""

    def test_render_includes_command_and_hint(self):
        """Test that the panel body names the command and ends with the hint."""
        error = CLIError("boom", command="sync", hint="Try again.")

        assert error.render().plain == "sync: boom\nTry again."

    def test_render_without_context(self):
        """Test the bare message when no command or hint is known."""
        assert CLIError("boom").render().plain == "boom"
        assert str(CLIError("boom", command="sync")) == "boom"

    def test_handler_exits_on_cli_error(self):
        """Test that a raised CLIError becomes exit code 1."""
        error = CLIError("boom", command="sync")

        with pytest.raises(typer.Exit) as exc_info:
            with cli_error_handler("sync", "Sync failed"):
                raise error

        assert exc_info.value.exit_code == 1
        assert exc_info.value.__cause__ is error

    def test_handler_wraps_other_exceptions(self):
        """Test that unexpected exceptions also exit with code 1."""
        original = ValueError("bad value")

        with pytest.raises(typer.Exit) as exc_info:
            with cli_error_handler("watch", "Watch failed"):
                raise original

        assert exc_info.value.exit_code == 1
        assert exc_info.value.__cause__ is original
