"""Tests for sync CLI commands."""

import json
from unittest.mock import AsyncMock, patch

import pytest
from typer.testing import CliRunner

from github_issue_sync import __version__
from github_issue_sync.cli.app import app
from github_issue_sync.config import Settings
from github_issue_sync.github import GitHubClientError, SourceSyncResult, SyncRunResult
from github_issue_sync.schemas import PaginationMode, Source

runner = CliRunner()


@pytest.fixture
def cli_settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        github_token="test-token",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'cli.db'}",
        repos="elastic/eui,elastic/kibana",
    )


@pytest.fixture(autouse=True)
def mock_settings(cli_settings):
    with patch("github_issue_sync.cli.sync.get_settings", return_value=cli_settings):
        yield cli_settings


@pytest.fixture
def successful_run() -> SyncRunResult:
    return SyncRunResult(
        source_results=[
            SourceSyncResult(
                source=Source(owner="elastic", name="eui"),
                pages_fetched=3,
                pages_written=1,
                pages_skipped=2,
                documents_written=100,
            ),
            SourceSyncResult(
                source=Source(owner="elastic", name="kibana"),
                pages_fetched=1,
                pages_written=1,
                documents_written=42,
            ),
        ],
        duration_seconds=1.5,
    )


@pytest.fixture
def failed_run() -> SyncRunResult:
    return SyncRunResult(
        source_results=[
            SourceSyncResult(source=Source(owner="elastic", name="eui"), documents_written=5),
            SourceSyncResult(
                source=Source(owner="elastic", name="kibana"),
                error=GitHubClientError("Not Found"),
            ),
        ],
    )


class TestGlobalFlags:
    """Tests for global CLI flags (--verbose, --quiet, --version)."""

    def test_global_help_shows_verbose_flag(self):
        result = runner.invoke(app, ["--help"])
        assert "--verbose" in result.stdout
        assert "--quiet" in result.stdout

    def test_version(self):
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.stdout


class TestSyncRunCommand:
    """Tests for the 'sync run' command."""

    def test_command_exists(self):
        result = runner.invoke(app, ["sync", "run", "--help"])

        assert result.exit_code == 0
        assert "--repos" in result.stdout
        assert "--mode" in result.stdout
        assert "--concurrency" in result.stdout

    def test_syncs_tracked_repos_from_settings(self, successful_run):
        with patch(
            "github_issue_sync.cli.sync._run_sync", new=AsyncMock(return_value=successful_run)
        ) as mock_run:
            result = runner.invoke(app, ["sync", "run"])

        assert result.exit_code == 0
        sources = mock_run.await_args.args[0]
        assert [s.full_name for s in sources] == ["elastic/eui", "elastic/kibana"]
        assert all(s.mode == PaginationMode.OFFSET for s in sources)
        assert "Issue Sync Complete" in result.stdout

    def test_repos_option_overrides_settings(self, successful_run):
        with patch(
            "github_issue_sync.cli.sync._run_sync", new=AsyncMock(return_value=successful_run)
        ) as mock_run:
            result = runner.invoke(
                app, ["sync", "run", "--repos", "elastic/elastic-charts", "--mode", "cursor"]
            )

        assert result.exit_code == 0
        sources = mock_run.await_args.args[0]
        assert sources == [
            Source(owner="elastic", name="elastic-charts", mode=PaginationMode.CURSOR)
        ]

    def test_concurrency_option_overrides_settings(self, successful_run, mock_settings):
        with patch(
            "github_issue_sync.cli.sync._run_sync", new=AsyncMock(return_value=successful_run)
        ) as mock_run:
            result = runner.invoke(app, ["sync", "run", "-c", "1"])

        assert result.exit_code == 0
        settings = mock_run.await_args.args[1]
        assert settings.sync.max_concurrent_sources == 1
        assert mock_settings.sync.max_concurrent_sources == 3

    def test_format_json_outputs_json(self, successful_run):
        with patch(
            "github_issue_sync.cli.sync._run_sync", new=AsyncMock(return_value=successful_run)
        ):
            result = runner.invoke(app, ["sync", "run", "--format", "json"])

        assert result.exit_code == 0
        output = json.loads(result.stdout)
        assert output["summary"]["completed"] == ["elastic/eui", "elastic/kibana"]
        assert output["summary"]["failed"] == {}
        assert output["summary"]["documents_written"] == 142
        assert output["summary"]["pages_skipped"] == 2
        assert output["sources"][0]["pages_written"] == 1

    def test_failed_source_exits_with_error(self, failed_run):
        with patch("github_issue_sync.cli.sync._run_sync", new=AsyncMock(return_value=failed_run)):
            result = runner.invoke(app, ["sync", "run"])

        assert result.exit_code == 1
        assert "Failed sources" in result.stdout
        assert "elastic/kibana" in result.stdout

    def test_failed_source_json_lists_reason(self, failed_run):
        with patch("github_issue_sync.cli.sync._run_sync", new=AsyncMock(return_value=failed_run)):
            result = runner.invoke(app, ["sync", "run", "-f", "json"])

        assert result.exit_code == 1
        output = json.loads(result.stdout)
        assert output["summary"]["completed"] == ["elastic/eui"]
        assert output["summary"]["failed"] == {"elastic/kibana": "GitHubClientError: Not Found"}

    def test_invalid_repo_format(self):
        with patch("github_issue_sync.cli.sync._run_sync", new=AsyncMock()) as mock_run:
            result = runner.invoke(app, ["sync", "run", "--repos", "not-a-repo"])

        assert result.exit_code == 1
        assert "owner/name" in result.stdout
        mock_run.assert_not_awaited()

    def test_empty_repo_list(self, mock_settings):
        mock_settings.repos = ""
        with patch("github_issue_sync.cli.sync._run_sync", new=AsyncMock()) as mock_run:
            result = runner.invoke(app, ["sync", "run"])

        assert result.exit_code == 1
        assert "No repositories" in result.stdout
        mock_run.assert_not_awaited()

    def test_unexpected_error_exits_with_error(self):
        with patch(
            "github_issue_sync.cli.sync._run_sync",
            new=AsyncMock(side_effect=RuntimeError("database is locked")),
        ):
            result = runner.invoke(app, ["sync", "run"])

        assert result.exit_code == 1
        assert "Sync failed" in result.stdout
        assert "database is locked" in result.stdout


class TestSyncStatusCommand:
    """Tests for the 'sync status' command."""

    def test_status_on_empty_store(self):
        result = runner.invoke(app, ["sync", "status", "--format", "json"])

        assert result.exit_code == 0
        rows = json.loads(result.stdout)
        assert rows == [
            {
                "repository": "elastic/eui",
                "collection": "issues-elastic-eui",
                "documents": 0,
                "cached_pages": 0,
            },
            {
                "repository": "elastic/kibana",
                "collection": "issues-elastic-kibana",
                "documents": 0,
                "cached_pages": 0,
            },
        ]

    def test_status_table(self):
        result = runner.invoke(app, ["sync", "status", "--repos", "elastic/eui"])

        assert result.exit_code == 0
        assert "Sync Status" in result.stdout
        assert "issues-elastic-eui" in result.stdout
