# ABOUTME: Tests for the Typer CLI commands run against saved page snapshots.
# ABOUTME: Covers profile, detect, collect, check, probe and endpoints including exit codes.

import json
import os
from pathlib import Path
from unittest import mock

import pytest
from typer.testing import CliRunner

from conftest import PROFILE_URL
from linkedin_relay.cli import app
from linkedin_relay.config import get_settings


@pytest.fixture
def runner() -> CliRunner:
    """Create a CliRunner instance for testing Typer commands."""
    return CliRunner()


@pytest.fixture
def config_path(tmp_path: Path):
    """Point the CLI at a relay config file inside tmp_path (not created)."""
    path = tmp_path / "config.json"
    with mock.patch.dict(os.environ, {"LINKEDIN_RELAY_CONFIG_FILE": str(path)}):
        get_settings.cache_clear()
        yield path
    get_settings.cache_clear()


def write_endpoints(path: Path, **extra) -> None:
    path.write_text(
        json.dumps(
            {
                "endpoints": [
                    {"url": "https://hooks.example.test/crm", "name": "CRM", "min_interval_seconds": 30},
                    {"url": "https://hooks.example.test/sheet", "name": "Sheet"},
                ],
                **extra,
            }
        )
    )


class TestCLIBasics:
    """Tests for basic CLI structure."""

    def test_help_lists_commands(self, runner: CliRunner, config_path: Path) -> None:
        result = runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        for command in ("profile", "detect", "collect", "check", "probe", "endpoints"):
            assert command in result.output

    def test_no_command_shows_hint(self, runner: CliRunner, config_path: Path) -> None:
        result = runner.invoke(app, [])
        assert "--help" in result.output

    def test_missing_page_file(self, runner: CliRunner, config_path: Path, tmp_path: Path) -> None:
        result = runner.invoke(app, ["profile", str(tmp_path / "nope.html")])
        assert result.exit_code != 0


class TestProfileCommand:
    """Tests for the profile command."""

    def test_shows_profile_panel(self, runner: CliRunner, config_path: Path, page_files) -> None:
        result = runner.invoke(app, ["profile", str(page_files["profile"])])

        assert result.exit_code == 0
        assert "Jane Doe" in result.output
        assert "Premium" in result.output

    def test_json_output(self, runner: CliRunner, config_path: Path, page_files) -> None:
        result = runner.invoke(app, ["profile", str(page_files["profile"]), "--url", PROFILE_URL, "--json"])

        assert result.exit_code == 0
        assert '"linkedinId": "jane-doe"' in result.output
        assert '"name": "Jane Doe"' in result.output

    def test_send_without_webhooks(self, runner: CliRunner, config_path: Path, page_files) -> None:
        result = runner.invoke(app, ["profile", str(page_files["profile"]), "--send"])

        assert result.exit_code == 1
        assert "No webhooks selected" in result.output

    def test_broken_config(self, runner: CliRunner, config_path: Path, page_files) -> None:
        config_path.write_text("{not json")

        result = runner.invoke(app, ["profile", str(page_files["profile"])])

        assert result.exit_code == 1
        assert "Cannot read" in result.output


class TestDetectCommand:
    """Tests for the detect command."""

    def test_finds_affordance(self, runner: CliRunner, config_path: Path, page_files) -> None:
        result = runner.invoke(app, ["detect", str(page_files["profile"])])

        assert result.exit_code == 0
        assert "Encoded id: ABC" in result.output
        assert "Approx. count: ~7" in result.output

    def test_no_affordance(self, runner: CliRunner, config_path: Path, page_files) -> None:
        result = runner.invoke(app, ["detect", str(page_files["results"])])

        assert result.exit_code == 1
        assert "No shared-connections link" in result.output


class TestCollectCommand:
    """Tests for the collect command."""

    def test_collects_across_pages(self, runner: CliRunner, config_path: Path, page_files) -> None:
        result = runner.invoke(
            app,
            ["collect", str(page_files["results"]), str(page_files["last"]), "--name", "Jane Doe", "--no-delay"],
        )

        assert result.exit_code == 0
        assert "Alex Kim" in result.output
        assert "Priya Patel" in result.output
        assert "3 connections collected" in result.output

    def test_json_payload(self, runner: CliRunner, config_path: Path, page_files) -> None:
        result = runner.invoke(
            app,
            ["collect", str(page_files["results"]), str(page_files["last"]), "--no-delay", "--json"],
        )

        assert result.exit_code == 0
        assert '"totalCount": 3' in result.output
        assert '"pagesScraped": 2' in result.output

    def test_blocked_page_exits_2(self, runner: CliRunner, config_path: Path, page_files) -> None:
        result = runner.invoke(app, ["collect", str(page_files["blocked"]), "--no-delay"])

        assert result.exit_code == 2
        assert "Blocked" in result.output
        assert "security_challenge" in result.output

    def test_send_without_webhooks(self, runner: CliRunner, config_path: Path, page_files) -> None:
        config_path.write_text(json.dumps({"send_to": "none"}))

        result = runner.invoke(app, ["collect", str(page_files["last"]), "--no-delay", "--send"])

        assert result.exit_code == 1
        assert "No webhooks selected" in result.output


class TestCheckCommand:
    """Tests for the check command."""

    def test_clean_page(self, runner: CliRunner, config_path: Path, page_files) -> None:
        result = runner.invoke(app, ["check", str(page_files["results"])])

        assert result.exit_code == 0
        assert "No block signals detected." in result.output

    def test_blocked_page(self, runner: CliRunner, config_path: Path, page_files) -> None:
        result = runner.invoke(app, ["check", str(page_files["blocked"])])

        assert result.exit_code == 2
        assert "Blocked:" in result.output
        assert "security_challenge" in result.output


class TestProbeCommand:
    """Tests for the probe command."""

    def test_reports_matches(self, runner: CliRunner, config_path: Path, page_files) -> None:
        result = runner.invoke(app, ["probe", str(page_files["profile"])])

        assert result.exit_code == 0
        assert "Selector probe" in result.output
        assert "fields matched." in result.output


class TestEndpointsCommand:
    """Tests for the endpoints command."""

    def test_none_configured(self, runner: CliRunner, config_path: Path) -> None:
        result = runner.invoke(app, ["endpoints"])

        assert result.exit_code == 0
        assert "No webhooks configured." in result.output

    def test_lists_webhooks(self, runner: CliRunner, config_path: Path) -> None:
        write_endpoints(config_path)

        result = runner.invoke(app, ["endpoints"])

        assert result.exit_code == 0
        assert "CRM" in result.output
        assert "Sheet" in result.output
        assert "30s" in result.output

    def test_selected_without_choice_warns(self, runner: CliRunner, config_path: Path) -> None:
        write_endpoints(config_path, send_to="selected", selected_endpoints=[])

        result = runner.invoke(app, ["endpoints"])

        assert result.exit_code == 0
        assert "no webhook is selected" in result.output
