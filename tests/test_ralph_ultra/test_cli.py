"""Tests for the Ralph Ultra CLI commands."""
from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from ralph_ultra.cli import main as cli_main
from ralph_ultra.cli.main import cli
from ralph_ultra.costs import CostTracker
from ralph_ultra.model import Provider, ProviderQuota, QuotaStatus, QuotaType
from ralph_ultra.store import JsonFileStore


@pytest.fixture()
def config_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    path = tmp_path / "config"
    monkeypatch.setenv("RALPH_ULTRA_CONFIG_DIR", str(path))
    return path


@pytest.fixture()
def backlog_file(tmp_path: Path) -> Path:
    path = tmp_path / "prd.json"
    path.write_text(
        json.dumps(
            {
                "project": "shop",
                "userStories": [
                    {"id": "US-1", "title": "Write the README", "complexity": "simple"},
                ],
            }
        )
    )
    return path


class StubManager:
    def __init__(self, snapshot) -> None:
        self.snapshot = snapshot
        self.forced: list[bool] = []

    def refresh_all_quotas(self, force: bool = False):
        self.forced.append(force)
        return self.snapshot


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


class TestCLIGroup:
    def test_help_lists_commands(self) -> None:
        result = CliRunner().invoke(cli, ["--help"])
        assert result.exit_code == 0
        for name in ("quotas", "plan", "best", "costs"):
            assert name in result.output


# ---------------------------------------------------------------------------
# quotas command
# ---------------------------------------------------------------------------


class TestQuotasCommand:
    def test_prints_each_provider(self, config_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        stub = StubManager(
            {
                Provider.ANTHROPIC: ProviderQuota(
                    Provider.ANTHROPIC,
                    QuotaStatus.LIMITED,
                    QuotaType.SUBSCRIPTION,
                    usage_percent=92.0,
                ),
                Provider.OPENROUTER: ProviderQuota(
                    Provider.OPENROUTER,
                    QuotaStatus.AVAILABLE,
                    QuotaType.CREDITS,
                    credits_remaining=12.5,
                ),
                Provider.LOCAL: ProviderQuota(
                    Provider.LOCAL,
                    QuotaStatus.UNAVAILABLE,
                    QuotaType.LOCAL,
                    error="connection refused",
                ),
            }
        )
        monkeypatch.setattr(cli_main, "_quota_manager", lambda config: stub)
        result = CliRunner().invoke(cli, ["quotas", "--force"])
        assert result.exit_code == 0, result.output
        lines = result.output.splitlines()
        assert len(lines) == 3
        assert lines[0].startswith("anthropic")
        assert "92.0% used" in lines[0]
        assert "$12.50 credits" in lines[1]
        assert "(connection refused)" in lines[2]
        assert stub.forced == [True]


# ---------------------------------------------------------------------------
# plan command
# ---------------------------------------------------------------------------


class TestPlanCommand:
    def test_text_output(self, config_dir: Path, backlog_file: Path) -> None:
        result = CliRunner().invoke(cli, ["plan", str(backlog_file), "--no-quotas"])
        assert result.exit_code == 0, result.output
        assert "Plan for shop (balanced)" in result.output
        assert "US-1" in result.output
        assert "gemini-2.0-flash" in result.output
        assert "Total: 1 tasks" in result.output
        assert "all premium" in result.output

    def test_json_output(self, config_dir: Path, backlog_file: Path) -> None:
        result = CliRunner().invoke(
            cli, ["plan", str(backlog_file), "--no-quotas", "--json", "--mode", "super-saver"]
        )
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["project_name"] == "shop"
        assert data["mode"] == "super-saver"
        assert data["allocations"][0]["task_type"] == "documentation"
        assert data["summary"]["can_complete_with_current_quotas"] is True

    def test_quota_warnings_printed(
        self, config_dir: Path, backlog_file: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        stub = StubManager(
            {
                Provider.GEMINI: ProviderQuota(
                    Provider.GEMINI, QuotaStatus.LIMITED, QuotaType.RATE_LIMIT
                ),
            }
        )
        monkeypatch.setattr(cli_main, "_quota_manager", lambda config: stub)
        result = CliRunner().invoke(cli, ["plan", str(backlog_file)])
        assert result.exit_code == 0, result.output
        assert "Warning: gemini: Limited quota (1 tasks planned" in result.output
        assert stub.forced == [False]

    def test_invalid_json(self, config_dir: Path, tmp_path: Path) -> None:
        path = tmp_path / "bad.json"
        path.write_text("{nope")
        result = CliRunner().invoke(cli, ["plan", str(path), "--no-quotas"])
        assert result.exit_code != 0
        assert "Invalid backlog JSON" in result.output

    def test_non_object_backlog(self, config_dir: Path, tmp_path: Path) -> None:
        path = tmp_path / "list.json"
        path.write_text("[]")
        result = CliRunner().invoke(cli, ["plan", str(path), "--no-quotas"])
        assert result.exit_code != 0
        assert "Backlog must be a JSON object" in result.output

    def test_unknown_complexity(self, config_dir: Path, tmp_path: Path) -> None:
        path = tmp_path / "prd.json"
        path.write_text(json.dumps({"userStories": [{"id": "US-1", "complexity": "epic"}]}))
        result = CliRunner().invoke(cli, ["plan", str(path), "--no-quotas"])
        assert result.exit_code == 1
        assert "Invalid backlog: 'epic' is not a valid Complexity" in result.output
        assert "Traceback" not in result.output

    def test_story_without_id(self, config_dir: Path, tmp_path: Path) -> None:
        path = tmp_path / "prd.json"
        path.write_text(json.dumps({"userStories": [{"title": "Checkout"}]}))
        result = CliRunner().invoke(cli, ["plan", str(path), "--no-quotas"])
        assert result.exit_code == 1
        assert "Invalid backlog: story is missing 'id'" in result.output

    def test_story_not_an_object(self, config_dir: Path, tmp_path: Path) -> None:
        path = tmp_path / "prd.json"
        path.write_text(json.dumps({"userStories": ["US-1"]}))
        result = CliRunner().invoke(cli, ["plan", str(path), "--no-quotas"])
        assert result.exit_code == 1
        assert "Invalid backlog" in result.output

    def test_unknown_mode_rejected(self, config_dir: Path, backlog_file: Path) -> None:
        result = CliRunner().invoke(cli, ["plan", str(backlog_file), "--mode", "turbo"])
        assert result.exit_code != 0


# ---------------------------------------------------------------------------
# best / costs commands
# ---------------------------------------------------------------------------


class TestBestCommand:
    def test_no_history(self, config_dir: Path) -> None:
        result = CliRunner().invoke(cli, ["best", "testing"])
        assert result.exit_code == 0
        assert "No model has 3+ recorded runs for testing" in result.output

    def test_unknown_task_type(self, config_dir: Path) -> None:
        result = CliRunner().invoke(cli, ["best", "juggling"])
        assert result.exit_code != 0


class TestCostsCommand:
    def test_empty(self, config_dir: Path) -> None:
        result = CliRunner().invoke(cli, ["costs"])
        assert result.exit_code == 0
        assert "No cost history recorded" in result.output

    def test_with_history(self, config_dir: Path) -> None:
        tracker = CostTracker(JsonFileStore(config_dir / "cost-history.json"))
        tracker.start_task("US-1", "gpt-5.2", Provider.OPENAI, 0.25)
        tracker.end_task("US-1", 0.30, 1_000, 500, True)
        tracker.start_task("US-2", "gpt-5.2", Provider.OPENAI, 0.25)
        tracker.end_task("US-2", 0.10, 1_000, 500, False)

        result = CliRunner().invoke(cli, ["costs"])
        assert result.exit_code == 0
        assert "Tasks: 2 (1 successful)" in result.output
        assert "Estimated: $0.50" in result.output
        assert "Actual:    $0.40" in result.output
