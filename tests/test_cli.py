"""
Unit tests for CLI commands.

Tests cover:
- validate command
- run command (table and JSON output, failures)
- global log level option
"""

import json
import textwrap

import pytest
from typer.testing import CliRunner

from statehistory.cli.app import app

runner = CliRunner()

COUNTER_SESSION = textwrap.dedent(
    """
    name: counter
    initial_state: {count: 1}
    config: {limit: 10}
    steps:
      - {op: increment, path: [count]}
      - {op: increment, path: [count]}
      - {op: undo}
      - {op: redo}
      - {op: checkpoint}
    """
)

FAILING_SESSION = textwrap.dedent(
    """
    initial_state: {count: 1}
    steps:
      - {op: revert}
      - {op: increment, path: [count]}
    """
)


@pytest.fixture
def counter_file(session_file):
    return session_file(COUNTER_SESSION)


class TestValidateCommand:
    """Tests for validate command."""

    def test_validate_success(self, counter_file):
        result = runner.invoke(app, ["validate", counter_file])

        assert result.exit_code == 0
        assert "5 step(s)" in result.stdout
        assert "Undo limit: 10" in result.stdout

    def test_validate_missing_file(self, tmp_path):
        result = runner.invoke(app, ["validate", str(tmp_path / "missing.yaml")])

        assert result.exit_code == 1
        assert "Failed to load session" in result.stdout

    def test_validate_invalid_session(self, session_file):
        path = session_file("steps:\n  - {op: teleport}\n")

        result = runner.invoke(app, ["validate", path])

        assert result.exit_code == 1
        assert "Invalid session definition" in result.stdout


class TestRunCommand:
    """Tests for run command."""

    def test_run_prints_final_counts(self, counter_file):
        result = runner.invoke(app, ["run", counter_file])

        assert result.exit_code == 0
        assert "Final state" in result.stdout
        assert "undos=2 redos=0 unchecked=0" in result.stdout

    def test_run_json(self, counter_file):
        result = runner.invoke(app, ["run", counter_file, "--json"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["name"] == "counter"
        assert data["final_state"] == {"count": 3}
        assert data["records"][4]["edits"] == [{"op": "replace", "path": ["count"], "value": 3}]

    def test_run_stops_on_failure(self, session_file):
        result = runner.invoke(app, ["--log-level", "ERROR", "run", session_file(FAILING_SESSION), "--json"])

        assert result.exit_code == 1
        data = json.loads(result.stdout)
        assert len(data["records"]) == 1
        assert data["final_state"] == {"count": 1}

    def test_run_continue_on_error(self, session_file):
        result = runner.invoke(
            app, ["--log-level", "ERROR", "run", session_file(FAILING_SESSION), "--continue-on-error", "--json"]
        )

        assert result.exit_code == 1
        data = json.loads(result.stdout)
        assert len(data["records"]) == 2
        assert data["final_state"] == {"count": 2}

    def test_run_reports_failure_count(self, session_file):
        result = runner.invoke(app, ["run", session_file(FAILING_SESSION)])

        assert result.exit_code == 1
        assert "1 step(s) failed" in result.stdout


class TestLogLevelOption:
    """Tests for the global --log-level option."""

    def test_unknown_log_level(self, counter_file):
        result = runner.invoke(app, ["--log-level", "bogus", "validate", counter_file])

        assert result.exit_code == 2
        assert "Unknown log level" in result.stdout

    def test_debug_log_level_accepted(self, counter_file):
        result = runner.invoke(app, ["--log-level", "debug", "validate", counter_file])

        assert result.exit_code == 0
