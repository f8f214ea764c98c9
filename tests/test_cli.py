"""
Tests for the smnoise command.
"""

from unittest.mock import patch

import pytest

from smnoise.cli import EXIT_CONFIG, EXIT_FAILURE, EXIT_OK, main
from smnoise.exceptions import DatabaseConnectionError, QueryError
from smnoise.runner import CheckOutcome, RunResult

from .conftest import RAN_AT


@pytest.fixture
def log_file(tmp_path, restore_root_logging):
    return tmp_path / "noise_check.log"


@pytest.fixture
def password(monkeypatch):
    monkeypatch.setenv("HAZARD_PASSWD", "secret")


class TestMain:
    @patch("smnoise.cli.run")
    def test_missing_password(self, mock_run, monkeypatch, log_file):
        monkeypatch.delenv("HAZARD_PASSWD", raising=False)

        assert main(["--log-file", str(log_file)]) == EXIT_CONFIG

        mock_run.assert_not_called()
        assert "HAZARD_PASSWD not set for environment." in log_file.read_text()

    @patch("smnoise.cli.run")
    def test_success(self, mock_run, password, log_file, tmp_path):
        mock_run.return_value = RunResult(
            ran_at=RAN_AT,
            outcomes=[CheckOutcome("noise_count", rows=1), CheckOutcome("ratio_diff", rows=2)],
        )

        code = main(["--log-file", str(log_file), "--output-dir", str(tmp_path / "out")])

        assert code == EXIT_OK
        settings = mock_run.call_args.args[0]
        assert settings.output_dir == tmp_path / "out"

    @patch("smnoise.cli.run")
    def test_failed_check(self, mock_run, password, log_file):
        mock_run.return_value = RunResult(
            ran_at=RAN_AT,
            outcomes=[
                CheckOutcome("noise_count", error=QueryError("Query failed: boom")),
                CheckOutcome("ratio_diff", rows=2),
            ],
        )

        assert main(["--log-file", str(log_file)]) == EXIT_FAILURE

    @patch("smnoise.cli.run", side_effect=DatabaseConnectionError("Can't contact DB db/hazard: refused"))
    def test_unreachable_database(self, mock_run, password, log_file):
        assert main(["--log-file", str(log_file)]) == EXIT_FAILURE

        log = log_file.read_text()
        assert "ERROR: Can't contact DB db/hazard: refused" in log
        assert "cli.py:" in log

    @patch("smnoise.cli.run", side_effect=RuntimeError("boom"))
    def test_unexpected_error(self, mock_run, password, log_file):
        assert main(["--log-file", str(log_file)]) == EXIT_FAILURE

        log = log_file.read_text()
        assert "ERROR: noise check run failed: boom" in log
        assert "Traceback" in log
        assert "RuntimeError: boom" in log

    def test_unwritable_log_file(self, tmp_path, capsys, restore_root_logging):
        code = main(["--log-file", str(tmp_path / "missing" / "run.log")])

        assert code == EXIT_FAILURE
        assert "Failed initializing logfile" in capsys.readouterr().err
