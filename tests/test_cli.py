"""Tests for the cronops command line."""

import json
import logging
from unittest.mock import patch

import pytest

from cronops.cli import EXIT_INVALID, EXIT_OK, EXIT_USAGE, build_parser, main
from cronops.infra.logging_config import LOGGER_NAME


@pytest.fixture(autouse=True)
def clean_logger():
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()


class TestDescribeCommand:
    """Tests for `cronops describe`."""

    def test_describe(self, capsys):
        assert main(["describe", "*/15 * * * *"]) == EXIT_OK

        out = capsys.readouterr().out
        assert out.strip() == "This cron expression will run every 15 minutes of every hour."

    def test_describe_invalid(self, capsys):
        assert main(["describe", "* 24 * * *"]) == EXIT_INVALID

        err = capsys.readouterr().err
        assert "reason: OutOfDomain" in err
        assert "field:  1 (hour)" in err
        assert "token:  24" in err


class TestNextCommand:
    """Tests for `cronops next`."""

    def test_next(self, capsys):
        code = main(["next", "0 9 * * 1-5", "--count", "2", "--after", "2024-01-05T18:00"])

        assert code == EXIT_OK
        assert capsys.readouterr().out.splitlines() == [
            "Mon Jan 8 2024 at 09:00:00",
            "Tue Jan 9 2024 at 09:00:00",
        ]

    def test_next_json(self, capsys):
        code = main(["next", "0 0 * * *", "--count", "1", "--after", "2024-01-01T00:00", "--json"])

        assert code == EXIT_OK
        data = json.loads(capsys.readouterr().out)
        assert data == {
            "description": "This cron expression will run once per day at midnight.",
            "nextExecutions": ["Tue Jan 2 2024 at 00:00:00"],
        }

    def test_next_bad_count(self, capsys):
        assert main(["next", "* * * * *", "--count", "0"]) == EXIT_USAGE

    def test_next_bad_after(self, capsys):
        assert main(["next", "* * * * *", "--after", "yesterday"]) == EXIT_USAGE

    def test_next_unsatisfiable(self, capsys):
        assert main(["next", "0 0 30 2 *", "--after", "2024-01-01T00:00"]) == EXIT_INVALID

        assert "UnsatisfiableSchedule" in capsys.readouterr().err

    def test_end_of_datetime_range(self, capsys):
        assert main(["next", "* * * * *", "--after", "9999-12-31T23:59"]) == EXIT_INVALID

        assert "UnsatisfiableSchedule" in capsys.readouterr().err


class TestValidateCommand:
    """Tests for `cronops validate`."""

    def test_valid_prints_canonical_form(self, capsys):
        assert main(["validate", "0  0 * * 7"]) == EXIT_OK

        assert capsys.readouterr().out.strip() == "Valid: 0 0 * * 0"

    def test_invalid(self, capsys):
        assert main(["validate", "* * *"]) == EXIT_INVALID

        err = capsys.readouterr().err
        assert "reason: MalformedExpression" in err
        assert "field:" not in err


class TestServeCommand:
    """Tests for `cronops serve`."""

    def test_serve_runs_uvicorn(self, tmp_path, monkeypatch):
        monkeypatch.setenv("LOG_DIR", str(tmp_path))

        with patch("uvicorn.run") as mock_run:
            code = main(["serve", "--host", "0.0.0.0", "--port", "9999"])

        assert code == EXIT_OK
        mock_run.assert_called_once_with("cronops.api.main:app", host="0.0.0.0", port=9999)
        assert list(tmp_path.glob("cronops_*.log"))


class TestParser:
    """Tests for argument handling."""

    def test_no_command_prints_help(self, capsys):
        assert main([]) == EXIT_USAGE

        assert "usage: cronops" in capsys.readouterr().out

    def test_subcommands(self):
        args = build_parser().parse_args(["next", "* * * * *", "--count", "3"])

        assert args.command == "next"
        assert args.count == 3
        assert args.json is False
