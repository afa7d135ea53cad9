"""Tests for the mlfq-sim command line."""

import json
from pathlib import Path

import pytest

from mlfq_sim.cli import EXIT_OK, EXIT_USAGE, main


class TestCli:
    """Verify argument handling and output."""

    def test_default_run_prints_trace_and_summary(
        self, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Without arguments the built-in workload runs with a full trace."""
        assert main([]) == EXIT_OK
        out = capsys.readouterr().out
        assert "Running Process 1 from Queue 0 for 4 time units" in out
        assert "Process 2 completed at time 70" in out
        assert "Completed:            3" in out

    def test_quiet_prints_summary_only(self, capsys: pytest.CaptureFixture[str]) -> None:
        """--quiet suppresses the event trace."""
        assert main(["--quiet"]) == EXIT_OK
        out = capsys.readouterr().out
        assert "Running Process" not in out
        assert "Makespan:             70" in out

    def test_reset_mode_override(self, capsys: pytest.CaptureFixture[str]) -> None:
        """--reset-mode crossing changes when resets fire."""
        assert main(["--reset-mode", "crossing"]) == EXIT_OK
        assert "Priority reset at time 52" in capsys.readouterr().out

    def test_preset_bounded_top_demotes(self, capsys: pytest.CaptureFixture[str]) -> None:
        """--preset bounded-top runs the built-in workload with demotions."""
        assert main(["--preset", "bounded-top"]) == EXIT_OK
        out = capsys.readouterr().out
        assert "Process 1 demoted to Queue 1" in out
        assert "Process 3 completed at time 51" in out
        assert "Demotions:            3" in out

    def test_preset_with_reset_mode(self, capsys: pytest.CaptureFixture[str]) -> None:
        """--reset-mode applies on top of the chosen preset."""
        assert main(["--preset", "bounded-top", "--reset-mode", "crossing"]) == EXIT_OK
        out = capsys.readouterr().out
        assert "Priority reset at time 51" in out
        assert "Process 2 moved to Queue 0 during reset" in out

    def test_log_level_prints_log(self, capsys: pytest.CaptureFixture[str]) -> None:
        """--log-level dumps matching log entries."""
        assert main(["--quiet", "--log-level", "info"]) == EXIT_OK
        out = capsys.readouterr().out
        assert "[t=0] [INFO] driver: Process 1 arrives" in out
        assert "[DEBUG]" not in out

    def test_workload_file(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """A workload file replaces the built-in processes."""
        path = tmp_path / "w.json"
        body = {"processes": [{"pid": 9, "arrival_time": 0, "burst_time": 3}]}
        path.write_text(json.dumps(body))
        assert main([str(path)]) == EXIT_OK
        assert "Process 9 completed at time 3" in capsys.readouterr().out

    def test_invalid_workload_exits_with_usage(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Validation errors go to stderr with status 2."""
        path = tmp_path / "bad.json"
        body = {"processes": [{"pid": 1, "arrival_time": 0, "burst_time": -1}]}
        path.write_text(json.dumps(body))
        assert main([str(path)]) == EXIT_USAGE
        captured = capsys.readouterr()
        assert "mlfq-sim:" in captured.err
        assert "burst time" in captured.err
        assert captured.out == ""
