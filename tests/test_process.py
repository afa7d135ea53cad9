"""Tests for the process record.

A process is created at the top level with its whole burst remaining.
Its lifecycle is enforced (NEW → READY ⇄ RUNNING → TERMINATED) and its
scheduling fields only change through the policy hooks.
"""

import pytest

from mlfq_sim.process import (
    TOP_LEVEL,
    InvalidProcessSpecError,
    Process,
    ProcessState,
    check_times,
)

BURST = 25
ARRIVAL = 2
SLICE = 4
START = 10


def _running(burst: int = BURST) -> Process:
    """Return a process that has been admitted and dispatched."""
    process = Process.create(1, ARRIVAL, burst)
    process.admit()
    process.dispatch()
    return process


class TestProcessCreation:
    """Verify initial field values."""

    def test_create_sets_identity(self) -> None:
        """create() should store pid, arrival time and burst."""
        process = Process.create(7, ARRIVAL, BURST)
        assert process.pid == 7
        assert process.arrival_time == ARRIVAL
        assert process.burst_time == BURST

    def test_starts_at_top_level(self) -> None:
        """New processes start at the top level with nothing accrued."""
        process = Process.create(1, 0, BURST)
        assert process.current_level == TOP_LEVEL
        assert process.time_in_level == 0
        assert process.remaining_time == BURST

    def test_starts_new_and_unrun(self) -> None:
        """New processes are NEW and have no run or completion times."""
        process = Process.create(1, 0, BURST)
        assert process.state is ProcessState.NEW
        assert process.first_run_time is None
        assert process.completion_time is None

    def test_zero_burst_is_allowed(self) -> None:
        """A zero burst is valid and already complete."""
        process = Process.create(1, 0, 0)
        assert process.is_complete

    def test_negative_burst_rejected(self) -> None:
        """Negative burst times are invalid."""
        with pytest.raises(InvalidProcessSpecError, match="burst time"):
            Process.create(1, 0, -1)

    def test_negative_arrival_rejected(self) -> None:
        """Negative arrival times are invalid."""
        with pytest.raises(InvalidProcessSpecError, match="arrival time"):
            Process.create(1, -3, BURST)

    def test_check_times_accepts_zero(self) -> None:
        """Zero arrival and zero burst are both in range."""
        check_times(1, 0, 0)

    def test_check_times_reports_arrival_first(self) -> None:
        """With both times negative the arrival is reported."""
        with pytest.raises(InvalidProcessSpecError, match="Process 4: arrival time"):
            check_times(4, -1, -1)


class TestProcessLifecycle:
    """Verify the state machine."""

    def test_admit_dispatch_preempt(self) -> None:
        """A process can cycle between READY and RUNNING."""
        process = Process.create(1, 0, BURST)
        process.admit()
        assert process.state is ProcessState.READY
        process.dispatch()
        assert process.state is ProcessState.RUNNING
        process.preempt()
        assert process.state is ProcessState.READY

    def test_terminate_records_completion(self) -> None:
        """Terminating stamps the completion time."""
        process = _running()
        process.terminate(now=START)
        assert process.state is ProcessState.TERMINATED
        assert process.completion_time == START

    def test_dispatch_new_process_raises(self) -> None:
        """A process must be admitted before it can run."""
        process = Process.create(1, 0, BURST)
        with pytest.raises(RuntimeError, match="Cannot dispatch"):
            process.dispatch()

    def test_admit_twice_raises(self) -> None:
        """A process is admitted exactly once."""
        process = Process.create(1, 0, BURST)
        process.admit()
        with pytest.raises(RuntimeError, match="Cannot admit"):
            process.admit()

    def test_terminate_ready_process_raises(self) -> None:
        """Only a running process can terminate."""
        process = Process.create(1, 0, BURST)
        process.admit()
        with pytest.raises(RuntimeError, match="Cannot terminate"):
            process.terminate(now=0)


class TestPolicyHooks:
    """Verify the hooks the policy uses to change scheduling fields."""

    def test_charge_consumes_burst(self) -> None:
        """Charging reduces remaining time and grows time in level."""
        process = _running()
        process._charge(SLICE, now=START)
        assert process.remaining_time == BURST - SLICE
        assert process.time_in_level == SLICE
        assert process.last_run_time == START

    def test_first_run_time_is_sticky(self) -> None:
        """Only the first charge sets the first run time."""
        process = _running()
        process._charge(SLICE, now=START)
        process._charge(SLICE, now=START + SLICE)
        assert process.first_run_time == START
        assert process.last_run_time == START + SLICE

    def test_overcharge_raises(self) -> None:
        """More CPU than remains is a bookkeeping error."""
        process = _running(burst=SLICE)
        with pytest.raises(RuntimeError, match="Cannot charge"):
            process._charge(SLICE + 1, now=0)

    def test_move_to_level_resets_time_in_level(self) -> None:
        """Changing level clears the accrued time."""
        process = _running()
        process._charge(SLICE, now=0)
        process._move_to_level(2)
        assert process.current_level == 2
        assert process.time_in_level == 0

    def test_repr_mentions_pid(self) -> None:
        """repr() should identify the process."""
        assert "pid=1" in repr(Process.create(1, 0, BURST))
