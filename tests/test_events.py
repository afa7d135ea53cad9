"""Tests for observer events and the event recorder."""

import dataclasses

import pytest

from mlfq_sim.events import (
    EventRecorder,
    PriorityReset,
    ProcessArrived,
    ProcessCompleted,
    QueuedProcess,
    QueueSnapshot,
    event_to_dict,
)


class TestEvents:
    """Verify event records."""

    def test_events_are_immutable(self) -> None:
        """Events cannot be modified after emission."""
        event = ProcessArrived(pid=1, time=0)
        with pytest.raises(dataclasses.FrozenInstanceError):
            event.time = 5  # pyright: ignore[reportAttributeAccessIssue]

    def test_event_to_dict_adds_type(self) -> None:
        """Serialised events carry their class name."""
        data = event_to_dict(ProcessCompleted(pid=2, time=9))
        assert data == {"pid": 2, "time": 9, "type": "ProcessCompleted"}

    def test_snapshot_to_dict_nests_processes(self) -> None:
        """Queue snapshots serialise their queued processes."""
        snapshot = QueueSnapshot(time=4, levels=((QueuedProcess(pid=1, remaining_time=3),), ()))
        data = event_to_dict(snapshot)
        assert data["type"] == "QueueSnapshot"
        assert data["levels"][0][0] == {"pid": 1, "remaining_time": 3}


class TestEventRecorder:
    """Verify the recording observer."""

    def test_records_in_order(self) -> None:
        """Events are kept in emission order."""
        recorder = EventRecorder()
        first = ProcessArrived(pid=1, time=0)
        second = ProcessCompleted(pid=1, time=4)
        recorder.notify(first)
        recorder.notify(second)
        assert recorder.events == [first, second]

    def test_of_type_filters(self) -> None:
        """of_type() returns only the requested class."""
        recorder = EventRecorder()
        recorder.notify(ProcessArrived(pid=1, time=0))
        recorder.notify(PriorityReset(time=50, promoted=(1,)))
        assert recorder.of_type(PriorityReset) == [PriorityReset(time=50, promoted=(1,))]

    def test_clear(self) -> None:
        """clear() forgets everything."""
        recorder = EventRecorder()
        recorder.notify(ProcessArrived(pid=1, time=0))
        recorder.clear()
        assert recorder.events == []
