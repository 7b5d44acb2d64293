"""Tests for simulation events and the bounded event log."""

from parksim.core.events import EventKind, EventLog, SimulationEvent


def make_event(seq, kind=EventKind.NOTICE, minute=360):
    return SimulationEvent(seq=seq, kind=kind, minute=minute, message=f"event {seq}")


def test_str_has_timestamp():
    event = make_event(1, minute=7 * 60 + 5)
    assert event.timestamp == "07:05"
    assert str(event) == "[07:05] event 1"


def test_newest_first():
    log = EventLog()
    for seq in range(1, 4):
        log.append(make_event(seq))
    assert [e.seq for e in log] == [3, 2, 1]
    assert log.latest().seq == 3


def test_bounded():
    log = EventLog(max_events=100)
    for seq in range(1, 151):
        log.append(make_event(seq))
    assert len(log) == 100
    assert log.latest().seq == 150
    assert list(log)[-1].seq == 51


def test_clear():
    log = EventLog()
    log.append(make_event(1))
    log.clear()
    assert len(log) == 0
    assert log.latest() is None


def test_to_frame():
    log = EventLog()
    log.append(make_event(1, EventKind.ARRIVAL, 400))
    log.append(make_event(2, EventKind.REJECTION, 401))

    frame = log.to_frame()

    assert list(frame["seq"]) == [2, 1]
    assert list(frame["kind"]) == ["rejection", "arrival"]
    assert list(frame["timestamp"]) == ["06:41", "06:40"]


def test_empty_frame_keeps_columns():
    frame = EventLog().to_frame()
    assert frame.empty
    assert "message" in frame.columns
