import pytest

from ringqueue import POISON_VALUE, QueueStatus, RingQueue, verify
from ringqueue.dump import dump_queue, format_queue


@pytest.fixture()
def wrapped_queue() -> RingQueue:
    """Provides a queue with slots [5, POISON, 3, 4], head 2 and size 3."""
    q = RingQueue()
    q.construct(4)
    for value in (1, 2, 3):
        q.push(value)
    q.pop()
    q.push(4)
    q.pop()
    q.push(5)
    return q


def test_dump_lists_every_slot(wrapped_queue: RingQueue) -> None:
    """Tests the full dump of a healthy queue."""
    lines = format_queue(wrapped_queue, verify(wrapped_queue)).splitlines()

    assert lines[0] == f"Queue[{id(wrapped_queue):#x}]:"
    assert lines[1:5] == [
        "  Capacity: 4",
        "  Size    : 3",
        "  Head    : 2",
        "  Status  : OK (no error)",
    ]
    assert lines[5] == f"  Data[{id(wrapped_queue.storage):#x}]:"
    assert lines[6:10] == [
        "    [000] 5",
        f"    [001] {POISON_VALUE} (POISON VALUE)",
        "    [002] 3",
        "    [003] 4",
    ]
    assert lines[10] == ""


def test_dump_suppresses_slots_for_missing_storage() -> None:
    """Tests that an unconstructed queue is dumped without a slot listing."""
    q = RingQueue()
    text = format_queue(q, verify(q))

    assert "INVALID_DATA" in text
    assert text.endswith("  Data[None]\n")
    assert "[000]" not in text


def test_dump_suppresses_slots_for_invalid_capacity(wrapped_queue: RingQueue) -> None:
    """Tests that unreliable bounds hide the slot listing."""
    wrapped_queue._capacity = -1
    text = format_queue(wrapped_queue, verify(wrapped_queue))

    assert "  Capacity: -1" in text
    assert "INVALID_CAPACITY" in text
    assert "[000]" not in text


def test_dump_shows_slots_for_other_failures(wrapped_queue: RingQueue) -> None:
    """Tests that slot-level corruption is still rendered for inspection."""
    assert wrapped_queue.storage is not None
    wrapped_queue.storage[1] = 77
    status = verify(wrapped_queue)
    assert status is QueueStatus.UNEXPECTED_NORMAL_VALUE

    text = format_queue(wrapped_queue, status)
    assert "    [001] 77\n" in text


def test_dump_of_missing_queue_is_empty() -> None:
    """Tests that nothing is written for None."""
    assert format_queue(None, QueueStatus.INVALID_ARGUMENT) == ""


def test_dump_defaults_to_stdout(
    wrapped_queue: RingQueue, capsys: pytest.CaptureFixture[str]
) -> None:
    """Tests writing to standard output when no stream is given."""
    dump_queue(wrapped_queue, QueueStatus.OK)
    captured = capsys.readouterr()
    assert captured.out == format_queue(wrapped_queue, QueueStatus.OK)
