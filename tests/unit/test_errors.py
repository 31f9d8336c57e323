import pytest

from ringqueue.errors import QueueStatus, RingQueueError


def test_only_ok_is_falsy() -> None:
    """Tests that a status can be used directly as a failure flag."""
    assert not QueueStatus.OK
    assert QueueStatus.OK.is_ok
    for status in QueueStatus:
        if status is not QueueStatus.OK:
            assert status
            assert not status.is_ok


def test_numeric_values_are_stable() -> None:
    """Tests the exit-code values of each status."""
    assert [int(status) for status in QueueStatus] == list(range(10))
    assert QueueStatus.ALLOCATION_FAILURE == 8
    assert QueueStatus.INVALID_HEAD == 9


def test_every_status_has_a_description() -> None:
    """Tests that each member has a non-empty description."""
    for status in QueueStatus:
        assert status.description


def test_raise_for_status() -> None:
    """Tests converting a failing status into an exception."""
    QueueStatus.OK.raise_for_status()

    with pytest.raises(RingQueueError, match="EMPTY_QUEUE") as exc_info:
        QueueStatus.EMPTY_QUEUE.raise_for_status()
    assert exc_info.value.status is QueueStatus.EMPTY_QUEUE
