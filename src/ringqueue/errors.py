from enum import IntEnum


class RingQueueError(Exception):
    """Raised at API boundaries that prefer exceptions over status codes.

    The queue itself never raises this; it returns a `QueueStatus`. Callers
    such as the command-line driver convert a failing status with
    `QueueStatus.raise_for_status()`.
    """

    def __init__(self, status: "QueueStatus") -> None:
        super().__init__(f"{status.name}: {status.description}")
        self.status = status


class QueueStatus(IntEnum):
    """Outcome of a queue operation.

    The numeric values double as process exit codes. Only `OK` is falsy, so
    `if status:` reads as "if the operation failed".
    """

    OK = 0
    INVALID_DATA = 1
    INVALID_SIZE = 2
    INVALID_CAPACITY = 3
    UNEXPECTED_POISON_VALUE = 4
    UNEXPECTED_NORMAL_VALUE = 5
    INVALID_ARGUMENT = 6
    EMPTY_QUEUE = 7
    ALLOCATION_FAILURE = 8
    INVALID_HEAD = 9

    @property
    def is_ok(self) -> bool:
        return self is QueueStatus.OK

    @property
    def description(self) -> str:
        """A one-line, human-readable explanation of the status."""
        return _DESCRIPTIONS[self]

    def raise_for_status(self) -> None:
        """Raises `RingQueueError` unless the status is `OK`."""
        if not self.is_ok:
            raise RingQueueError(self)


_DESCRIPTIONS: dict[QueueStatus, str] = {
    QueueStatus.OK: "no error",
    QueueStatus.INVALID_DATA: "queue storage is missing",
    QueueStatus.INVALID_SIZE: "size is negative or larger than capacity",
    QueueStatus.INVALID_CAPACITY: "capacity is negative, above the maximum or "
    "disagrees with the storage length",
    QueueStatus.UNEXPECTED_POISON_VALUE: "poison value found inside the live region",
    QueueStatus.UNEXPECTED_NORMAL_VALUE: "normal value found outside the live region",
    QueueStatus.INVALID_ARGUMENT: "invalid argument given to the function",
    QueueStatus.EMPTY_QUEUE: "no elements to pop",
    QueueStatus.ALLOCATION_FAILURE: "storage could not be allocated",
    QueueStatus.INVALID_HEAD: "head is outside the storage bounds",
}
