import operator
import types
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Final, Self, cast

import numpy as np
from loguru import logger

from ringqueue.errors import QueueStatus
from ringqueue.slab import CELL_DTYPE, Slab

# --- Constants ---

# Reserved sentinel written into every unused slot. A live element must never
# equal it; this is not checked on push.
POISON_VALUE: Final[int] = 0xC0FFEE

# Upper bound for the number of slots a queue may own.
MAX_CAPACITY: Final[int] = 100_000

_CELL_INFO: Final = np.iinfo(CELL_DTYPE)


@dataclass(frozen=True)
class QueueSnapshot:
    """A read-only copy of a queue's raw state, for diagnostics.

    `slots` holds every slot including poisoned ones, and `poisoned` flags
    which of them carry the poison marker. Both are None when the queue has
    no storage.
    """

    capacity: int
    size: int
    head: int
    slots: tuple[int, ...] | None
    poisoned: tuple[bool, ...] | None


class RingQueue:
    """A self-verifying FIFO queue of integers on top of a circular buffer.

    Storage is a `Slab` of `capacity` slots. The `size` live elements occupy
    the slots `(head + i) % capacity` for `0 <= i < size`; every other slot
    holds `POISON_VALUE`. The capacity doubles when the queue fills up and
    halves when it drops to a quarter full.

    Every operation verifies the queue before and after mutating it and
    reports the first violated invariant as a `QueueStatus` instead of
    raising. A freshly created `RingQueue()` has no storage until
    `construct()` succeeds.

    Usage:
        queue = RingQueue()
        queue.construct(4)
        queue.push(7)
        value, status = queue.pop()
        queue.destruct()
    """

    def __init__(self) -> None:
        self._slab: Slab | None = None
        self._capacity = 0
        self._size = 0
        self._head = 0

    # --- Lifecycle ---

    def construct(self, capacity: int) -> QueueStatus:
        """Allocates `capacity` poisoned slots and resets the queue to empty.

        Args:
            capacity: The initial number of slots. Must be positive.

        Returns:
            `INVALID_ARGUMENT` for a non-integer or non-positive capacity,
            `INVALID_CAPACITY` above `MAX_CAPACITY`, `ALLOCATION_FAILURE` if
            the storage cannot be obtained, otherwise the verification result.
        """
        if isinstance(capacity, bool):
            return QueueStatus.INVALID_ARGUMENT
        try:
            capacity = operator.index(capacity)
        except TypeError:
            return QueueStatus.INVALID_ARGUMENT
        if capacity <= 0:
            return QueueStatus.INVALID_ARGUMENT
        if capacity > MAX_CAPACITY:
            return QueueStatus.INVALID_CAPACITY

        try:
            slab = Slab.allocate(capacity, POISON_VALUE)
        except MemoryError:
            logger.error(f"Could not allocate {capacity} slots for a new queue.")
            return QueueStatus.ALLOCATION_FAILURE

        if self._slab is not None:
            logger.warning("Constructing a queue that already owns storage.")
            self._slab.release()

        self._slab = slab
        self._capacity = capacity
        self._size = 0
        self._head = 0
        logger.debug(f"Constructed queue with capacity {capacity}.")
        return verify(self)

    def destruct(self) -> QueueStatus:
        """Releases the storage and resets every field to zero.

        A queue that fails verification is left untouched and its storage is
        never released; the block leaks.
        """
        status = verify(self)
        if status:
            logger.warning(
                f"Refusing to destruct a corrupted queue ({status.name}); "
                "its storage is leaked."
            )
            return status

        cast(Slab, self._slab).release()
        self._slab = None
        self._capacity = 0
        self._size = 0
        self._head = 0
        logger.debug("Destructed queue.")
        return QueueStatus.OK

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: types.TracebackType | None,
    ) -> None:
        """Destructs the queue if it still owns storage."""
        if self._slab is not None:
            self.destruct()

    # --- Queue operations ---

    def push(self, value: int) -> QueueStatus:
        """Appends `value` to the tail of the queue.

        `value` must be an integer that fits in 64 bits and must not equal
        `POISON_VALUE`. The latter is the caller's responsibility: a pushed
        poison value is indistinguishable from an empty slot.
        """
        status = verify(self)
        if status:
            logger.warning(f"push rejected, queue failed verification: {status.name}")
            return status

        try:
            value = _as_cell(value)
        except (TypeError, OverflowError):
            return QueueStatus.INVALID_ARGUMENT

        # A queue is only full here at capacity 0, at the ceiling or after a
        # failed grow.
        if self._size == self._capacity:
            new_capacity = max(1, min(self._capacity * 2, MAX_CAPACITY))
            if new_capacity == self._capacity:
                logger.warning(f"Queue is full at the {MAX_CAPACITY} slot ceiling.")
                return QueueStatus.INVALID_CAPACITY
            status = self._reallocate(new_capacity)
            if status:
                return status

        slab = cast(Slab, self._slab)
        slab[(self._head + self._size) % self._capacity] = value
        self._size += 1

        status = verify(self)
        if status:
            logger.warning(f"Queue failed verification after push: {status.name}")
            return status

        return self.resize()

    def pop(self) -> tuple[int | None, QueueStatus]:
        """Removes and returns the oldest element.

        Returns:
            A `(value, status)` pair. `value` is None when nothing was
            removed (failed pre-verification or `EMPTY_QUEUE`). If a step
            after the removal fails, the removed value is returned together
            with that failure.
        """
        status = verify(self)
        if status:
            logger.warning(f"pop rejected, queue failed verification: {status.name}")
            return None, status

        if self._size == 0:
            return None, QueueStatus.EMPTY_QUEUE

        slab = cast(Slab, self._slab)
        value = slab[self._head]
        slab[self._head] = POISON_VALUE
        self._head = (self._head + 1) % self._capacity
        self._size -= 1

        status = verify(self)
        if status:
            logger.warning(f"Queue failed verification after pop: {status.name}")
            return value, status

        return value, self.resize()

    def resize(self) -> QueueStatus:
        """Applies the capacity policy once.

        Halves the capacity when at most a quarter of it is in use, doubles
        it (up to `MAX_CAPACITY`) when the queue is full, and does nothing
        otherwise. The thresholds are strict, with no deadband between them.
        """
        status = verify(self)
        if status:
            return status

        if 4 * self._size <= self._capacity:
            new_capacity = self._capacity // 2
        elif self._size == self._capacity:
            new_capacity = min(self._capacity * 2, MAX_CAPACITY)
        else:
            return QueueStatus.OK

        if new_capacity == self._capacity:
            return QueueStatus.OK
        return self._reallocate(new_capacity)

    def _reallocate(self, new_capacity: int) -> QueueStatus:
        """Moves the live elements into a new slab, normalizing `head` to 0.

        The old slab is only released once the new one is fully populated.
        """
        old = cast(Slab, self._slab)
        try:
            fresh = Slab.allocate(new_capacity, POISON_VALUE)
        except MemoryError:
            logger.error(
                f"Could not allocate {new_capacity} slots; "
                f"keeping capacity {self._capacity}."
            )
            return QueueStatus.ALLOCATION_FAILURE

        fresh.store(0, old.take_wrapped(self._head, self._size))
        old.release()

        logger.debug(
            f"Resized queue from {self._capacity} to {new_capacity} slots "
            f"holding {self._size} elements."
        )
        self._slab = fresh
        self._capacity = new_capacity
        self._head = 0
        return verify(self)

    # --- Inspection ---

    def verify(self) -> QueueStatus:
        """Checks every invariant. See the module-level `verify()`."""
        return verify(self)

    def inspect(self) -> QueueSnapshot:
        """Returns a snapshot of the raw state, valid even for a broken queue."""
        if self._slab is None or self._slab.released:
            return QueueSnapshot(self._capacity, self._size, self._head, None, None)
        cells = self._slab.view()
        return QueueSnapshot(
            capacity=self._capacity,
            size=self._size,
            head=self._head,
            slots=tuple(int(cell) for cell in cells),
            poisoned=tuple(bool(flag) for flag in cells == POISON_VALUE),
        )

    @property
    def storage(self) -> Slab | None:
        return self._slab

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def size(self) -> int:
        return self._size

    @property
    def head(self) -> int:
        return self._head

    @property
    def is_empty(self) -> bool:
        return self._size == 0

    def __len__(self) -> int:
        return self._size

    def __iter__(self) -> Iterator[int]:
        """Yields the live elements, oldest first, without removing them."""
        if self._slab is None or self._size == 0:
            return iter(())
        return iter(self._slab.take_wrapped(self._head, self._size).tolist())

    def __repr__(self) -> str:
        return (
            f"RingQueue(capacity={self._capacity}, size={self._size}, "
            f"head={self._head})"
        )


def _as_cell(value: int) -> int:
    """Converts `value` to a plain int that fits in one slot.

    Booleans are refused even though they are integers.
    """
    if isinstance(value, bool):
        err_msg = "Booleans cannot be stored in the queue."
        raise TypeError(err_msg)
    value = operator.index(value)
    if not _CELL_INFO.min <= value <= _CELL_INFO.max:
        err_msg = f"{value} does not fit in a 64-bit slot."
        raise OverflowError(err_msg)
    return value


def verify(queue: RingQueue | None) -> QueueStatus:
    """Checks a queue's invariants without modifying it.

    The checks run in a fixed order and the first violation is returned:
    a missing queue, missing storage, capacity bounds, size bounds, head
    bounds, and finally a scan of every slot. During the scan, index `i` is
    live when `(i - head) % capacity < size`, which also covers a live region
    that wraps past the end of the storage. The lowest offending index
    decides between `UNEXPECTED_POISON_VALUE` and `UNEXPECTED_NORMAL_VALUE`.
    """
    if queue is None:
        return QueueStatus.INVALID_ARGUMENT

    slab = queue._slab
    if slab is None or slab.released:
        return QueueStatus.INVALID_DATA

    capacity = queue._capacity
    if not 0 <= capacity <= MAX_CAPACITY or capacity != len(slab):
        return QueueStatus.INVALID_CAPACITY

    size = queue._size
    if not 0 <= size <= capacity:
        return QueueStatus.INVALID_SIZE

    if capacity == 0:
        return QueueStatus.OK

    head = queue._head
    if not 0 <= head < capacity:
        return QueueStatus.INVALID_HEAD

    live = (np.arange(capacity) - head) % capacity < size
    poisoned = slab.view() == POISON_VALUE
    misplaced = np.flatnonzero(live == poisoned)
    if misplaced.size == 0:
        return QueueStatus.OK
    if live[misplaced[0]]:
        return QueueStatus.UNEXPECTED_POISON_VALUE
    return QueueStatus.UNEXPECTED_NORMAL_VALUE
