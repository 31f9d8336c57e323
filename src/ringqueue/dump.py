import io
import sys
from typing import TextIO

from ringqueue.errors import QueueStatus
from ringqueue.ring_queue import RingQueue

# Statuses for which the slot array is missing or its bounds are unreliable.
_UNRENDERABLE: frozenset[QueueStatus] = frozenset(
    {QueueStatus.INVALID_DATA, QueueStatus.INVALID_CAPACITY}
)


def dump_queue(
    queue: RingQueue | None, status: QueueStatus, stream: TextIO | None = None
) -> None:
    """Writes a human-readable dump of a queue's raw state.

    The fields are always printed. The slot listing is skipped when `status`
    says the storage is absent or its length cannot be trusted. Poisoned
    slots are marked so corruption stands out.

    Args:
        queue: The queue to dump. Nothing is written for None.
        status: Usually the result of `verify(queue)`; printed in the header.
        stream: Destination text stream. Defaults to `sys.stdout`.
    """
    if queue is None:
        return
    stream = sys.stdout if stream is None else stream

    snapshot = queue.inspect()
    storage = queue.storage
    storage_id = "None" if storage is None else f"{id(storage):#x}"

    stream.write(f"Queue[{id(queue):#x}]:\n")
    for label, value in (
        ("Capacity", snapshot.capacity),
        ("Size", snapshot.size),
        ("Head", snapshot.head),
        ("Status", f"{status.name} ({status.description})"),
    ):
        stream.write(f"  {label:<8}: {value}\n")

    stream.write(f"  Data[{storage_id}]")
    if (
        status in _UNRENDERABLE
        or snapshot.slots is None
        or snapshot.poisoned is None
    ):
        stream.write("\n")
        return
    stream.write(":\n")

    for index, (value, poisoned) in enumerate(
        zip(snapshot.slots, snapshot.poisoned, strict=True)
    ):
        marker = " (POISON VALUE)" if poisoned else ""
        stream.write(f"    [{index:03d}] {value}{marker}\n")
    stream.write("\n")


def format_queue(queue: RingQueue | None, status: QueueStatus) -> str:
    """Returns the text `dump_queue` would write."""
    buffer = io.StringIO()
    dump_queue(queue, status, buffer)
    return buffer.getvalue()
