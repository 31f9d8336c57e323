# src/ringqueue/__init__.py
"""ringqueue: a self-verifying, dynamically resizable FIFO queue.

The queue stores integers in a circular buffer whose unused slots hold a
reserved poison value. After every mutation the queue re-checks its own
invariants and reports the first violation as a `QueueStatus`.

Modules:
- `ring_queue`: the queue, its resize policy and the verifier.
- `slab`: the owned block of storage behind a queue.
- `dump`: a text dump of a queue's raw state for debugging.
- `errors`: status codes and the exception used at API boundaries.
"""

import importlib.metadata

from ringqueue.errors import QueueStatus, RingQueueError
from ringqueue.ring_queue import (
    MAX_CAPACITY,
    POISON_VALUE,
    QueueSnapshot,
    RingQueue,
    verify,
)

try:
    __version__: str = importlib.metadata.version("ringqueue")
except importlib.metadata.PackageNotFoundError:
    __version__ = "0.0.0-dev"

__all__ = [
    "MAX_CAPACITY",
    "POISON_VALUE",
    "QueueSnapshot",
    "QueueStatus",
    "RingQueue",
    "RingQueueError",
    "verify",
]
