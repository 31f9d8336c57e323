"""Command-line demonstration of the ring queue.

Constructs a queue, pushes `1..count`, pops everything back while checking
FIFO order, optionally dumps the final state and destructs the queue. The
process exit code is 0 on success or the numeric `QueueStatus` of the first
failure.

Usage:
    ringqueue --capacity 1 --count 16
    python -m ringqueue --no-dump
"""

import argparse
import sys
from collections.abc import Sequence
from pathlib import Path

from loguru import logger

from ringqueue.config import CONFIG_FILE, DemoSettings, load_config
from ringqueue.dump import dump_queue
from ringqueue.errors import QueueStatus, RingQueueError
from ringqueue.logging_config import setup_logging
from ringqueue.ring_queue import RingQueue, verify


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ringqueue",
        description="Push and pop a sequence through a self-verifying ring queue.",
    )
    parser.add_argument("--capacity", type=int, help="initial queue capacity")
    parser.add_argument("--count", type=int, help="number of elements to push")
    parser.add_argument(
        "--config", type=Path, default=CONFIG_FILE, help="path to config.toml"
    )
    parser.add_argument("--log-level", help="console log level, e.g. DEBUG")
    parser.add_argument(
        "--no-dump",
        action="store_true",
        help="do not print the queue state at the end",
    )
    return parser


def run_demo(demo: DemoSettings) -> QueueStatus:
    """Runs one push/pop round trip and returns the final status.

    Raises:
        RingQueueError: On the first failing queue operation, or when the
            values come back out of order.
    """
    with RingQueue() as queue:
        queue.construct(demo.initial_capacity).raise_for_status()

        for value in range(1, demo.element_count + 1):
            queue.push(value).raise_for_status()
        logger.info(
            f"Pushed {demo.element_count} elements; capacity is {queue.capacity}."
        )

        for expected in range(1, demo.element_count + 1):
            value, status = queue.pop()
            status.raise_for_status()
            if value != expected:
                logger.error(f"Popped {value}, expected {expected}.")
                raise RingQueueError(QueueStatus.UNEXPECTED_NORMAL_VALUE)
        logger.info(f"Popped {demo.element_count} elements in FIFO order.")

        status = verify(queue)
        if demo.dump_on_exit:
            dump_queue(queue, status)
        status.raise_for_status()
        return queue.destruct()


def main(argv: Sequence[str] | None = None) -> int:
    """The entry point for the `ringqueue` command."""
    args = build_parser().parse_args(argv)
    settings = load_config(args.config)
    if args.capacity is not None:
        settings.demo.initial_capacity = args.capacity
    if args.count is not None:
        settings.demo.element_count = args.count
    if args.no_dump:
        settings.demo.dump_on_exit = False

    log_dir = (
        Path(settings.general.log_directory)
        if settings.general.log_directory
        else None
    )
    setup_logging(
        console_level=args.log_level or settings.general.log_level_console,
        file_level=settings.general.log_level_file,
        log_dir=log_dir,
    )

    try:
        status = run_demo(settings.demo)
    except RingQueueError as e:
        logger.error(f"Demo failed: {e}")
        return int(e.status)

    return int(status)


if __name__ == "__main__":
    sys.exit(main())
