import json
import logging
import sys
from collections.abc import Iterator
from pathlib import Path

import pytest
from loguru import logger

from ringqueue.logging_config import setup_logging


@pytest.fixture()
def restore_logging() -> Iterator[None]:
    """Puts loguru and the stdlib root logger back to their defaults."""
    yield
    logger.remove()
    logger.add(sys.stderr)
    logging.basicConfig(handlers=[], level=logging.WARNING, force=True)


@pytest.mark.usefixtures("restore_logging")
def test_file_sink_writes_json_lines(tmp_path: Path) -> None:
    """Tests that the file sink writes one JSON object per record."""
    setup_logging(console_level="ERROR", file_level="INFO", log_dir=tmp_path)
    logger.bind(capacity=4).info("queue resized")
    logger.debug("below the file level")
    logger.remove()

    log_files = list(tmp_path.glob("ringqueue_*.log"))
    assert len(log_files) == 1
    records = [
        json.loads(line)
        for line in log_files[0].read_text(encoding="utf-8").splitlines()
    ]

    messages = [record["message"] for record in records]
    assert "queue resized" in messages
    assert "below the file level" not in messages

    resized = next(r for r in records if r["message"] == "queue resized")
    assert resized["level"] == "INFO"
    assert resized["extra"] == {"capacity": 4}
    assert resized["source"]["function"] == "test_file_sink_writes_json_lines"


@pytest.mark.usefixtures("restore_logging")
def test_stdlib_logging_is_intercepted(tmp_path: Path) -> None:
    """Tests that records from the logging module reach the loguru sinks."""
    setup_logging(console_level="ERROR", file_level="DEBUG", log_dir=tmp_path)
    logging.getLogger("some.library").warning("from stdlib")
    logger.remove()

    text = next(tmp_path.glob("ringqueue_*.log")).read_text(encoding="utf-8")
    assert "from stdlib" in text


@pytest.mark.usefixtures("restore_logging")
def test_no_file_sink_without_directory(tmp_path: Path) -> None:
    """Tests that file logging is disabled when no directory is given."""
    setup_logging(console_level="ERROR", log_dir=None)
    logger.info("console only")
    assert list(tmp_path.iterdir()) == []
