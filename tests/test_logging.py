from __future__ import annotations

import io
import json
import logging

import pytest

from traffic_replay._logging import PACKAGE_LOGGER, configure_logging, shutdown_logging


@pytest.fixture
def package_logger():
    logger = logging.getLogger(PACKAGE_LOGGER)
    handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
    yield logger
    for handler in list(logger.handlers):
        if handler not in handlers:
            logger.removeHandler(handler)
    logger.setLevel(level)
    logger.propagate = propagate


def test_json_lines(package_logger: logging.Logger) -> None:
    stream = io.StringIO()
    configure_logging("debug", json_format=True, stream=stream)

    logging.getLogger("traffic_replay.poller").info("Found new datafeed %s", "20260101190000")
    shutdown_logging()

    record = json.loads(stream.getvalue().splitlines()[-1])
    assert record["level"] == "INFO"
    assert record["target"] == "traffic_replay.poller"
    assert record["message"] == "Found new datafeed 20260101190000"
    assert record["filename"] == "test_logging.py"


def test_reconfigure_replaces_handler(package_logger: logging.Logger) -> None:
    before = len(package_logger.handlers)
    configure_logging(logging.INFO, stream=io.StringIO())
    configure_logging(logging.WARNING, stream=io.StringIO())

    assert len(package_logger.handlers) == before + 1
    assert package_logger.level == logging.WARNING
