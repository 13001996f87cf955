"""Unit tests for logging configuration."""

import json
import logging

from loguru import logger

from src.app.runtime.app_startup import configure_logging
from src.app.runtime.config.config_data import ConfigData, LoggingConfig


def test_configure_logging_writes_json_file(tmp_path):
    log_file = tmp_path / "logs" / "identity.log"
    config = ConfigData(
        logging=LoggingConfig(level="DEBUG", format="json", file=str(log_file))
    )

    configure_logging(config)
    try:
        logger.info("identity store ready")
        logger.complete()
    finally:
        logger.remove()

    records = [json.loads(line) for line in log_file.read_text().splitlines()]
    assert any(r["record"]["message"] == "identity store ready" for r in records)


def test_stdlib_logging_is_intercepted(tmp_path):
    log_file = tmp_path / "plain.log"
    config = ConfigData(
        logging=LoggingConfig(level="INFO", format="plain", file=str(log_file))
    )

    configure_logging(config)
    try:
        logging.getLogger("third.party").warning("forwarded from stdlib")
        logger.complete()
    finally:
        logger.remove()

    assert "forwarded from stdlib" in log_file.read_text()


def test_sqlalchemy_loggers_are_quieted():
    configure_logging(ConfigData())
    try:
        assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING
    finally:
        logger.remove()
