"""Tests for logging configuration."""

import logging
import logging.handlers

from kakeibo.logging_config import APP_LOGGER_NAME, get_logger, setup_logging


def test_get_logger_prefixes_module_names():
    assert get_logger("kakeibo.domain.reconciliation").name == "kakeibo.domain.reconciliation"
    assert get_logger("tools").name == "kakeibo.tools"
    assert get_logger().name == APP_LOGGER_NAME


def test_setup_logging_levels(monkeypatch):
    monkeypatch.delenv("KAKEIBO_LOG_FILE", raising=False)
    logger = setup_logging(app_log_level="DEBUG", third_party_log_level="ERROR")

    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 1
    assert logging.getLogger("sqlalchemy.engine").level == logging.ERROR


def test_setup_logging_env_default(monkeypatch):
    monkeypatch.setenv("KAKEIBO_LOG_LEVEL", "INFO")
    monkeypatch.delenv("KAKEIBO_LOG_FILE", raising=False)
    assert setup_logging().level == logging.INFO


def test_setup_logging_writes_file(tmp_path):
    log_file = tmp_path / "logs" / "kakeibo.log"
    logger = setup_logging(app_log_level="INFO", log_file=str(log_file))

    get_logger("test").info("balance corrected")
    for handler in logger.handlers:
        handler.flush()

    assert any(isinstance(h, logging.handlers.RotatingFileHandler) for h in logger.handlers)
    assert "balance corrected" in log_file.read_text()

    # Release the file handle before tmp_path cleanup
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
