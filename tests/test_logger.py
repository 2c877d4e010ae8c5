import logging

from core import logger


def test_log_uses_source_as_logger_name(caplog):
    with caplog.at_level(logging.DEBUG):
        logger.log("Browser", "debug", "rendered")

    record = caplog.records[-1]
    assert record.name == "Browser"
    assert record.levelno == logging.DEBUG
    assert record.getMessage() == "rendered"


def test_levels_are_normalized(caplog):
    with caplog.at_level(logging.DEBUG):
        for level in ("debug", "info", "warning", "error"):
            logger.log("Browser", level, level)

    assert [r.levelno for r in caplog.records] == [
        logging.DEBUG, logging.INFO, logging.WARNING, logging.ERROR
    ]


def test_unknown_level_falls_back_to_info(caplog):
    with caplog.at_level(logging.DEBUG):
        logger.log("Browser", "verbose", "hello")

    assert caplog.records[-1].levelno == logging.INFO
