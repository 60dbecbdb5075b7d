import logging

import pytest

from jailbreak_compat import utils


@pytest.fixture
def clean_logger():
    logger = logging.getLogger("jailbreak_compat")
    saved_handlers = logger.handlers[:]
    saved_level = logger.level
    logger.handlers = []
    yield logger
    for handler in logger.handlers:
        handler.close()
    logger.handlers = saved_handlers
    logger.setLevel(saved_level)


def test_configure_logging_writes_session_file(tmp_path, clean_logger):
    log_path = utils.configure_logging(log_dir=tmp_path / "logs", verbose=True)
    assert log_path.parent == tmp_path / "logs"
    assert log_path.name.startswith("session-")
    assert log_path.exists()
    assert clean_logger.level == logging.DEBUG
    assert len(clean_logger.handlers) == 2


def test_configure_logging_is_idempotent(clean_logger):
    assert utils.configure_logging() is None
    assert len(clean_logger.handlers) == 1
    utils.configure_logging(verbose=True)
    assert len(clean_logger.handlers) == 1
    assert clean_logger.level == logging.INFO


def test_get_logger_names():
    assert utils.get_logger().name == "jailbreak_compat"
    assert utils.get_logger("catalog").name == "jailbreak_compat.catalog"
    assert utils.get_logger("jailbreak_compat.rules").name == "jailbreak_compat.rules"
