import logging
from logging.handlers import RotatingFileHandler

import pytest

from radiology_ai.utils.logger import PACKAGE_LOGGER, ColoredFormatter, get_logger, setup_logger


@pytest.fixture(autouse=True)
def restore_package_logger():
    logger = logging.getLogger(PACKAGE_LOGGER)
    saved = (list(logger.handlers), logger.level, logger.propagate)
    yield
    for handler in logger.handlers:
        if handler not in saved[0]:
            handler.close()
    logger.handlers[:] = saved[0]
    logger.setLevel(saved[1])
    logger.propagate = saved[2]


def test_setup_logger_console_and_file(tmp_path):
    logger = setup_logger(level="DEBUG", log_dir=tmp_path / "logs")
    
    assert logger.name == PACKAGE_LOGGER
    assert logger.level == logging.DEBUG
    assert logger.propagate is False
    assert any(isinstance(h, RotatingFileHandler) for h in logger.handlers)
    assert len(list((tmp_path / "logs").glob("radiology_ai_*.log"))) == 1

def test_setup_logger_without_file(tmp_path):
    logger = setup_logger(level="WARNING", log_dir=tmp_path, file=False)
    
    assert logger.level == logging.WARNING
    assert not any(isinstance(h, RotatingFileHandler) for h in logger.handlers)
    assert list(tmp_path.iterdir()) == []

def test_setup_logger_is_idempotent():
    setup_logger(file=False)
    logger = setup_logger(file=False)
    
    assert len(logger.handlers) == 1

def test_get_logger_names():
    assert get_logger().name == PACKAGE_LOGGER
    assert get_logger("radiology_ai.predictions").name == "radiology_ai.predictions"
    assert get_logger("app.main").name == "radiology_ai.app.main"

def test_get_logger_configures_console_once():
    logging.getLogger(PACKAGE_LOGGER).handlers.clear()
    
    get_logger()
    get_logger()
    
    assert len(logging.getLogger(PACKAGE_LOGGER).handlers) == 1

def test_colored_formatter_leaves_record_untouched():
    record = logging.LogRecord("radiology_ai", logging.ERROR, __file__, 1, "boom", None, None)
    
    formatted = ColoredFormatter("%(levelname)s | %(message)s").format(record)
    
    assert "\033[31mERROR\033[0m" in formatted
    assert record.levelname == "ERROR"
