"""
Centralized logging configuration for the radiology analysis view.

Modules log through ``logging.getLogger(__name__)``; every logger under the
``radiology_ai`` package inherits the handlers installed here.
"""

import logging
import sys
from pathlib import Path
from datetime import datetime
from logging.handlers import RotatingFileHandler
from typing import Optional

PACKAGE_LOGGER = "radiology_ai"


class ColoredFormatter(logging.Formatter):
    """Colored console output for different log levels"""
    
    COLORS = {
        'DEBUG': '\033[36m',      # Cyan
        'INFO': '\033[32m',       # Green
        'WARNING': '\033[33m',    # Yellow
        'ERROR': '\033[31m',      # Red
        'CRITICAL': '\033[35m',   # Magenta
        'RESET': '\033[0m'
    }
    
    def format(self, record):
        # Work on a copy so file handlers sharing the record keep a plain level name
        record = logging.makeLogRecord(record.__dict__)
        log_color = self.COLORS.get(record.levelname, self.COLORS['RESET'])
        record.levelname = f"{log_color}{record.levelname}{self.COLORS['RESET']}"
        return super().format(record)


def setup_logger(
    name: str = PACKAGE_LOGGER,
    level: str = "INFO",
    log_dir: Optional[Path] = None,
    console: bool = True,
    file: bool = True
) -> logging.Logger:
    """
    Setup application logger with console and file handlers.
    
    Args:
        name: Logger name
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_dir: Directory for log files (creates if not exists)
        console: Enable console output
        file: Enable file output
    
    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level.upper()))
    
    # Streamlit reruns the script on every interaction
    logger.handlers.clear()
    
    detailed_format = (
        '%(asctime)s | %(name)s | %(levelname)s | '
        '%(filename)s:%(lineno)d | %(message)s'
    )
    simple_format = '%(levelname)s | %(name)s | %(message)s'
    
    if console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(logging.DEBUG)
        console_handler.setFormatter(ColoredFormatter(simple_format))
        logger.addHandler(console_handler)
    
    if file and log_dir:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        
        log_file = log_dir / f"radiology_ai_{datetime.now().strftime('%Y%m%d')}.log"
        
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=5
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(detailed_format))
        logger.addHandler(file_handler)
    
    logger.propagate = False
    
    return logger


def get_logger(name: str = PACKAGE_LOGGER) -> logging.Logger:
    """
    Get a logger under the package hierarchy.

    The package logger is configured with console output on first use if
    nothing called ``setup_logger`` before.
    """
    root = logging.getLogger(PACKAGE_LOGGER)
    if not root.handlers:
        setup_logger(PACKAGE_LOGGER, level="INFO", console=True, file=False)
    
    if name == PACKAGE_LOGGER or name.startswith(PACKAGE_LOGGER + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{PACKAGE_LOGGER}.{name}")
