"""
Logging utilities for fbas-graphs
"""

import logging
import sys
from pathlib import Path
from typing import Optional
import structlog


def setup_logger(
    name: str = "fbas_graphs",
    level: str = "INFO",
    log_file: Optional[str] = None,
    structured: bool = True
) -> logging.Logger:
    """
    Setup logger with structured logging support

    Diagnostics go to stderr so that stdout stays free for piping. In both
    modes structlog events are routed through the stdlib logger `name`.

    Args:
        name: Logger name
        level: Logging level
        log_file: Optional log file path
        structured: Emit JSON lines instead of plain text

    Returns:
        Configured logger
    """
    log_level = getattr(logging, level.upper())

    # Configure structlog
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer() if structured
            else structlog.processors.KeyValueRenderer(key_order=['event'])
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logger = logging.getLogger(name)
    logger.setLevel(log_level)

    if structured:
        formatter = logging.Formatter('%(message)s')
    else:
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

    # Console handler
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    logger.handlers = [console_handler]

    # File handler if specified
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get logger instance"""
    return structlog.get_logger(name)
