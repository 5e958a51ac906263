"""
Logging Configuration
=====================

Console/file handlers for the example and tools scripts.
"""

import logging
import sys
from typing import Iterable, Optional

PACKAGES = ('dilation', 'worker')


def setup_logging(level: int = logging.INFO,
                  log_file: Optional[str] = None,
                  packages: Iterable[str] = PACKAGES) -> None:
    """
    Configure loggers for the project namespaces.

    Args:
        level: Logging level
        log_file: Optional path to also write logs to
        packages: Logger namespaces to configure
    """
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode='w', encoding='utf-8'))
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)

    for name in packages:
        logger = logging.getLogger(name)
        logger.setLevel(level)
        # Avoid duplicate output on repeated setup
        if logger.hasHandlers():
            logger.handlers.clear()
        for handler in handlers:
            logger.addHandler(handler)
        logger.propagate = False

    logging.getLogger(PACKAGES[0]).info("Logging initialized.")
