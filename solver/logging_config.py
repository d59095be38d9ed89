"""
Logging Configuration
Sets up the loggers of the ``solver`` and ``codegen`` packages.
"""
import logging
import sys
from typing import Optional, Union

NAMESPACES = ("solver", "codegen")


def setup_logging(level: Union[int, str] = logging.INFO,
                  log_file: Optional[str] = None) -> None:
    """
    Configures the package loggers.

    Args:
        level: Logging level (e.g. logging.DEBUG or "DEBUG")
        log_file: Optional path to save logs to a file.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level: {level}")

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    for name in NAMESPACES:
        logger = logging.getLogger(name)
        logger.setLevel(level)

        # Re-running setup must not stack duplicate handlers
        if logger.handlers:
            logger.handlers.clear()

        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

        if log_file:
            file_handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
            file_handler.setLevel(level)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

    logging.getLogger("solver").debug("Logging initialized.")
