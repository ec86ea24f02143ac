"""
Logging Configuration
=====================
Sets up the 'figcomposer' logger tree.

Each module logs through `logging.getLogger(__name__)`, so records from the
viewport, the auto-range selector and the graph glue all end up in the
handlers installed here. Auto-ranging is chatty at DEBUG level; use
`module_levels` to raise the verbosity of one module without flooding the
console with the rest.

Usage:
    setup_logging(module_levels={"model.autorange": logging.DEBUG})
"""
from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Mapping, Optional, Union

PACKAGE_LOGGER = "figcomposer"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[Union[str, Path]] = None,
    module_levels: Optional[Mapping[str, int]] = None
) -> logging.Logger:
    """
    Configure the package logger: console output and an optional log file.

    Calling it again replaces the handlers of the previous call.

    Args:
        level: Level of the package logger (e.g. logging.DEBUG, logging.INFO).
        log_file: Optional path of a log file, overwritten on every call.
        module_levels: Per-module overrides, keyed by the module path below the
            package, e.g. {"model.viewport": logging.DEBUG}.

    Returns:
        The package logger.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    # Filtering happens on the loggers so module overrides reach the handlers
    formatter = logging.Formatter(LOG_FORMAT, datefmt='%H:%M:%S')
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(Path(log_file), mode='w', encoding='utf-8'))
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    for module, module_level in (module_levels or {}).items():
        logging.getLogger(f"{PACKAGE_LOGGER}.{module}").setLevel(module_level)

    logger.info(f"Logging initialized at {logging.getLevelName(level)}.")
    return logger
