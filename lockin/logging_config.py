"""Logging setup for the league engine and its command-line tools."""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

CONSOLE_FORMAT = '%(levelname)s: %(message)s'
FILE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s'

# Engine modules with their own logger (lockin.<name>)
ENGINE_MODULES = ('scoring', 'schedule', 'standings', 'playoffs', 'league', 'season', 'utils')


def setup_logging(
    level: int = logging.INFO,
    log_dir: Optional[Path] = None,
    debug_modules: tuple[str, ...] = (),
) -> logging.Logger:
    """
    Configure the 'lockin' logger hierarchy.

    Console output always goes to stdout. A timestamped log file
    (lockin_YYYYmmdd_HHMMSS.log) is written only when log_dir is given.

    Args:
        level: Level for the engine as a whole
        log_dir: Optional directory for a log file
        debug_modules: Engine modules to log at DEBUG regardless of level
            (e.g. ('scoring',) shows every sanitized metric)

    Returns:
        The configured 'lockin' logger
    """
    logger = logging.getLogger('lockin')
    logger.setLevel(logging.DEBUG if debug_modules else level)
    logger.handlers = []
    logger.propagate = False

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(logging.DEBUG if debug_modules else level)
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    logger.addHandler(console)

    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / f'lockin_{datetime.now():%Y%m%d_%H%M%S}.log'
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
        logger.addHandler(file_handler)

    # Children otherwise inherit DEBUG from the parent when any module is debugged
    for name in ENGINE_MODULES:
        logging.getLogger(f'lockin.{name}').setLevel(
            logging.DEBUG if name in debug_modules else level
        )

    return logger
