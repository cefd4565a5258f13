"""
Settings read from the environment, and logging setup.

The rules constants (board size, pieces in hand, seed cells) live next to the code that uses them.
Only things that differ between deployments belong here.
"""

import logging
import os
from typing import Optional

LOG_LEVEL_ENV = "FENDO_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "WARNING"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def log_level() -> str:
    return os.getenv(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL).upper()


def configure_logging(level: Optional[str] = None) -> None:
    """
    Configure the root logger. Meant to be called once by whatever hosts the engine (a server, a script).
    The engine itself never calls this: importing it has no effect on logging.
    """
    logging.basicConfig(level=(level or log_level()).upper(), format=LOG_FORMAT)
