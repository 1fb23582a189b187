"""Logging helpers for the GUI.

Avoids configuring global logging in tests.
"""

from __future__ import annotations

import logging
from typing import Union

logger = logging.getLogger("sleeptracker.gui")


def log(message: str, level: Union[int, str] = logging.INFO) -> None:
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    logger.log(level, message)
