"""Logging configuration for filekit scripts."""
from __future__ import annotations

import logging
from typing import Union


def setup_logging(level: Union[str, int] = "INFO") -> None:
    """Configure the root logger once; library modules only call getLogger."""
    if isinstance(level, str):
        level = logging.getLevelName(level.strip().upper())
        if not isinstance(level, int):
            level = logging.INFO

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        handlers=[logging.StreamHandler()],
    )
    # requests/urllib3 are chatty at DEBUG
    logging.getLogger("urllib3").setLevel(max(level, logging.INFO))
