"""
Logging setup for the records API.

``setup_logging`` attaches a console handler (and optionally a file
handler) to the root logger.  It is safe to call more than once: when the
root logger already has handlers, nothing is changed, which keeps test
runs and repeated ``create_app`` calls from duplicating output.
"""

import logging
from pathlib import Path
from typing import Optional


def setup_logging(level: str = "INFO", logfile: Optional[str] = None) -> None:
    """Configure the root logger.

    Parameters
    ----------
    level : str
        Logging level name such as ``"DEBUG"`` or ``"INFO"``.  Unknown
        names fall back to ``INFO``.
    logfile : Optional[str]
        Optional path of a file that receives the same records as the
        console.
    """
    logger = logging.getLogger()
    if logger.handlers:
        return

    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if logfile:
        file_handler = logging.FileHandler(Path(logfile).resolve(), encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
