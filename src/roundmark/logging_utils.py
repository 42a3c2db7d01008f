"""Logging setup for applications embedding roundmark.

The library itself only creates module loggers and never installs handlers;
call :func:`configure_logging` from an application entry point to see its
DEBUG output (timings, table gate decisions, plugin fallbacks).
"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

# src/roundmark/logging_utils.py

from __future__ import annotations

import logging
import sys
from typing import Optional


def configure_logging(
    log_level: int | str,
    log_file: Optional[str] = None,
    trace_mode: bool = False,
) -> logging.Logger:
    """Configure root logging handlers.

    Parameters
    ----------
    log_level : int | str
        Numeric logging level or string name (e.g., "DEBUG"). Unknown names
        fall back to INFO.
    log_file : str, optional
        Optional path to a log file receiving the same records.
    trace_mode : bool, default False
        When true, emit timestamps and logger names.

    Returns
    -------
    logging.Logger
        The configured root logger instance.

    Examples
    --------
        >>> logger = configure_logging("DEBUG", trace_mode=True)
        >>> logger.level == logging.DEBUG
        True

    """
    resolved_level = log_level if isinstance(log_level, int) else getattr(logging, str(log_level).upper(), logging.INFO)
    if not isinstance(resolved_level, int):
        resolved_level = logging.INFO

    root_logger = logging.getLogger()
    root_logger.setLevel(resolved_level)
    root_logger.handlers.clear()

    format_str = "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s" if trace_mode else "%(levelname)s: %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S" if trace_mode else None
    formatter = logging.Formatter(format_str, datefmt=date_format)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(resolved_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        try:
            file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        except OSError as exc:
            root_logger.warning("Could not create log file %s: %s", log_file, exc)
        else:
            file_handler.setLevel(resolved_level)
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)
            root_logger.info("Logging to file: %s", log_file)

    return root_logger
