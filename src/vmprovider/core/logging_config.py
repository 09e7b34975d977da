# vmprovider
# Copyright © 2025 Osvaldo J. Vega Rodríguez
# Licensed under CC BY-NC-SA 4.0 International
# http://creativecommons.org/licenses/by-nc-sa/4.0/

"""Logging configuration with file rotation."""

from __future__ import annotations

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

__all__ = ["setup_logging", "get_log_directory"]

PACKAGE_LOGGER = "vmprovider"


def setup_logging(
    app_name: str = "vmprovider",
    console_level: int = logging.WARNING,
    *,
    log_dir: Path | None = None,
) -> Path:
    """
    Configure package logging.

    Creates two log files:
    - vmprovider.log: DEBUG+ messages from the package (10 MB per file, 5 rotations)
    - errors.log: ERROR+ messages from anywhere (5 MB per file, 3 rotations)

    Args:
        app_name: Application name for the default log directory
        console_level: Minimum level for console output
        log_dir: Explicit log directory, overriding the platform default

    Returns:
        Path to the log directory
    """
    log_dir = Path(log_dir) if log_dir is not None else _get_log_directory(app_name)
    log_dir.mkdir(parents=True, exist_ok=True)

    detailed_formatter = logging.Formatter(
        "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    simple_formatter = logging.Formatter("%(levelname)-8s | %(name)s | %(message)s")

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.INFO)
    for handler in list(root_logger.handlers):
        if getattr(handler, "_vmprovider", False):
            root_logger.removeHandler(handler)
            handler.close()

    pkg_logger = logging.getLogger(PACKAGE_LOGGER)
    pkg_logger.setLevel(logging.DEBUG)
    for handler in list(pkg_logger.handlers):
        pkg_logger.removeHandler(handler)
        handler.close()

    app_log_path = log_dir / f"{PACKAGE_LOGGER}.log"
    app_handler = RotatingFileHandler(
        app_log_path,
        maxBytes=10 * 1024 * 1024,  # 10 MB
        backupCount=5,
        encoding="utf-8",
    )
    app_handler.setLevel(logging.DEBUG)
    app_handler.setFormatter(detailed_formatter)
    pkg_logger.addHandler(app_handler)

    error_log_path = log_dir / "errors.log"
    error_handler = RotatingFileHandler(
        error_log_path,
        maxBytes=5 * 1024 * 1024,  # 5 MB
        backupCount=3,
        encoding="utf-8",
    )
    error_handler.setLevel(logging.ERROR)
    error_handler.setFormatter(detailed_formatter)
    error_handler._vmprovider = True  # type: ignore[attr-defined]
    root_logger.addHandler(error_handler)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(simple_formatter)
    pkg_logger.addHandler(console_handler)

    # The writer thread logs every failed statement; keep it out of the console.
    logging.getLogger("vmprovider.storage.sqlite.db_writer").setLevel(logging.INFO)

    log = logging.getLogger(__name__)
    log.info("%s logging initialized", app_name)
    log.info("Log directory: %s", log_dir)
    log.info("Platform: %s, Python: %s", sys.platform, sys.version.split()[0])

    return log_dir


def _get_log_directory(app_name: str) -> Path:
    """
    Get platform-specific log directory.

    - Windows: %LOCALAPPDATA%\\AppName\\logs
    - macOS: ~/Library/Logs/AppName
    - Linux: $XDG_STATE_HOME/AppName/logs (~/.local/state by default)
    """
    home = Path.home()

    if sys.platform == "win32":
        base = Path(os.environ.get("LOCALAPPDATA", home / "AppData" / "Local"))
        return base / app_name / "logs"

    elif sys.platform == "darwin":
        return home / "Library" / "Logs" / app_name

    else:
        xdg_state_home = os.environ.get("XDG_STATE_HOME", home / ".local" / "state")
        return Path(xdg_state_home) / app_name / "logs"


def get_log_directory(app_name: str = "vmprovider") -> Path:
    """Return the default log directory without configuring logging."""

    return _get_log_directory(app_name)
