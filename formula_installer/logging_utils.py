from __future__ import annotations

import logging
import os
from pathlib import Path

from .lib.env import PATHS

DEFAULT_LOG_PATH = PATHS.log_default
FALLBACK_LOG_NAME = "formula-installer.log"

_CONFIGURED_ATTR = "_formula_installer_configured"
_LOG_PATH_ATTR = "_formula_installer_log_path"


def _open_log(path: str) -> logging.FileHandler:
    Path(os.path.dirname(path) or ".").mkdir(parents=True, exist_ok=True)
    return logging.FileHandler(path)


def configure_logging(
    log_path: str = DEFAULT_LOG_PATH,
    level: int = logging.INFO,
    also_console: bool = True,
) -> str:
    """Send install logs to a file (and stderr) once per process.

    The file captures every git/make command line with its combined output,
    so a failed build can be diagnosed after the staging dir is gone. When
    the state dir under $XDG_STATE_HOME cannot be written (read-only home,
    sandboxed CI) the log lands in ./formula-installer.log instead; the
    receipt records both the requested and the actual path.

    Returns the path of the log file in use.
    """

    root = logging.getLogger()
    root.setLevel(level)

    if getattr(root, _CONFIGURED_ATTR, False):
        return getattr(root, _LOG_PATH_ATTR, log_path)

    fmt = logging.Formatter(
        fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S%z",
    )

    chosen_path = log_path
    try:
        file_handler = _open_log(log_path)
    except OSError:
        chosen_path = str(Path.cwd() / FALLBACK_LOG_NAME)
        file_handler = _open_log(chosen_path)
    file_handler.setFormatter(fmt)
    root.addHandler(file_handler)

    if also_console:
        console = logging.StreamHandler()
        console.setFormatter(fmt)
        root.addHandler(console)

    setattr(root, _CONFIGURED_ATTR, True)
    setattr(root, _LOG_PATH_ATTR, chosen_path)

    log = logging.getLogger(__name__)
    if chosen_path != log_path:
        log.warning("Cannot write log to %s; logging to %s", log_path, chosen_path)
    else:
        log.debug("Logging to %s", chosen_path)
    return chosen_path
