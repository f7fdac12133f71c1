"""Process-wide logging configuration.

Every module logs through ``logging.getLogger(__name__)``; this module
wires the ``buildtag`` logger to a rotating file under the home directory
and, optionally, to stderr.
"""

import logging
import logging.handlers
import sys
from pathlib import Path

from buildtag.paths import logs_dir

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"

_configured = False


def log_file_path(bt_home: Path) -> Path:
    return logs_dir(bt_home) / "buildtag.log"


def configure_logging(bt_home: Path, console: bool = False, level: int = logging.INFO) -> None:
    """Attach handlers to the ``buildtag`` logger (idempotent)."""
    global _configured
    if _configured:
        return

    root = logging.getLogger("buildtag")
    root.setLevel(level)
    formatter = logging.Formatter(LOG_FORMAT)

    log_fp = log_file_path(bt_home)
    log_fp.parent.mkdir(parents=True, exist_ok=True)
    file_handler = logging.handlers.RotatingFileHandler(
        log_fp, maxBytes=5 * 1024 * 1024, backupCount=3,
    )
    file_handler.setFormatter(formatter)
    root.addHandler(file_handler)

    if console:
        stream_handler = logging.StreamHandler(sys.stderr)
        stream_handler.setFormatter(formatter)
        root.addHandler(stream_handler)

    _configured = True
