"""Centralized path computations for buildtag.

Process-level state (logs) lives under a single home directory
(``~/.buildtag`` by default).  The ``BUILDTAG_HOME`` environment variable
overrides the default for testing.  Job configuration lives in the
workspace it describes.
"""

import os
from pathlib import Path

_DEFAULT_HOME = Path.home() / ".buildtag"

CONFIG_FILENAME = ".buildtag.yaml"


def home(override: Path | None = None) -> Path:
    """Where buildtag keeps its own logs.

    ``--home`` on the command line wins, then ``BUILDTAG_HOME``, then
    ``~/.buildtag``.
    """
    if override is not None:
        return override
    return Path(os.environ.get("BUILDTAG_HOME") or _DEFAULT_HOME)


def config_path(workspace: Path) -> Path:
    """Default job config file for a workspace."""
    return Path(workspace) / CONFIG_FILENAME


def logs_dir(bt_home: Path) -> Path:
    return bt_home / "logs"
