"""Build context handed to post-build steps.

A ``Build`` is the read-only view of one finished build (project, number,
result, workspace) plus the single mutation a publisher is allowed:
forcing the result.  Build-log output goes through a ``BuildListener``.
"""

import logging
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import TextIO

from buildtag.result import Result
from buildtag.scm import SCM, NullSCM

logger = logging.getLogger(__name__)


class BuildListener:
    """Writes lines to the build log.

    Lines are also forwarded to the module logger so they show up in the
    process log next to everything else.
    """

    def __init__(self, stream: TextIO | None = None):
        self.stream = stream if stream is not None else sys.stdout

    def println(self, msg: str) -> None:
        self.stream.write(msg + "\n")
        self.stream.flush()
        logger.info("%s", msg)

    def error(self, msg: str) -> None:
        self.stream.write("ERROR: " + msg + "\n")
        self.stream.flush()
        logger.error("%s", msg)

    def warning(self, msg: str) -> None:
        self.stream.write("WARNING: " + msg + "\n")
        self.stream.flush()
        logger.warning("%s", msg)


@dataclass
class Project:
    name: str
    scm: SCM = field(default_factory=NullSCM)


def read_env_file(path: Path) -> dict[str, str]:
    """Parse ``KEY=VALUE`` lines; blank lines and ``#`` comments are skipped.

    Raises ``OSError`` if the file cannot be read.
    """
    env: dict[str, str] = {}
    for line in path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        env[key.strip()] = value.strip()
    return env


@dataclass
class Build:
    """One completed build."""
    project: Project
    number: int
    result: Result
    workspace: Path
    env: dict[str, str] = field(default_factory=dict)
    env_file: Path | None = None

    def set_result(self, result: Result) -> None:
        if result is not self.result:
            logger.info(
                "%s #%d: result %s -> %s",
                self.project.name, self.number, self.result, result,
            )
        self.result = result

    def get_environment(self) -> dict[str, str]:
        """Resolve the environment the build's tools should run with.

        Later sources win: process environment, ``env_file``, explicit
        ``env``, then the host-provided build variables.
        """
        environment = dict(os.environ)
        if self.env_file is not None:
            environment.update(read_env_file(self.env_file))
        environment.update(self.env)
        environment.update({
            "BUILD_NUMBER": str(self.number),
            "BUILD_ID": str(self.number),
            "JOB_NAME": self.project.name,
            "BUILD_TAG": f"hudson-{self.project.name}-{self.number}",
            "WORKSPACE": str(self.workspace),
        })
        return environment
