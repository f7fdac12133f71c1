"""Git client used by the publisher.

``GitClient`` is the small surface the publisher needs (delete a tag,
create a tag, push).  ``GitCLI`` implements it by shelling out to the
configured git executable inside the workspace; tests substitute fakes.
"""

import logging
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path

from buildtag.build import BuildListener
from buildtag.scm import RemoteConfig

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 120


class GitError(Exception):
    """A git command failed."""

    def __init__(self, args: list[str], returncode: int | None, stderr: str):
        self.command = args
        self.returncode = returncode
        self.stderr = stderr
        detail = stderr.strip() or f"exit status {returncode}"
        super().__init__(f"git {' '.join(args)} failed: {detail}")


class GitClient(ABC):
    """Tag and push operations against one repository."""

    @abstractmethod
    def tag_exists(self, name: str) -> bool:
        ...

    @abstractmethod
    def delete_tag(self, name: str) -> None:
        """Delete tag *name*.  A tag that does not exist is not an error."""
        ...

    @abstractmethod
    def tag(self, name: str, message: str) -> None:
        """Create annotated tag *name* at HEAD, replacing any existing one."""
        ...

    @abstractmethod
    def push(self, remote: RemoteConfig, refspec: str) -> None:
        ...


class GitCLI(GitClient):
    """``GitClient`` backed by the git command line."""

    def __init__(
        self,
        git_exe: str,
        repo_dir: Path,
        listener: BuildListener | None = None,
        environment: dict[str, str] | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.git_exe = git_exe
        self.repo_dir = Path(repo_dir)
        self.listener = listener
        self.environment = environment or None
        self.timeout = timeout

    def _run(self, args: list[str]) -> subprocess.CompletedProcess:
        logger.debug("%s %s (cwd=%s)", self.git_exe, " ".join(args), self.repo_dir)
        try:
            return subprocess.run(
                [self.git_exe] + args,
                cwd=str(self.repo_dir),
                env=self.environment,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired:
            raise GitError(args, None, f"timed out after {self.timeout} seconds") from None
        except OSError as exc:
            raise GitError(args, None, f"could not run {self.git_exe}: {exc}") from exc

    def _check(self, args: list[str]) -> subprocess.CompletedProcess:
        result = self._run(args)
        if result.returncode != 0:
            raise GitError(args, result.returncode, result.stderr)
        return result

    def tag_exists(self, name: str) -> bool:
        out = self._check(["tag", "-l", name]).stdout
        return name in out.splitlines()

    def delete_tag(self, name: str) -> None:
        if not self.tag_exists(name):
            logger.debug("Tag %s not present, nothing to delete", name)
            return
        self._check(["tag", "-d", name])

    def tag(self, name: str, message: str) -> None:
        self._check(["tag", "-a", "-f", "-m", message, name])

    def push(self, remote: RemoteConfig, refspec: str) -> None:
        result = self._check(["push", remote.push_target, refspec])
        # git reports push progress on stderr
        if self.listener is not None and result.stderr.strip():
            for line in result.stderr.strip().splitlines():
                self.listener.println(line)
