"""Execution boundary around a build's workspace.

Operations that touch the checkout run through ``Workspace.act()``, which
holds the workspace for the duration of the call and releases it on the
way out, whether the call returned or raised.  Today the workspace is
always local; ``act()`` is the seam where a remote agent would plug in.
"""

import contextlib
import logging
from pathlib import Path
from typing import Callable, Iterator, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class WorkspaceError(Exception):
    """The workspace could not be acquired."""


class Workspace:
    def __init__(self, path: Path):
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.is_dir()

    @contextlib.contextmanager
    def channel(self) -> Iterator[Path]:
        """Acquire the workspace; yields its resolved path."""
        if not self.exists():
            raise WorkspaceError(f"Workspace not found: {self.path}")
        real = self.path.resolve()
        logger.debug("Acquired workspace %s", real)
        try:
            yield real
        finally:
            logger.debug("Released workspace %s", real)

    def act(self, fn: Callable[[Path], T]) -> T:
        """Run ``fn(path)`` against the workspace and return its value."""
        with self.channel() as path:
            return fn(path)

    def glob(self, mask: str, files_only: bool = True) -> list[Path]:
        """Paths under the workspace matching an Ant-style *mask*.

        A trailing ``**`` matches everything below that directory, so
        ``target/**`` picks up ``target/app.jar``.
        """
        if not self.exists():
            return []
        if mask == "**" or mask.endswith("/**"):
            mask += "/*"
        matches = self.path.glob(mask)
        if files_only:
            return sorted(p for p in matches if p.is_file())
        return sorted(matches)

    def __repr__(self) -> str:
        return f"Workspace({str(self.path)!r})"
