"""Source-control descriptors attached to a project.

Only ``GitSCM`` is understood by the publisher; any other ``SCM`` makes
the publish step a no-op.
"""

from dataclasses import dataclass, field


class SCM:
    """Base class for a project's source-control configuration."""

    type_name = ""


class NullSCM(SCM):
    """No source control configured."""

    type_name = "none"


@dataclass
class RemoteConfig:
    """A named git remote, optionally with an explicit URL."""
    name: str
    url: str | None = None

    @property
    def push_target(self) -> str:
        """What to hand to ``git push``: the URL when known, else the name."""
        return self.url or self.name


@dataclass
class MergeOptions:
    """Where (and whether) to push after a successful build."""
    merge_remote: RemoteConfig | None = None
    merge_target: str | None = None

    def do_merge(self) -> bool:
        return self.merge_remote is not None and bool(self.merge_target)


@dataclass
class GitSCM(SCM):
    git_exe: str = "git"
    merge_options: MergeOptions = field(default_factory=MergeOptions)

    type_name = "git"
