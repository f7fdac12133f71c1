"""Post-build publisher — tag the build's revision and push merges back.

The sequence for a finished build whose project uses git:

1. Delete the tag ``<prefix>-<project>-<number>`` that the checkout step
   left behind (absent tag is fine).
2. Create the annotated tag ``<prefix>-<project>-<number>-<RESULT>`` with
   message ``Build #<number>``.
3. If the project's merge options are enabled *and* the result is
   SUCCESS or better, push ``HEAD:<target>`` to the merge remote.

Failure handling:
- A project that does not use git is skipped: ``perform()`` returns
  ``False`` and the build is left untouched.
- Failing to resolve the build environment is only a warning; the run
  continues with an empty environment.
- Any other failure during the sequence is reported on the build log,
  the build result is forced to FAILURE and ``perform()`` returns
  ``False``.  Nothing is rolled back: a tag created before a failed push
  stays in the repository.
"""

import enum
import logging
from pathlib import Path
from typing import Callable

from buildtag.build import Build, BuildListener
from buildtag.git import GitCLI, GitClient
from buildtag.result import Result
from buildtag.scm import GitSCM
from buildtag.workspace import Workspace

logger = logging.getLogger(__name__)

DEFAULT_TAG_PREFIX = "hudson"

ClientFactory = Callable[[GitSCM, Path, BuildListener, dict[str, str]], GitClient]


class BuildStepMonitor(enum.Enum):
    """How much the host must serialize this step against other builds."""

    NONE = "none"
    STEP = "step"
    BUILD = "build"


def tag_base_name(project: str, number: int, prefix: str = DEFAULT_TAG_PREFIX) -> str:
    """Tag the checkout step creates for a build, e.g. ``hudson-myjob-42``."""
    return f"{prefix}-{project}-{number}"


def tag_name(project: str, number: int, result: Result, prefix: str = DEFAULT_TAG_PREFIX) -> str:
    """Final tag for a build, e.g. ``hudson-myjob-42-SUCCESS``."""
    return f"{tag_base_name(project, number, prefix)}-{result}"


def _default_client(scm: GitSCM, repo_dir: Path, listener: BuildListener,
                    environment: dict[str, str]) -> GitClient:
    return GitCLI(scm.git_exe, repo_dir, listener, environment)


class GitPublisher:
    """Tags the workspace repository with the build's outcome."""

    needs_to_run_after_finalized = True
    required_monitor_service = BuildStepMonitor.BUILD

    def __init__(
        self,
        tag_prefix: str = DEFAULT_TAG_PREFIX,
        client_factory: ClientFactory | None = None,
    ):
        self.tag_prefix = tag_prefix
        self.client_factory = client_factory or _default_client

    def _environment(self, build: Build, listener: BuildListener) -> dict[str, str]:
        try:
            return build.get_environment()
        except (OSError, InterruptedError, UnicodeDecodeError) as exc:
            listener.warning(
                f"{type(exc).__name__} reading the build environment; "
                "continuing with an empty environment"
            )
            return {}

    def perform(self, build: Build, listener: BuildListener) -> bool:
        """Run the tag-and-push sequence for *build*.

        Returns ``True`` on success, ``False`` when skipped (non-git
        project) or failed (build result forced to FAILURE).
        """
        scm = build.project.scm
        if not isinstance(scm, GitSCM):
            logger.debug(
                "%s #%d: SCM is %s, not git; skipping",
                build.project.name, build.number, type(scm).__name__,
            )
            return False

        project_name = build.project.name
        build_number = build.number
        build_result = build.result

        def invoke(workspace: Path) -> bool:
            environment = self._environment(build, listener)
            git = self.client_factory(scm, workspace, listener, environment)

            # Drop the tag left by the checkout step; the result goes into the new one
            tag = tag_base_name(project_name, build_number, self.tag_prefix)
            git.delete_tag(tag)

            tag = f"{tag}-{build_result}"
            git.tag(tag, f"Build #{build_number}")
            logger.info("%s #%d: tagged %s", project_name, build_number, tag)

            merge_options = scm.merge_options
            if merge_options.do_merge() and build_result.is_better_or_equal_to(Result.SUCCESS):
                remote = merge_options.merge_remote
                listener.println(
                    f"Pushing result {tag} to {merge_options.merge_target} "
                    f"branch of {remote.name} repository"
                )
                git.push(remote, f"HEAD:{merge_options.merge_target}")

            return True

        try:
            return Workspace(build.workspace).act(invoke)
        except Exception as exc:
            listener.error(f"Failed to push tags to origin repository: {exc}")
            build.set_result(Result.FAILURE)
            return False


def publish(build: Build, listener: BuildListener | None = None,
            tag_prefix: str = DEFAULT_TAG_PREFIX) -> bool:
    """Convenience wrapper: run a default ``GitPublisher`` on *build*."""
    return GitPublisher(tag_prefix=tag_prefix).perform(build, listener or BuildListener())
