"""Shared test fixtures for buildtag tests."""

import io
import subprocess
from pathlib import Path

import pytest

from buildtag.build import Build, BuildListener, Project
from buildtag.git import GitClient
from buildtag.result import Result
from buildtag.scm import GitSCM, MergeOptions, RemoteConfig


SAMPLE_PROJECT = "myjob"


def git(repo: Path, *args: str) -> str:
    """Run git in *repo* and return stripped stdout (raises on failure)."""
    result = subprocess.run(
        ["git", *args], cwd=str(repo), capture_output=True, text=True, check=True,
    )
    return result.stdout.strip()


def list_tags(repo: Path) -> list[str]:
    out = git(repo, "tag", "-l")
    return out.splitlines() if out else []


class FakeGitClient(GitClient):
    """Records calls; optionally raises from one operation."""

    def __init__(self, fail_on: str | None = None, tags: set[str] | None = None):
        self.calls: list[tuple] = []
        self.fail_on = fail_on
        self.tags = set(tags or ())

    def _maybe_fail(self, op: str) -> None:
        if self.fail_on == op:
            raise RuntimeError(f"{op} exploded")

    def tag_exists(self, name):
        return name in self.tags

    def delete_tag(self, name):
        self.calls.append(("delete_tag", name))
        self._maybe_fail("delete_tag")
        self.tags.discard(name)

    def tag(self, name, message):
        self.calls.append(("tag", name, message))
        self._maybe_fail("tag")
        self.tags.add(name)

    def push(self, remote, refspec):
        self.calls.append(("push", remote, refspec))
        self._maybe_fail("push")

    def ops(self) -> list[str]:
        return [c[0] for c in self.calls]


@pytest.fixture
def fake_client():
    return FakeGitClient()


@pytest.fixture
def listener():
    """A BuildListener writing into a StringIO (``listener.stream.getvalue()``)."""
    return BuildListener(io.StringIO())


@pytest.fixture
def workspace(tmp_path):
    """Create a local git repo with a main branch and initial commit."""
    repo = tmp_path / "workspace"
    repo.mkdir()
    subprocess.run(["git", "init", "-b", "main"], cwd=str(repo), capture_output=True, check=True)
    subprocess.run(["git", "config", "user.email", "test@test.com"], cwd=str(repo), capture_output=True)
    subprocess.run(["git", "config", "user.name", "Test"], cwd=str(repo), capture_output=True)
    (repo / "README.md").write_text("# Workspace\n")
    subprocess.run(["git", "add", "."], cwd=str(repo), capture_output=True)
    subprocess.run(["git", "commit", "-m", "Initial commit"], cwd=str(repo), capture_output=True, check=True)
    return repo


@pytest.fixture
def bare_remote(tmp_path, workspace):
    """A bare repository registered as ``origin`` of the workspace."""
    remote = tmp_path / "remote.git"
    subprocess.run(["git", "init", "--bare", "-b", "main", str(remote)], capture_output=True, check=True)
    subprocess.run(["git", "remote", "add", "origin", str(remote)], cwd=str(workspace), capture_output=True, check=True)
    return remote


def merge_scm(remote: str = "origin", target: str = "main", url: str | None = None) -> GitSCM:
    return GitSCM(merge_options=MergeOptions(RemoteConfig(remote, url), target))


@pytest.fixture
def make_build(workspace):
    """Factory: ``make_build(result=..., scm=..., number=...)``."""
    def _make(result: Result = Result.SUCCESS, scm=None, number: int = 42, **kwargs) -> Build:
        project = Project(SAMPLE_PROJECT, scm if scm is not None else GitSCM())
        kwargs.setdefault("workspace", workspace)
        return Build(project=project, number=number, result=result, **kwargs)
    return _make
