"""Job configuration for buildtag.

A job is described by a YAML file, ``<workspace>/.buildtag.yaml`` by
default::

    project: myjob
    tag_prefix: hudson
    env_file: build.env
    scm:
      type: git
      git_exe: git
      merge:
        remote: origin
        url: git@example.com:org/repo.git
        target: main

A missing file reads as an empty config.  Without an ``scm`` section (or
with a ``type`` other than ``git``) the project has no git SCM and the
publisher skips it.
"""

from pathlib import Path

import yaml

from buildtag.build import Project
from buildtag.scm import SCM, GitSCM, MergeOptions, NullSCM, RemoteConfig


class ConfigError(Exception):
    """The job configuration is malformed."""


def load_config(path: Path) -> dict:
    """Read a job config file, returning empty dict if missing."""
    path = Path(path)
    if not path.exists():
        return {}
    try:
        text = path.read_text()
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Cannot read {path}: {exc}") from exc
    try:
        data = yaml.safe_load(text) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: expected a mapping at top level")
    return data


def write_config(path: Path, data: dict) -> None:
    """Write a job config file (creates parent dirs if needed)."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.dump(data, default_flow_style=False, sort_keys=False))


def _build_merge_options(merge: dict | None) -> MergeOptions:
    if not merge:
        return MergeOptions()
    if not isinstance(merge, dict):
        raise ConfigError("scm.merge must be a mapping")
    if merge.get("enabled") is False:
        return MergeOptions()

    remote_name = merge.get("remote")
    target = merge.get("target")
    if not remote_name or not target:
        raise ConfigError("scm.merge needs both 'remote' and 'target'")
    return MergeOptions(
        merge_remote=RemoteConfig(name=str(remote_name), url=merge.get("url")),
        merge_target=str(target),
    )


def build_scm(data: dict) -> SCM:
    """Build the project's SCM from the ``scm`` section of a config."""
    scm = data.get("scm")
    if not scm:
        return NullSCM()
    if not isinstance(scm, dict):
        raise ConfigError("scm must be a mapping")
    if scm.get("type", "git") != "git":
        return NullSCM()
    return GitSCM(
        git_exe=scm.get("git_exe", "git"),
        merge_options=_build_merge_options(scm.get("merge")),
    )


def build_project(data: dict, name: str | None = None) -> Project:
    """Build a ``Project``; an explicit *name* wins over ``project:``."""
    project_name = name or data.get("project")
    if not project_name:
        raise ConfigError("No project name given (set 'project' or pass one explicitly)")
    return Project(name=str(project_name), scm=build_scm(data))


def get_tag_prefix(data: dict) -> str | None:
    return data.get("tag_prefix")


def get_env_file(data: dict, workspace: Path) -> Path | None:
    """Resolve ``env_file`` relative to the workspace."""
    val = data.get("env_file")
    if not val:
        return None
    p = Path(val)
    return p if p.is_absolute() else Path(workspace) / p
