"""buildtag CLI entry point using Click.

Commands:
    buildtag publish --project P --number N --result R   — tag (and push) a finished build
    buildtag tag-name <project> <number> <result>        — print the tag a build would get
    buildtag check-mask <mask> [--workspace DIR]         — validate a workspace file mask
    buildtag doctor                                      — verify runtime dependencies
"""

from pathlib import Path

import click

from buildtag import fmt
from buildtag.paths import home as _home, config_path as _config_path
from buildtag.result import Result


class ResultType(click.ParamType):
    """Click parameter parsing a ``Result`` name."""

    name = "result"

    def convert(self, value, param, ctx):
        if isinstance(value, Result):
            return value
        try:
            return Result.from_string(value)
        except ValueError as exc:
            self.fail(str(exc), param, ctx)


RESULT = ResultType()


def _get_home(ctx: click.Context) -> Path:
    """Resolve buildtag home from context or default."""
    return _home(ctx.obj.get("home_override") if ctx.obj else None)


@click.group()
@click.option(
    "--home", "home_override", type=click.Path(path_type=Path), default=None,
    envvar="BUILDTAG_HOME",
    help="Override buildtag home directory (default: ~/.buildtag).",
)
@click.option("-v", "--verbose", is_flag=True, help="Also log to stderr.")
@click.pass_context
def main(ctx: click.Context, home_override: Path | None, verbose: bool) -> None:
    """buildtag — tag finished builds and push successful merges."""
    ctx.ensure_object(dict)
    ctx.obj["home_override"] = home_override
    ctx.obj["verbose"] = verbose


# ──────────────────────────────────────────────────────────────
# buildtag publish
# ──────────────────────────────────────────────────────────────

@main.command()
@click.option("--project", "project_name", default=None,
              help="Project (job) name. Defaults to 'project' in the config file.")
@click.option("--number", type=int, required=True, envvar="BUILD_NUMBER",
              help="Build number.")
@click.option("--result", "build_result", type=RESULT, required=True,
              help="Build result (SUCCESS, UNSTABLE, FAILURE, NOT_BUILT, ABORTED).")
@click.option("--workspace", type=click.Path(path_type=Path), default=Path("."),
              envvar="WORKSPACE", help="Build workspace (default: current directory).")
@click.option("--config", "config_file", type=click.Path(path_type=Path), default=None,
              help="Job config file (default: <workspace>/.buildtag.yaml).")
@click.option("--log", "log_file", type=click.Path(path_type=Path), default=None,
              help="Append build-log lines to this file instead of stdout.")
@click.pass_context
def publish(
    ctx: click.Context,
    project_name: str | None,
    number: int,
    build_result: Result,
    workspace: Path,
    config_file: Path | None,
    log_file: Path | None,
) -> None:
    """Tag the workspace repository with the build result."""
    from buildtag.build import Build, BuildListener
    from buildtag.config import (
        ConfigError, load_config, build_project, get_tag_prefix, get_env_file,
    )
    from buildtag.logging_setup import configure_logging
    from buildtag.publisher import DEFAULT_TAG_PREFIX, GitPublisher
    from buildtag.scm import GitSCM

    configure_logging(_get_home(ctx), console=ctx.obj.get("verbose", False))

    try:
        data = load_config(config_file or _config_path(workspace))
        project = build_project(data, project_name)
    except ConfigError as exc:
        raise click.ClickException(str(exc))

    build = Build(
        project=project,
        number=number,
        result=build_result,
        workspace=workspace,
        env_file=get_env_file(data, workspace),
    )
    publisher = GitPublisher(tag_prefix=get_tag_prefix(data) or DEFAULT_TAG_PREFIX)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        with log_file.open("a") as stream:
            ok = publisher.perform(build, BuildListener(stream))
    else:
        ok = publisher.perform(build, BuildListener())

    if ok:
        fmt.success(f"{project.name} #{number} tagged ({build.result})")
    elif not isinstance(project.scm, GitSCM):
        fmt.warn(f"{project.name} does not use git; nothing to publish")
    else:
        fmt.error(f"{project.name} #{number}: publishing failed, build marked {build.result}")
        raise SystemExit(1)


# ──────────────────────────────────────────────────────────────
# buildtag tag-name
# ──────────────────────────────────────────────────────────────

@main.command("tag-name")
@click.argument("project")
@click.argument("number", type=int)
@click.argument("build_result", metavar="RESULT", type=RESULT)
@click.option("--prefix", default=None, help="Tag prefix (default: hudson).")
def tag_name_cmd(project: str, number: int, build_result: Result, prefix: str | None) -> None:
    """Print the tag a build would receive."""
    from buildtag.publisher import DEFAULT_TAG_PREFIX, tag_name

    click.echo(tag_name(project, number, build_result, prefix or DEFAULT_TAG_PREFIX))


# ──────────────────────────────────────────────────────────────
# buildtag check-mask
# ──────────────────────────────────────────────────────────────

@main.command("check-mask")
@click.argument("mask")
@click.option("--workspace", type=click.Path(path_type=Path), default=Path("."),
              help="Workspace to check against (default: current directory).")
def check_mask(mask: str, workspace: Path) -> None:
    """Validate a comma-separated workspace file mask."""
    from buildtag.plugin import get_descriptor

    validation = get_descriptor("GitPublisherDescriptor").check_file_mask(workspace, mask)
    if validation.is_ok:
        fmt.success(f"'{mask}' is valid")
        return
    if validation.kind == "warning":
        fmt.warn(validation.message)
        return
    fmt.error(validation.message)
    raise SystemExit(1)


# ──────────────────────────────────────────────────────────────
# buildtag doctor
# ──────────────────────────────────────────────────────────────

@main.command()
@click.option("--git-exe", default="git", help="git executable to check.")
def doctor(git_exe: str) -> None:
    """Verify that all runtime dependencies are installed."""
    from buildtag.doctor import run_all_checks, print_doctor_report

    ok = print_doctor_report(run_all_checks(git_exe))
    if not ok:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
