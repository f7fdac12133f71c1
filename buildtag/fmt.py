"""Status lines for the ``buildtag`` command, styled with click."""

import click


def _status(marker: str, colour: str, msg: str, err: bool = False) -> None:
    click.echo(click.style(f" [{marker}] ", fg=colour) + msg, err=err)


def success(msg: str) -> None:
    """Publish step finished (or mask accepted)."""
    _status("*", "green", msg)


def warn(msg: str) -> None:
    """Nothing went wrong, but the user should look: skipped run, odd mask."""
    _status("!", "yellow", msg)


def error(msg: str) -> None:
    """Step failed; goes to stderr so CI logs keep it apart from the build log."""
    _status("x", "red", msg, err=True)
