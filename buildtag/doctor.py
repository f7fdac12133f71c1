"""Runtime dependency verification (git, python).

Used by ``buildtag doctor`` CLI command.
"""

import shutil
import subprocess
import sys
from dataclasses import dataclass

import click


@dataclass
class CheckResult:
    name: str
    passed: bool
    message: str = ""


def check_git(git_exe: str = "git") -> CheckResult:
    """Check if git is installed and accessible."""
    path = shutil.which(git_exe)
    if not path:
        return CheckResult("Git", False, f"{git_exe} is not installed or not in PATH.")
    try:
        out = subprocess.run(
            [path, "--version"], capture_output=True, text=True, timeout=10,
        ).stdout.strip()
    except (OSError, subprocess.TimeoutExpired):
        out = ""
    return CheckResult("Git", True, out or "Git is installed.")


def check_python_version() -> CheckResult:
    """Check if Python version is 3.10 or higher."""
    if sys.version_info >= (3, 10):
        return CheckResult("Python Version", True, f"Python {sys.version.split()[0]} is installed.")
    return CheckResult(
        "Python Version",
        False,
        f"Python 3.10 or higher is required. Found {sys.version.split()[0]}.",
    )


def run_all_checks(git_exe: str = "git") -> list[CheckResult]:
    """Run all dependency checks."""
    return [
        check_git(git_exe),
        check_python_version(),
    ]


def print_doctor_report(checks: list[CheckResult]) -> bool:
    """Print a formatted report of check results.

    Returns True if all checks passed.
    """
    click.echo("Running buildtag doctor checks...")
    all_passed = True
    for result in checks:
        if result.passed:
            status = click.style("[PASS]", fg="green")
        else:
            status = click.style("[FAIL]", fg="red")
        click.echo(f"  {status} {result.name}: {result.message}")
        if not result.passed:
            all_passed = False

    click.echo()
    if all_passed:
        click.echo(click.style("All checks passed.", fg="green"))
    else:
        click.echo(click.style("Some checks failed. Please address the issues above.", fg="red"))
    return all_passed
