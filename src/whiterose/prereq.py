"""Prerequisite application checks.

Probes each configured application by running its version command and
renders the outcome, with install instructions for the current platform
when an application is missing.
"""

import logging
import subprocess
import sys
from collections.abc import Iterable
from dataclasses import dataclass

from rich.console import Console
from rich.table import Table

from .config import AppInfo
from .constants import APP_NAME

logger = logging.getLogger(APP_NAME)
console = Console()

PLATFORM_KEYS = {"darwin": "darwin", "linux": "linux", "win32": "windows"}
PLATFORM_NAMES = {"darwin": "macOS", "linux": "Linux", "windows": "Windows"}

VERSION_TIMEOUT = 10
"""int: Seconds allowed for a version command before it counts as missing."""


@dataclass
class AppStatus:
    """The result of probing one application.

    Attributes:
        app (AppInfo): The probed application.
        installed (bool): Whether the version command ran successfully.
        version (str): The first line of the version output, if installed.
    """

    app: AppInfo
    installed: bool
    version: str = ""


def platform_key(platform: str | None = None) -> str:
    """Maps `sys.platform` to the key used in `installInstructions`."""
    platform = platform or sys.platform
    return PLATFORM_KEYS.get(platform, platform)


def check_app(app: AppInfo) -> AppStatus:
    """Runs `<command> <versionFlag>` and reports whether it succeeded.

    Args:
        app (AppInfo): The application to probe.

    Returns:
        AppStatus: The probe outcome.
    """
    try:
        res = subprocess.run(
            [app.command, app.version_flag],
            capture_output=True,
            text=True,
            check=True,
            timeout=VERSION_TIMEOUT,
        )
    except (OSError, subprocess.SubprocessError) as e:
        logger.debug(f"{app.command} {app.version_flag} failed: {e}")
        return AppStatus(app=app, installed=False)

    output = (res.stdout or res.stderr).strip()
    version = output.splitlines()[0] if output else ""
    return AppStatus(app=app, installed=True, version=version)


def select_apps(apps: Iterable[AppInfo], names: Iterable[str]) -> list[AppInfo]:
    """Filters applications by name or command, case-insensitively."""
    wanted = {n.lower() for n in names}
    return [a for a in apps if a.name.lower() in wanted or a.command.lower() in wanted]


def validate_apps(
    apps: Iterable[AppInfo], names: Iterable[str] | None = None
) -> list[AppStatus]:
    """Checks applications and prints a status table.

    Args:
        apps (Iterable[AppInfo]): The configured applications.
        names (Iterable[str] | None): Restricts the check to these names or
                                      commands. Defaults to all applications.

    Returns:
        list[AppStatus]: One status per checked application.
    """
    apps = list(apps)
    if names:
        apps = select_apps(apps, names)
        if not apps:
            console.print("[red]✘ No applications found in the list to validate.[/red]")
            return []

    with console.status("Checking prerequisites...", spinner="dots"):
        statuses = [check_app(app) for app in apps]

    key = platform_key()
    table = Table(title="Prerequisites")
    table.add_column("Application", style="bold")
    table.add_column("Status")
    table.add_column("Version")
    table.add_column("Recommended", style="dim")
    table.add_column("Install")

    for status in statuses:
        app = status.app
        if status.installed:
            table.add_row(
                app.name,
                "[green]INSTALLED[/green]",
                status.version,
                app.recommended_version,
                "",
            )
        else:
            hint = app.install_instructions.get(
                key,
                f"Instructions not available for {PLATFORM_NAMES.get(key, key)}",
            )
            table.add_row(
                app.name,
                "[red]NOT INSTALLED[/red]",
                "-",
                app.recommended_version,
                hint,
            )

    console.print(table)
    return statuses


def list_apps(apps: Iterable[AppInfo]) -> None:
    """Prints the applications available for validation."""
    console.print("[bold]Available applications for validation:[/bold]")
    for i, app in enumerate(apps, start=1):
        console.print(f"{i}. {app.name} (command: [cyan]{app.command}[/cyan])")
