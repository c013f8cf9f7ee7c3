import argparse
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.table import Table

from . import prereq
from .clone import CloneEngine
from .config import Manifest, find_config_file
from .constants import APP_NAME
from .environment import Environment, load_dotenv_files
from .exceptions import ConfigError
from .models import SyncReport
from .sync import sync

logger = logging.getLogger(APP_NAME)
console = Console()
err_console = Console(stderr=True)


def setup_logging(verbose: bool = False) -> None:
    """Configures the logging subsystem.

    Args:
        verbose (bool): If True, emit debug messages. Defaults to False.
    """
    formatter = logging.Formatter(
        "[%(asctime)s] %(levelname)s: %(message)s", "%Y-%m-%d %H:%M:%S"
    )
    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setFormatter(formatter)
    logger.handlers.clear()
    logger.addHandler(stream_handler)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)


def load_manifest(config_path: Path | None) -> Manifest:
    """Locates and loads the configuration file, exiting on failure."""
    try:
        path = find_config_file(config_path)
        logger.debug(f"Loading configuration from {path}")
        return Manifest.load(path)
    except ConfigError as e:
        err_console.print(f"[bold red]FATAL:[/bold red] {e}")
        sys.exit(1)


def print_summary(report: SyncReport) -> None:
    """Renders the per-repository outcomes as a table."""
    table = Table(title="Repositories")
    table.add_column("Repository", style="cyan")
    table.add_column("Directory")
    table.add_column("Result")

    for result in report:
        if result.ok:
            outcome = f"[green]✔ {result.branch}[/green]"
        else:
            outcome = f"[red]✘ {type(result.error).__name__}[/red]"
        table.add_row(result.spec.url, str(result.spec.directory), outcome)

    console.print(table)
    console.print(
        f"[bold]{len(report.succeeded)}[/bold] succeeded, "
        f"[bold]{len(report.failed)}[/bold] failed."
    )


def run_repos(manifest: Manifest, timeout: float | None = None) -> bool:
    """Clones every configured repository.

    Returns:
        bool: True if every repository succeeded.
    """
    if not manifest.repositories:
        console.print("[yellow]No repositories configured.[/yellow]")
        return True

    env = Environment.from_environ()
    report = sync(
        manifest.repositories, env=env, engine=CloneEngine(env, timeout=timeout)
    )
    print_summary(report)
    return report.ok


def run_prereq(manifest: Manifest, names: list[str] | None = None) -> bool:
    """Checks the configured prerequisite applications.

    Returns:
        bool: True if every checked application is installed.
    """
    if not manifest.applications:
        console.print("[yellow]No applications configured.[/yellow]")
        return True
    statuses = prereq.validate_apps(manifest.applications, names)
    return bool(statuses) and all(s.installed for s in statuses)


def main() -> None:
    """Main entry point for the Whiterose CLI."""
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description=(
            "Automates cloning and setup of multiple Git repositories, "
            "checking out 'development' or a personal fallback branch."
        ),
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )

    subparsers = parser.add_subparsers(dest="command")

    setup_parser = subparsers.add_parser(
        "setup", help="Check prerequisites and clone repositories"
    )
    mode = setup_parser.add_mutually_exclusive_group()
    mode.add_argument(
        "-a", "--all", action="store_true", help="Check prerequisites and clone"
    )
    mode.add_argument(
        "-p", "--pre-req", action="store_true", help="Check prerequisites only"
    )
    mode.add_argument(
        "-r", "--repos", action="store_true", help="Clone repositories only"
    )
    setup_parser.add_argument(
        "--config", type=Path, help="Path to a JSON or YAML configuration file"
    )
    setup_parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Abort each git command after this many seconds",
    )
    setup_parser.add_argument(
        "--apps", nargs="+", metavar="NAME", help="Only check these applications"
    )

    apps_parser = subparsers.add_parser(
        "apps", help="List applications available for validation"
    )
    apps_parser.add_argument(
        "--config", type=Path, help="Path to a JSON or YAML configuration file"
    )

    subparsers.add_parser("help", help="Show this help message")

    args = parser.parse_args()
    setup_logging(args.verbose)

    if args.command in (None, "help"):
        parser.print_help()
        return

    load_dotenv_files()

    if args.command == "apps":
        prereq.list_apps(load_manifest(args.config).applications)
        return

    # setup
    if not (args.all or args.pre_req or args.repos):
        setup_parser.print_help()
        return

    manifest = load_manifest(args.config)
    ok = True
    if args.all or args.pre_req:
        ok = run_prereq(manifest, args.apps) and ok
    if args.all or args.repos:
        ok = run_repos(manifest, timeout=args.timeout) and ok

    if not ok:
        sys.exit(1)


if __name__ == "__main__":
    main()
