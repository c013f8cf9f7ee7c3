import logging
from collections.abc import Iterable

from rich.console import Console

from .clone import CloneEngine, ensure_target_absent
from .constants import APP_NAME
from .credentials import resolve_credentials
from .environment import Environment
from .exceptions import WhiteroseError
from .models import CloneResult, RepositorySpec, SyncReport

logger = logging.getLogger(APP_NAME)
err_console = Console(stderr=True)


def _report(result: CloneResult) -> None:
    """Prints a single repository outcome as soon as it is known."""
    if result.ok:
        logger.debug(f"{result.spec.url} ready on branch {result.branch}")
        return
    logger.debug(f"Error cloning {result.spec.url}: {result.error}")
    err_console.print(
        f"[bold red]✘[/bold red] {result.spec.url}: "
        f"[red]{type(result.error).__name__}[/red] {result.error}"
    )


def sync(
    specs: Iterable[RepositorySpec],
    env: Environment | None = None,
    engine: CloneEngine | None = None,
) -> SyncReport:
    """Clones every configured repository, in order, one at a time.

    The destination is checked before credentials are resolved, so an
    existing directory is always reported as `DirectoryExistsError`. A
    failure in one repository is recorded and reported, then processing
    moves on to the next. Only typed `WhiteroseError`s are treated as
    per-repository failures.

    Args:
        specs (Iterable[RepositorySpec]): Repositories, in configuration order.
        env (Environment | None): Credential values. Defaults to the process
                                  environment.
        engine (CloneEngine | None): The engine to clone with. Defaults to a
                                     `CloneEngine` bound to `env`.

    Returns:
        SyncReport: One result per spec, in input order.
    """
    if env is None:
        env = Environment.from_environ()
    if engine is None:
        engine = CloneEngine(env)

    report = SyncReport()
    for spec in specs:
        try:
            ensure_target_absent(spec)
            creds = resolve_credentials(spec.url, env)
        except WhiteroseError as e:
            result = CloneResult.failure(spec, e)
        else:
            result = engine.clone(spec, creds)
        _report(result)
        report.results.append(result)

    logger.info(
        f"Sync finished: {len(report.succeeded)} succeeded, {len(report.failed)} failed"
    )
    return report
