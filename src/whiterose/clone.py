import logging

from rich.console import Console

from .constants import APP_NAME, DEFAULT_BRANCH
from .credentials import git_environment
from .environment import Environment
from .exceptions import BranchCreateError, CloneError, DirectoryExistsError, GitError
from .git_wrapper import GitRepo
from .models import CloneResult, Credentials, RepositorySpec

logger = logging.getLogger(APP_NAME)
console = Console()


def ensure_target_absent(spec: RepositorySpec) -> None:
    """Rejects a clone destination that is already present on disk.

    Raises:
        DirectoryExistsError: If `spec.directory` exists.
    """
    if spec.directory.exists():
        raise DirectoryExistsError(f"Directory {spec.directory} already exists")


class CloneEngine:
    """Clones one repository and places its working tree on the right branch.

    The engine is create-only: an existing destination is reported as a
    failure and left untouched. After a clone, `development` is checked out
    when it exists; otherwise a personal `development/<user>` branch is
    created from HEAD.

    Attributes:
        env (Environment): Supplies the user name for the fallback branch.
        timeout (float | None): Per-git-command timeout in seconds.
    """

    def __init__(self, env: Environment, timeout: float | None = None):
        self.env = env
        self.timeout = timeout

    @property
    def fallback_branch(self) -> str:
        """str: The personal branch created when `development` is absent."""
        return f"{DEFAULT_BRANCH}/{self.env.user}"

    def clone(self, spec: RepositorySpec, creds: Credentials) -> CloneResult:
        """Clones `spec.url` into `spec.directory` and resolves the branch.

        Args:
            spec (RepositorySpec): The repository to clone.
            creds (Credentials): The credentials for the remote.

        Returns:
            CloneResult: `success` with the checked-out branch, or `failure`
                         with a `DirectoryExistsError`, `CloneError`, or
                         `BranchCreateError`.
        """
        try:
            ensure_target_absent(spec)
        except DirectoryExistsError as e:
            return CloneResult.failure(spec, e)

        console.print(
            f"Cloning [cyan]{spec.url}[/cyan] into [cyan]{spec.directory}[/cyan]..."
        )
        try:
            repo = GitRepo.clone(
                spec.url,
                spec.directory,
                env=git_environment(creds),
                timeout=self.timeout,
            )
        except GitError as e:
            return CloneResult.failure(
                spec, CloneError(f"Failed to clone {spec.url}: {e}")
            )

        try:
            branch = self._resolve_branch(repo)
        except BranchCreateError as e:
            # The clone is kept; only the branch placement failed.
            return CloneResult.failure(spec, e)
        return CloneResult.success(spec, branch)

    def _resolve_branch(self, repo: GitRepo) -> str:
        """Checks out `development`, or creates the personal fallback branch.

        Raises:
            BranchCreateError: If the fallback branch cannot be created.
        """
        try:
            if repo.has_local_branch(DEFAULT_BRANCH):
                repo.checkout(DEFAULT_BRANCH)
                console.print(f"Checked out to [green]{DEFAULT_BRANCH}[/green] branch.")
                return DEFAULT_BRANCH
            if repo.has_remote_branch(DEFAULT_BRANCH):
                repo.checkout_tracking(DEFAULT_BRANCH)
                console.print(f"Checked out to [green]{DEFAULT_BRANCH}[/green] branch.")
                return DEFAULT_BRANCH
        except GitError as e:
            logger.warning(f"Checkout of {DEFAULT_BRANCH} in {repo.path} failed: {e}")

        branch = self.fallback_branch
        try:
            repo.create_branch(branch)
        except GitError as e:
            raise BranchCreateError(
                f"Failed to create and checkout branch {branch}: {e}"
            ) from e
        console.print(f"Created and checked out to branch [green]{branch}[/green].")
        return branch
