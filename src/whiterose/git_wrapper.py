import logging
import subprocess
from pathlib import Path

from .constants import APP_NAME, DEFAULT_REMOTE
from .exceptions import GitError

logger = logging.getLogger(APP_NAME)


def run_git(
    args: list[str],
    cwd: Path | None = None,
    capture: bool = True,
    env: dict | None = None,
    timeout: float | None = None,
) -> str:
    """Executes a git command.

    Args:
        args (list[str]): A list of arguments to pass to the git command.
        cwd (Path | None, optional): The working directory. Defaults to None.
        capture (bool, optional):   Whether to capture and return stdout.
                                    When False, git writes straight to the
                                    terminal. Defaults to True.
        env (dict | None, optional): The complete environment for the
                                     subprocess. Defaults to None (inherit).
        timeout (float | None, optional): Seconds before the command is killed.
                                          Defaults to None (no limit).

    Returns:
        str:    The stripped stdout of the command if capture is True,
                otherwise an empty string.

    Raises:
        GitError: If git exits non-zero, times out, or is not installed.
    """
    try:
        res = subprocess.run(
            ["git", *args],
            cwd=cwd,
            capture_output=capture,
            text=True,
            check=True,
            env=env,
            timeout=timeout,
        )
        return res.stdout.strip() if capture else ""
    except subprocess.CalledProcessError as e:
        detail = (e.stderr or "").strip() or f"exit status {e.returncode}"
        raise GitError(f"git {args[0]} failed: {detail}") from e
    except subprocess.TimeoutExpired as e:
        raise GitError(f"git {args[0]} timed out after {timeout}s") from e
    except FileNotFoundError as e:
        raise GitError("git executable not found on PATH") from e


class GitRepo:
    """A wrapper around the Git command-line interface for a specific repository.

    Attributes:
        path (Path): The file system path to the repository root.
        timeout (float | None): Per-command timeout in seconds.
    """

    def __init__(self, path: Path, timeout: float | None = None):
        """Initializes the GitRepo instance.

        Args:
            path (Path): The path to the repository root directory.
            timeout (float | None, optional): Per-command timeout in seconds.

        Raises:
            ValueError: If the specified path does not contain a .git directory.
        """
        self.path = path
        self.timeout = timeout
        if not (self.path / ".git").exists():
            raise ValueError(f"Not a git repository: {self.path}")

    @classmethod
    def clone(
        cls,
        url: str,
        directory: Path,
        env: dict | None = None,
        timeout: float | None = None,
    ) -> "GitRepo":
        """Performs a full clone, streaming git's progress to the terminal.

        Args:
            url (str): The remote URL.
            directory (Path): The destination; parent directories are created.
            env (dict | None, optional): The environment carrying credentials.
            timeout (float | None, optional): Seconds before the clone is killed.

        Returns:
            GitRepo: The freshly cloned repository.

        Raises:
            GitError: If the clone fails.
        """
        run_git(
            ["clone", "--progress", url, str(directory)],
            capture=False,
            env=env,
            timeout=timeout,
        )
        return cls(directory, timeout=timeout)

    def _run(self, args: list[str], capture: bool = True) -> str:
        """Executes a git command within the repository context."""
        return run_git(args, cwd=self.path, capture=capture, timeout=self.timeout)

    def current_branch(self) -> str:
        """Retrieves the name of the currently checked-out branch.

        Returns:
            str: The name of the current branch.
        """
        return self._run(["branch", "--show-current"])

    def rev_parse(self, rev: str) -> str | None:
        """Resolves a revision to a full SHA-1 hash.

        Args:
            rev (str): The revision to parse (e.g., 'HEAD', 'refs/heads/main').

        Returns:
            Optional[str]:  The full SHA-1 hash,
                            or None if the revision could not be resolved.
        """
        try:
            return self._run(["rev-parse", "--verify", "--quiet", rev]) or None
        except GitError as e:
            logger.debug(f"rev-parse failed for '{rev}': {e}")
            return None

    def has_local_branch(self, branch: str) -> bool:
        return self.rev_parse(f"refs/heads/{branch}") is not None

    def has_remote_branch(self, branch: str, remote: str = DEFAULT_REMOTE) -> bool:
        return self.rev_parse(f"refs/remotes/{remote}/{branch}") is not None

    def checkout(self, branch: str) -> None:
        """Checks out an existing local branch.

        Args:
            branch (str): The target branch name.
        """
        self._run(["checkout", branch], capture=False)

    def checkout_tracking(self, branch: str, remote: str = DEFAULT_REMOTE) -> None:
        """Creates a local branch tracking `<remote>/<branch>` and checks it out.

        Args:
            branch (str): The remote branch name.
            remote (str, optional): The remote name. Defaults to 'origin'.
        """
        self._run(
            ["checkout", "-b", branch, "--track", f"{remote}/{branch}"], capture=False
        )

    def create_branch(self, branch: str) -> None:
        """Creates a new branch at the current HEAD and checks it out.

        Args:
            branch (str): The new branch name.
        """
        self._run(["checkout", "-b", branch], capture=False)
