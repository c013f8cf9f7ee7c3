import getpass
import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

from .constants import (
    APP_NAME,
    DEFAULT_SSH_KEY_NAME,
    DOTENV_FILE,
    ENV_GIT_TOKEN,
    ENV_GIT_USER,
    ENV_SSH_KEY_NAME,
    ENV_SSH_KEY_PATH,
)

logger = logging.getLogger(APP_NAME)


def get_env_or_default(
    key: str, default: str = "", environ: Mapping[str, str] | None = None
) -> str:
    """Returns an environment variable, treating empty values as unset."""
    source = os.environ if environ is None else environ
    return source.get(key) or default


def _current_user(environ: Mapping[str, str]) -> str:
    """Resolves the login name of the current OS user.

    `USER` is consulted first; the password database is the fallback for
    environments (containers, cron) where it is not exported.
    """
    if user := environ.get("USER"):
        return user
    try:
        return getpass.getuser()
    except (OSError, KeyError) as e:
        logger.debug(f"Could not determine the current user: {e}")
        return ""


@dataclass(frozen=True)
class Environment:
    """Environment-sourced values consumed by credential and branch resolution.

    Passing this object explicitly keeps the resolver and clone engine free of
    direct `os.environ` reads, so tests can build one by hand.

    Attributes:
        git_user (str): HTTPS username (`GIT_USER`).
        git_token (str): HTTPS password or token (`GIT_TOKEN`).
        ssh_key_path (str): Directory or file holding the SSH key (`SSH_KEY_PATH`).
        ssh_key_name (str): Key file name inside a key directory (`SSH_KEY_NAME`).
        user (str): Current OS user, used to name the fallback branch.
        home (Path): The user's home directory.
    """

    git_user: str = ""
    git_token: str = field(default="", repr=False)
    ssh_key_path: str = ""
    ssh_key_name: str = DEFAULT_SSH_KEY_NAME
    user: str = ""
    home: Path = field(default_factory=Path.home)

    @classmethod
    def from_environ(cls, environ: Mapping[str, str] | None = None) -> "Environment":
        """Builds an Environment from process environment variables.

        Args:
            environ (Mapping[str, str] | None): The variables to read.
                                                Defaults to `os.environ`.

        Returns:
            Environment: The populated value object.
        """
        source = os.environ if environ is None else environ
        return cls(
            git_user=get_env_or_default(ENV_GIT_USER, "", source),
            git_token=get_env_or_default(ENV_GIT_TOKEN, "", source),
            ssh_key_path=get_env_or_default(ENV_SSH_KEY_PATH, "", source),
            ssh_key_name=get_env_or_default(
                ENV_SSH_KEY_NAME, DEFAULT_SSH_KEY_NAME, source
            ),
            user=_current_user(source),
            home=Path(source["HOME"]) if source.get("HOME") else Path.home(),
        )


def load_dotenv_files(paths: list[Path] | None = None) -> list[Path]:
    """Loads dotenv files into the process environment.

    Variables already present in the environment are never overridden, so the
    first file in `paths` wins over later ones. Missing files are skipped.

    Args:
        paths (list[Path] | None): Files to load. Defaults to `.env` in the
                                   working directory, then in the home directory.

    Returns:
        list[Path]: The files that were actually loaded.
    """
    if paths is None:
        paths = [Path.cwd() / DOTENV_FILE, Path.home() / DOTENV_FILE]

    loaded = []
    for path in paths:
        if not path.is_file():
            continue
        load_dotenv(path, override=False)
        logger.debug(f"Loaded environment from {path}")
        loaded.append(path)
    return loaded
