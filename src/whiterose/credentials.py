import base64
import logging
import os
import shlex
from collections.abc import Mapping
from pathlib import Path

from .constants import APP_NAME, DEFAULT_SSH_KEY_NAME, HTTPS_PREFIXES, SSH_PREFIXES
from .environment import Environment
from .exceptions import KeyReadError, UnsupportedSchemeError
from .models import BasicAuth, Credentials, SSHAuth

logger = logging.getLogger(APP_NAME)


def resolve_key_path(env: Environment) -> Path:
    """Resolves the SSH private key file from the environment.

    Precedence:
        1. `SSH_KEY_PATH` unset: `<home>/.ssh/<SSH_KEY_NAME>`.
        2. `SSH_KEY_PATH` is an existing directory: `<SSH_KEY_PATH>/<SSH_KEY_NAME>`.
        3. Otherwise `SSH_KEY_PATH` is taken verbatim as the key file.

    Args:
        env (Environment): The environment values to resolve from.

    Returns:
        Path: The key file path. It is not checked for existence here.
    """
    key_name = env.ssh_key_name or DEFAULT_SSH_KEY_NAME
    if not env.ssh_key_path:
        return env.home / ".ssh" / key_name

    path = Path(env.ssh_key_path)
    if path.is_dir():
        return path / key_name
    return path


def create_ssh_auth(env: Environment) -> SSHAuth:
    """Reads the SSH private key and wraps it as SSH credentials.

    Raises:
        KeyReadError: If the key file is missing or unreadable.
    """
    key_path = resolve_key_path(env)
    try:
        key = key_path.read_bytes()
    except OSError as e:
        raise KeyReadError(f"Failed to read SSH key file {key_path}: {e}") from e
    logger.debug(f"Using SSH key {key_path}")
    return SSHAuth(key_path=key_path, key=key)


def resolve_credentials(url: str, env: Environment) -> Credentials:
    """Selects the authentication method for a repository URL.

    Exactly one credential variant is produced, chosen by URL prefix alone.

    Args:
        url (str): The git remote URL.
        env (Environment): Environment-sourced credential values.

    Returns:
        Credentials: `BasicAuth` for HTTPS remotes, `SSHAuth` for SSH remotes.

    Raises:
        KeyReadError: If an SSH remote's key cannot be read.
        UnsupportedSchemeError: If the URL matches no known prefix.
    """
    if url.startswith(HTTPS_PREFIXES):
        return BasicAuth(username=env.git_user, password=env.git_token)
    if url.startswith(SSH_PREFIXES):
        return create_ssh_auth(env)
    raise UnsupportedSchemeError(
        f"Unsupported URL scheme for {url!r}: expected "
        f"{', '.join(HTTPS_PREFIXES + SSH_PREFIXES)}"
    )


def git_environment(
    creds: Credentials, base: Mapping[str, str] | None = None
) -> dict[str, str]:
    """Builds the child process environment that hands credentials to git.

    Credentials travel through environment variables only, never through the
    command line, so they do not show up in process listings.

    Args:
        creds (Credentials): The resolved credentials.
        base (Mapping[str, str] | None): The environment to extend.
                                         Defaults to `os.environ`.

    Returns:
        dict[str, str]: A complete environment for `subprocess.run`.
    """
    env = dict(os.environ if base is None else base)
    # Fail on rejected credentials instead of blocking on a terminal prompt.
    env["GIT_TERMINAL_PROMPT"] = "0"

    if isinstance(creds, BasicAuth):
        if creds.username or creds.password:
            token = base64.b64encode(
                f"{creds.username}:{creds.password}".encode()
            ).decode("ascii")
            index = int(env.get("GIT_CONFIG_COUNT") or 0)
            env["GIT_CONFIG_COUNT"] = str(index + 1)
            env[f"GIT_CONFIG_KEY_{index}"] = "http.extraHeader"
            env[f"GIT_CONFIG_VALUE_{index}"] = f"Authorization: Basic {token}"
    elif isinstance(creds, SSHAuth):
        env["GIT_SSH_COMMAND"] = (
            f"ssh -i {shlex.quote(str(creds.key_path))} -o IdentitiesOnly=yes "
            f"-l {shlex.quote(creds.user)}"
        )
    return env
