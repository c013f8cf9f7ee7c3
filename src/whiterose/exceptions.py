"""Exception hierarchy for Whiterose.

Every error raised by the package derives from `WhiteroseError`, so the
orchestrator can record a per-repository failure without catching unrelated
exceptions, and the CLI can map any of them to a friendly message.
"""


class WhiteroseError(Exception):
    """Base class for all Whiterose errors."""

    code: str = "UNKNOWN"


class ConfigError(WhiteroseError):
    """The configuration file is missing, unreadable, or malformed."""

    code = "CONFIG_ERROR"


class DirectoryExistsError(WhiteroseError):
    """The clone destination already exists on disk."""

    code = "DIRECTORY_EXISTS"


class KeyReadError(WhiteroseError):
    """The SSH private key could not be read."""

    code = "KEY_READ_ERROR"


class UnsupportedSchemeError(WhiteroseError):
    """The repository URL uses a scheme with no credential strategy."""

    code = "UNSUPPORTED_SCHEME"


class CloneError(WhiteroseError):
    """The clone transport failed (authentication, network, unknown host)."""

    code = "CLONE_ERROR"


class BranchCreateError(WhiteroseError):
    """The fallback branch could not be created after a successful clone."""

    code = "BRANCH_CREATE_ERROR"


class GitError(WhiteroseError, RuntimeError):
    """A git subprocess exited with a non-zero status or could not run."""

    code = "GIT_ERROR"
