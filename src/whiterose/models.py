"""Value objects shared by the credential resolver, clone engine and orchestrator."""

from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path

from .exceptions import WhiteroseError


@dataclass(frozen=True)
class RepositorySpec:
    """A repository to clone.

    Attributes:
        url (str): The git remote URL. Its scheme selects the credential type.
        directory (Path): The local clone destination. Must not exist yet.
    """

    url: str
    directory: Path


@dataclass(frozen=True)
class BasicAuth:
    """Username and token authentication for `https://` remotes."""

    username: str = ""
    password: str = field(default="", repr=False)


@dataclass(frozen=True)
class SSHAuth:
    """Private key authentication for `git@` and `ssh://` remotes.

    Attributes:
        key_path (Path): The resolved private key file.
        key (bytes): The raw key contents read from `key_path`.
        user (str): The SSH login user for remotes that do not name one.
    """

    key_path: Path
    key: bytes = field(default=b"", repr=False)
    user: str = "git"


Credentials = BasicAuth | SSHAuth


@dataclass(frozen=True)
class CloneResult:
    """The outcome of processing one repository.

    Attributes:
        spec (RepositorySpec): The repository this result belongs to.
        branch (str | None): The branch checked out on success.
        error (WhiteroseError | None): The failure reason, if any.
    """

    spec: RepositorySpec
    branch: str | None = None
    error: WhiteroseError | None = None

    @classmethod
    def success(cls, spec: RepositorySpec, branch: str) -> "CloneResult":
        return cls(spec=spec, branch=branch)

    @classmethod
    def failure(cls, spec: RepositorySpec, error: WhiteroseError) -> "CloneResult":
        return cls(spec=spec, error=error)

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class SyncReport:
    """Per-repository outcomes of a sync run, in configuration order."""

    results: list[CloneResult] = field(default_factory=list)

    def __iter__(self) -> Iterator[CloneResult]:
        return iter(self.results)

    def __len__(self) -> int:
        return len(self.results)

    @property
    def succeeded(self) -> list[CloneResult]:
        return [r for r in self.results if r.ok]

    @property
    def failed(self) -> list[CloneResult]:
        return [r for r in self.results if not r.ok]

    @property
    def ok(self) -> bool:
        """True when every repository was cloned and placed on a branch."""
        return not self.failed
