"""Tests for the clone engine's create-only and branch resolution policy."""

from collections.abc import Callable
from pathlib import Path
from unittest.mock import MagicMock

from conftest import git, requires_git

from whiterose.clone import CloneEngine
from whiterose.environment import Environment
from whiterose.exceptions import (
    BranchCreateError,
    CloneError,
    DirectoryExistsError,
    GitError,
)
from whiterose.models import BasicAuth, RepositorySpec


def _engine(user: str = "alice", timeout: float | None = None) -> CloneEngine:
    return CloneEngine(Environment(user=user, home=Path("/nowhere")), timeout=timeout)


def test_fallback_branch_uses_current_user() -> None:
    assert _engine("alice").fallback_branch == "development/alice"


def test_existing_directory_fails_without_writes(
    tmp_path: Path, mocker: MagicMock
) -> None:
    """Verifies that an existing target is reported and never touched."""
    target = tmp_path / "existing"
    target.mkdir()
    (target / "keep.txt").write_text("untouched")
    mock_run = mocker.patch("whiterose.git_wrapper.subprocess.run")

    result = _engine().clone(RepositorySpec("https://host/r.git", target), BasicAuth())

    assert not result.ok
    assert isinstance(result.error, DirectoryExistsError)
    assert "already exists" in str(result.error)
    mock_run.assert_not_called()
    assert [p.name for p in target.iterdir()] == ["keep.txt"]
    assert (target / "keep.txt").read_text() == "untouched"


def test_transport_failure_is_clone_error(tmp_path: Path, mocker: MagicMock) -> None:
    mocker.patch(
        "whiterose.clone.GitRepo.clone", side_effect=GitError("authentication failed")
    )
    spec = RepositorySpec("https://host/r.git", tmp_path / "r")

    result = _engine().clone(spec, BasicAuth("u", "bad"))

    assert isinstance(result.error, CloneError)
    assert "authentication failed" in str(result.error)
    assert result.branch is None


def test_clone_forwards_credentials_and_timeout(
    tmp_path: Path, mocker: MagicMock
) -> None:
    mock_clone = mocker.patch("whiterose.clone.GitRepo.clone")
    repo = mock_clone.return_value
    repo.has_local_branch.return_value = True
    spec = RepositorySpec("https://host/r.git", tmp_path / "r")

    result = _engine(timeout=12).clone(spec, BasicAuth("u", "t"))

    assert result.ok
    assert result.branch == "development"
    args, kwargs = mock_clone.call_args
    assert args == ("https://host/r.git", tmp_path / "r")
    assert kwargs["timeout"] == 12
    assert kwargs["env"]["GIT_CONFIG_KEY_0"] == "http.extraHeader"
    repo.checkout.assert_called_once_with("development")


def test_failed_development_checkout_falls_back(
    tmp_path: Path, mocker: MagicMock
) -> None:
    """Verifies that a failing `development` checkout still lands on a branch."""
    repo = mocker.patch("whiterose.clone.GitRepo.clone").return_value
    repo.has_local_branch.return_value = False
    repo.has_remote_branch.return_value = True
    repo.checkout_tracking.side_effect = GitError("checkout failed")
    spec = RepositorySpec("https://host/r.git", tmp_path / "r")

    result = _engine("bob").clone(spec, BasicAuth())

    assert result.branch == "development/bob"
    repo.create_branch.assert_called_once_with("development/bob")


def test_branch_create_failure_keeps_clone(tmp_path: Path, mocker: MagicMock) -> None:
    repo = mocker.patch("whiterose.clone.GitRepo.clone").return_value
    repo.has_local_branch.return_value = False
    repo.has_remote_branch.return_value = False
    repo.create_branch.side_effect = GitError("invalid ref")
    spec = RepositorySpec("https://host/r.git", tmp_path / "r")

    result = _engine().clone(spec, BasicAuth())

    assert isinstance(result.error, BranchCreateError)
    assert "development/alice" in str(result.error)


@requires_git
def test_clone_checks_out_development_when_remote_has_it(
    tmp_path: Path, make_remote: Callable[..., Path]
) -> None:
    remote = make_remote("with-dev", branches=("development",))
    target = tmp_path / "clones" / "with-dev"

    result = _engine().clone(RepositorySpec(str(remote), target), BasicAuth())

    assert result.ok, result.error
    assert result.branch == "development"
    assert git(target, "branch", "--show-current") == "development"
    assert git(target, "rev-parse", "--abbrev-ref", "development@{upstream}") == (
        "origin/development"
    )


@requires_git
def test_clone_creates_personal_branch_when_development_missing(
    tmp_path: Path, make_remote: Callable[..., Path]
) -> None:
    remote = make_remote("no-dev")
    target = tmp_path / "clones" / "no-dev"

    result = _engine("alice").clone(RepositorySpec(str(remote), target), BasicAuth())

    assert result.ok, result.error
    assert result.branch == "development/alice"
    assert git(target, "branch", "--show-current") == "development/alice"
    assert git(target, "rev-parse", "refs/heads/development/alice") == git(
        target, "rev-parse", "origin/main"
    )


@requires_git
def test_clone_from_missing_remote_is_clone_error(tmp_path: Path) -> None:
    spec = RepositorySpec(str(tmp_path / "missing.git"), tmp_path / "clones" / "x")

    result = _engine().clone(spec, BasicAuth())

    assert isinstance(result.error, CloneError)


@requires_git
def test_invalid_fallback_branch_name_is_branch_create_error(
    tmp_path: Path, make_remote: Callable[..., Path]
) -> None:
    """An unknown user yields an invalid ref name; the clone stays on disk."""
    remote = make_remote("nameless")
    target = tmp_path / "clones" / "nameless"

    result = _engine(user="").clone(RepositorySpec(str(remote), target), BasicAuth())

    assert isinstance(result.error, BranchCreateError)
    assert (target / ".git").is_dir()
    assert (target / "README.md").exists()
