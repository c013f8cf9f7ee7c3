"""Shared fixtures for tests that drive the real git binary."""

import shutil
import subprocess
from collections.abc import Callable
from pathlib import Path

import pytest

requires_git = pytest.mark.skipif(
    shutil.which("git") is None, reason="git executable not installed"
)


def git(cwd: Path, *args: str) -> str:
    """Runs git with a fixed identity so commits work on any machine."""
    res = subprocess.run(
        [
            "git",
            "-c",
            "user.name=Whiterose Test",
            "-c",
            "user.email=test@example.com",
            "-c",
            "commit.gpgsign=false",
            *args,
        ],
        cwd=cwd,
        capture_output=True,
        text=True,
        check=True,
    )
    return res.stdout.strip()


@pytest.fixture
def make_remote(tmp_path: Path) -> Callable[..., Path]:
    """Builds a bare repository with one commit on `main`.

    Returns a factory: `make_remote(name, branches=("development",))` creates
    the extra branches at the same commit and returns the bare repo path.
    """

    def factory(name: str = "remote", branches: tuple[str, ...] = ()) -> Path:
        work = tmp_path / f"{name}-work"
        work.mkdir()
        git(work, "init", "-b", "main")
        (work / "README.md").write_text(f"# {name}\n")
        git(work, "add", ".")
        git(work, "commit", "-m", "Initial commit")
        for branch in branches:
            git(work, "branch", branch)

        bare = tmp_path / f"{name}.git"
        git(tmp_path, "clone", "--bare", str(work), str(bare))
        return bare

    return factory
