"""Whiterose: automated cloning and setup of multiple Git repositories.

This package provides the command-line interface, the credential resolver,
the clone engine that places each working tree on the team's `development`
branch (or a personal fallback branch), and the orchestrator that processes a
configured list of repositories.
"""

from . import (
    cli,
    clone,
    config,
    constants,
    credentials,
    environment,
    exceptions,
    git_wrapper,
    models,
    prereq,
    sync,
)

__all__ = [
    "cli",
    "clone",
    "config",
    "constants",
    "credentials",
    "environment",
    "exceptions",
    "git_wrapper",
    "models",
    "prereq",
    "sync",
]
