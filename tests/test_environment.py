"""Tests for environment value loading."""

import os
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from whiterose.environment import Environment, get_env_or_default, load_dotenv_files


def test_from_environ_reads_credential_variables() -> None:
    env = Environment.from_environ(
        {
            "GIT_USER": "alice",
            "GIT_TOKEN": "s3cret",
            "SSH_KEY_PATH": "/keys",
            "SSH_KEY_NAME": "deploy",
            "USER": "alice",
            "HOME": "/home/alice",
        }
    )

    assert env.git_user == "alice"
    assert env.git_token == "s3cret"
    assert env.ssh_key_path == "/keys"
    assert env.ssh_key_name == "deploy"
    assert env.user == "alice"
    assert env.home == Path("/home/alice")
    assert "s3cret" not in repr(env)


def test_from_environ_defaults_and_empty_values() -> None:
    """Verifies that empty variables fall back to defaults like unset ones."""
    env = Environment.from_environ(
        {"GIT_USER": "", "SSH_KEY_NAME": "", "USER": "bob", "HOME": "/home/bob"}
    )

    assert env.git_user == ""
    assert env.git_token == ""
    assert env.ssh_key_path == ""
    assert env.ssh_key_name == "id_rsa"


def test_from_environ_falls_back_to_password_database(mocker: MagicMock) -> None:
    """Verifies that the OS user is looked up when USER is not exported."""
    mocker.patch("whiterose.environment.getpass.getuser", return_value="carol")

    env = Environment.from_environ({"HOME": "/home/carol"})

    assert env.user == "carol"


def test_from_environ_tolerates_unknown_user(mocker: MagicMock) -> None:
    mocker.patch("whiterose.environment.getpass.getuser", side_effect=KeyError("uid"))

    assert Environment.from_environ({"HOME": "/"}).user == ""


def test_get_env_or_default() -> None:
    assert get_env_or_default("X", "d", {"X": "v"}) == "v"
    assert get_env_or_default("X", "d", {"X": ""}) == "d"
    assert get_env_or_default("X", "d", {}) == "d"


def test_load_dotenv_files_respects_precedence(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Verifies that earlier files and existing variables win over later files."""
    # Registered with monkeypatch so the values loaded below are undone.
    for key in ("WHITEROSE_TEST_A", "WHITEROSE_TEST_B"):
        monkeypatch.setenv(key, "")
        monkeypatch.delenv(key)
    monkeypatch.setenv("WHITEROSE_TEST_C", "from-process")

    local = tmp_path / "local.env"
    local.write_text("WHITEROSE_TEST_A=local\n")
    home = tmp_path / "home.env"
    home.write_text(
        "WHITEROSE_TEST_A=home\nWHITEROSE_TEST_B=home\nWHITEROSE_TEST_C=home\n"
    )

    loaded = load_dotenv_files([local, tmp_path / "missing.env", home])

    assert loaded == [local, home]
    assert os.environ["WHITEROSE_TEST_A"] == "local"
    assert os.environ["WHITEROSE_TEST_B"] == "home"
    assert os.environ["WHITEROSE_TEST_C"] == "from-process"
