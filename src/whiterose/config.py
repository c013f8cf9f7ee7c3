import json
import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .constants import (
    APP_NAME,
    CONFIG_FILE_NAMES,
    DOCS_URL,
    ENV_CONFIG_FILE,
    JSON_SUFFIXES,
    YAML_SUFFIXES,
)
from .exceptions import ConfigError
from .models import RepositorySpec

logger = logging.getLogger(APP_NAME)


@dataclass
class AppInfo:
    """A command-line application the development environment depends on.

    Attributes:
        name (str): Display name (e.g. 'Git').
        command (str): The executable to probe (e.g. 'git').
        version_flag (str): Flag that prints the version (e.g. '--version').
        recommended_version (str): The version the team recommends.
        install_instructions (dict[str, str]): Install hint per platform key
                                               ('darwin', 'linux', 'windows').
    """

    name: str
    command: str
    version_flag: str = "--version"
    recommended_version: str = ""
    install_instructions: dict[str, str] = field(default_factory=dict)


@dataclass
class Manifest:
    """The decoded configuration file.

    Attributes:
        repositories (list[RepositorySpec]): Repositories to clone, in order.
        applications (list[AppInfo]): Applications checked by `setup --pre-req`.
    """

    repositories: list[RepositorySpec] = field(default_factory=list)
    applications: list[AppInfo] = field(default_factory=list)

    @classmethod
    def load(cls, path: Path) -> "Manifest":
        """Loads a JSON or YAML configuration file.

        Args:
            path (Path): The configuration file. The suffix selects the decoder.

        Returns:
            Manifest: The parsed configuration.

        Raises:
            ConfigError: If the file cannot be read or decoded, or an entry is
                         missing a required key.
        """
        data = _decode(path)
        if data is None:
            data = {}
        if not isinstance(data, Mapping):
            raise ConfigError(f"{path}: top level must be a mapping")

        return cls(
            repositories=[
                _parse_repository(i, entry)
                for i, entry in enumerate(_section(path, data, "repositories"))
            ],
            applications=[
                _parse_application(i, entry)
                for i, entry in enumerate(_section(path, data, "applications"))
            ],
        )


def _decode(path: Path) -> Any:
    suffix = path.suffix.lower()
    if suffix not in JSON_SUFFIXES + YAML_SUFFIXES:
        raise ConfigError(
            f"Unsupported config file type '{path.name}': expected .json, .yaml or .yml"
        )
    try:
        with open(path, encoding="utf-8") as f:
            if suffix in JSON_SUFFIXES:
                return json.load(f)
            return yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Failed to open {path}: {e} (see {DOCS_URL}#usage)") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"Failed to decode JSON in {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to decode YAML in {path}: {e}") from e


def _section(path: Path, data: Mapping, name: str) -> list:
    value = data.get(name) or []
    if not isinstance(value, list):
        raise ConfigError(f"{path}: '{name}' must be a list")
    return value


def _check_keys(section_name: str, entry: Any, valid_keys: set[str]) -> Mapping:
    """Validates an entry is a mapping, warning on unknown keys."""
    if not isinstance(entry, Mapping):
        raise ConfigError(f"[{section_name}] entry must be a mapping, got {entry!r}")
    invalid_keys = set(entry.keys()) - valid_keys
    if invalid_keys:
        logger.warning(
            f"Unknown config keys in [{section_name}]: "
            f"{', '.join(sorted(map(str, invalid_keys)))}. Ignoring."
        )
    return entry


def _parse_repository(index: int, entry: Any) -> RepositorySpec:
    section_name = f"repositories.{index}"
    entry = _check_keys(section_name, entry, {"url", "directory"})
    url = entry.get("url")
    directory = entry.get("directory")
    if not url or not directory:
        raise ConfigError(f"[{section_name}] requires both 'url' and 'directory'")
    return RepositorySpec(
        url=str(url), directory=Path(os.path.expanduser(str(directory)))
    )


def _parse_application(index: int, entry: Any) -> AppInfo:
    section_name = f"applications.{index}"
    entry = _check_keys(
        section_name,
        entry,
        {
            "name",
            "command",
            "versionFlag",
            "recommendedVersion",
            "installInstructions",
        },
    )
    if not entry.get("name") or not entry.get("command"):
        raise ConfigError(f"[{section_name}] requires both 'name' and 'command'")

    instructions = entry.get("installInstructions") or {}
    if not isinstance(instructions, Mapping):
        raise ConfigError(f"[{section_name}].installInstructions must be a mapping")

    return AppInfo(
        name=str(entry["name"]),
        command=str(entry["command"]),
        version_flag=str(entry.get("versionFlag") or "--version"),
        recommended_version=str(entry.get("recommendedVersion") or ""),
        install_instructions={str(k): str(v) for k, v in instructions.items()},
    )


def find_config_file(
    explicit: Path | None = None,
    environ: Mapping[str, str] | None = None,
    home: Path | None = None,
) -> Path:
    """Locates the configuration file.

    Lookup order: an explicit path, then `CONFIG_FILE`, then `.config.yml`,
    `.config.yaml` and `.config.json` in the home directory.

    Args:
        explicit (Path | None): A path given on the command line.
        environ (Mapping[str, str] | None): Environment. Defaults to `os.environ`.
        home (Path | None): Home directory. Defaults to `Path.home()`.

    Returns:
        Path: The configuration file to load.

    Raises:
        ConfigError: If no configuration file can be found.
    """
    source = os.environ if environ is None else environ

    if explicit is None and source.get(ENV_CONFIG_FILE):
        explicit = Path(os.path.expanduser(source[ENV_CONFIG_FILE]))

    if explicit is not None:
        if not explicit.is_file():
            raise ConfigError(f"Config file not found: {explicit}")
        return explicit

    home = home or Path.home()
    for name in CONFIG_FILE_NAMES:
        candidate = home / name
        if candidate.is_file():
            return candidate

    raise ConfigError(
        f"No configuration file found in {home} "
        f"(looked for {', '.join(CONFIG_FILE_NAMES)}; see {DOCS_URL}#usage)"
    )
