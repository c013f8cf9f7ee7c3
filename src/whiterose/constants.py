"""Global constants for Whiterose.

This module defines application identifiers, the branch policy applied after
a clone, the environment variables consulted for credentials, and the
configuration file names searched in the user's home directory.
"""

# --- Identity ---
APP_NAME = "whiterose"
"""str: The human-readable application name."""

DOCS_URL = "https://github.com/fabianoflorentino/whiterose/blob/main/README.md"
"""str: Usage documentation referenced in configuration error messages."""

# --- Branch Policy ---
DEFAULT_BRANCH = "development"
"""str: The team integration branch checked out after a clone."""

DEFAULT_REMOTE = "origin"
"""str: The remote name git assigns to the clone source."""

# --- URL Schemes ---
HTTPS_PREFIXES = ("https://",)
"""tuple[str, ...]: URL prefixes authenticated with username and token."""

SSH_PREFIXES = ("git@", "ssh://")
"""tuple[str, ...]: URL prefixes authenticated with an SSH private key."""

# --- Environment ---
ENV_GIT_USER = "GIT_USER"
ENV_GIT_TOKEN = "GIT_TOKEN"
ENV_SSH_KEY_PATH = "SSH_KEY_PATH"
ENV_SSH_KEY_NAME = "SSH_KEY_NAME"
ENV_CONFIG_FILE = "CONFIG_FILE"

DEFAULT_SSH_KEY_NAME = "id_rsa"
"""str: Private key file name used when SSH_KEY_NAME is unset."""

DOTENV_FILE = ".env"
"""str: File name of the dotenv file loaded from the working and home dirs."""

# --- Configuration Paths ---
CONFIG_FILE_NAMES = (".config.yml", ".config.yaml", ".config.json")
"""tuple[str, ...]: Home directory config files, in lookup order."""

JSON_SUFFIXES = (".json",)
YAML_SUFFIXES = (".yaml", ".yml")
