"""Configuration and credential storage.

This module handles:
- Settings resolved once from command line options and environment
- Loading/saving the bridge address and application key
"""

import json
import os
from dataclasses import dataclass
from pathlib import Path

import click

from models.types import Credentials

# User configuration file location
USER_CONFIG_FILE = Path.home() / '.hue' / 'config.json'

DEFAULT_TIMEOUT = 5.0
# The bridge accepts pairing for 30 seconds after the link button is pressed
DEFAULT_PAIR_TIMEOUT = 30.0


@dataclass(frozen=True)
class Settings:
    """Options for one CLI invocation, passed to every command."""
    config_file: Path = USER_CONFIG_FILE
    bridge_ip: str | None = None
    use_https: bool = True
    timeout: float = DEFAULT_TIMEOUT
    pair_timeout: float = DEFAULT_PAIR_TIMEOUT


def load_credentials(path: Path) -> Credentials | None:
    """Load bridge address and application key from the config file.

    Returns:
        Credentials, or None if the file is missing or incomplete
    """
    try:
        if not path.exists():
            return None

        with open(path, 'r', encoding='utf-8') as f:
            config = json.load(f)

        return Credentials.from_dict(config)

    # ValueError covers JSONDecodeError and UnicodeDecodeError
    except (ValueError, OSError) as e:
        click.echo(f"Warning: Failed to load config from {path}: {e}", err=True)
        return None


def save_credentials(credentials: Credentials, path: Path) -> bool:
    """Save bridge address and application key to the config file.

    Creates the config directory if it doesn't exist and sets secure
    file permissions (600 - user read/write only). Unrelated keys
    already in the file are kept.

    Returns:
        True if saved successfully, False otherwise
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)

        config = {}
        if path.exists():
            try:
                with open(path, 'r', encoding='utf-8') as f:
                    existing = json.load(f)
                if isinstance(existing, dict):
                    config = existing
            except (ValueError, OSError):
                # Corrupt file, start fresh
                pass

        config.update(credentials.to_dict())

        with open(path, 'w', encoding='utf-8') as f:
            json.dump(config, f, indent=2)

        os.chmod(path, 0o600)
        return True

    except OSError as e:
        click.echo(f"Error: Failed to save config to {path}: {e}", err=True)
        return False
