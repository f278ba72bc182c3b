"""Settings resolution for Connect views command line tools."""

import logging
import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_PATH = "~/.config/connect-views/config.toml"

ENV_URL = "CONNECT_URL"
ENV_VERIFY = "CONNECT_VERIFY"
ENV_USER = "CONNECT_USER"
ENV_PASSWORD = "CONNECT_PASSWORD"


@dataclass
class ConnectSettings:
    """Resolved connection settings.

    Args:
        url: Base URL of the Connect server
        verify: TLS verification flag or CA bundle path, handed to requests
        username: Optional user for HTTP basic auth
        password: Optional password for HTTP basic auth
    """

    url: str
    verify: bool | str = True
    username: str | None = None
    password: str | None = None

    @property
    def auth(self) -> tuple[str, str] | None:
        if self.username and self.password is not None:
            return (self.username, self.password)
        return None


def load_config_file(config_path: str | Path = CONFIG_PATH) -> dict[str, Any]:
    """Load the TOML config file, or return {} if it does not exist."""
    path = Path(config_path).expanduser()
    if not path.exists():
        logger.debug(f"Config file {path} not found")
        return {}
    with open(path, "rb") as f:
        config = tomllib.load(f)
    logger.debug(f"Loaded config from {path}")
    return config


def parse_verify(value: Any) -> bool | str:
    """Interpret a verify setting: booleans pass through, "false"/"0"/"no"
    disable verification, any other string is a CA bundle path."""
    if isinstance(value, bool):
        return value
    text = str(value).strip()
    if text.lower() in ("false", "0", "no", "off"):
        return False
    if text.lower() in ("true", "1", "yes", "on", ""):
        return True
    return os.path.expanduser(text)


def resolve_settings(args, config_path: str | Path = CONFIG_PATH) -> ConnectSettings:
    """Resolve settings from command line args, environment and config file.

    Resolution order for each value:
    1. command line option
    2. environment variable
    3. config file
    4. default
    """
    config = load_config_file(config_path)

    def pick(option: str, env: str, key: str):
        value = getattr(args, option, None)
        if value is not None:
            return value
        value = os.environ.get(env)
        if value:
            return value
        return config.get(key)

    url = pick("url", ENV_URL, "url")
    if not url:
        raise ConfigError(
            f"No server URL: use --url, set ${ENV_URL} or add 'url' to {config_path}"
        )

    verify = pick("verify", ENV_VERIFY, "verify")
    return ConnectSettings(
        url=url,
        verify=True if verify is None else parse_verify(verify),
        username=pick("username", ENV_USER, "username"),
        password=pick("password", ENV_PASSWORD, "password"),
    )
