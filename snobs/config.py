"""
Configuration loading for the relay.

The configuration is a TOML file:

    listen = ":8080"
    stash = "stash.example.com"
    user = "snobs"
    pass = "secret"
    intersect = ["developers"]

``SNOBS_STASH_USER`` and ``SNOBS_STASH_PASS`` (from the environment or a
``.env`` file) override ``user`` and ``pass``.
"""

import logging
import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from dotenv import load_dotenv

from snobs.errors import ConfigError

DEFAULT_CONFIG_PATH = "/etc/snobs/snobs.conf"

REQUIRED_KEYS = ("listen", "stash", "user", "pass")

ENV_OVERRIDES = {
    "user": "SNOBS_STASH_USER",
    "pass": "SNOBS_STASH_PASS",
}


@dataclass(frozen=True)
class Config:
    listen: str
    stash: str
    user: str
    password: str
    intersect: List[str] = field(default_factory=list)
    strict_groups: bool = False
    timeout: Optional[float] = None
    log_level: str = "INFO"

    @property
    def bind_address(self) -> Tuple[str, int]:
        """``listen`` split into host and port; an empty host binds every interface."""
        return parse_listen(self.listen)


def parse_listen(listen: str) -> Tuple[str, int]:
    host, sep, port = listen.rpartition(":")
    if not sep or not port.isdigit():
        raise ConfigError(f"listen must be host:port, got {listen!r}")

    host = host.strip("[]") or "0.0.0.0"
    return host, int(port)


def _get_string(data: Dict[str, Any], key: str) -> str:
    value = data.get(key)
    if value is None:
        raise ConfigError(f"missing required config key: {key}")
    if not isinstance(value, str):
        raise ConfigError(f"config key {key} must be a string")
    return value


def config_from_dict(data: Dict[str, Any]) -> Config:
    """
    Validate a parsed configuration table and build a Config.

    Raises:
        ConfigError: if a required key is missing or a value has the wrong type
    """
    values = {key: _get_string(data, key) for key in REQUIRED_KEYS}

    intersect = data.get("intersect", [])
    if not isinstance(intersect, list) or not all(isinstance(group, str) for group in intersect):
        raise ConfigError("config key intersect must be a list of group names")

    strict_groups = data.get("strict_groups", False)
    if not isinstance(strict_groups, bool):
        raise ConfigError("config key strict_groups must be a boolean")

    timeout = data.get("timeout")
    if timeout is not None and (isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0):
        raise ConfigError("config key timeout must be a positive number of seconds")

    log_level = data.get("log_level", "INFO")
    if not isinstance(log_level, str) or not isinstance(logging.getLevelName(log_level.upper()), int):
        raise ConfigError(f"config key log_level is not a logging level: {log_level!r}")

    config = Config(
        listen=values["listen"],
        stash=values["stash"],
        user=values["user"],
        password=values["pass"],
        intersect=list(intersect),
        strict_groups=strict_groups,
        timeout=float(timeout) if timeout is not None else None,
        log_level=log_level.upper(),
    )
    parse_listen(config.listen)
    return config


def load_config(config_path: str = DEFAULT_CONFIG_PATH) -> Config:
    """
    Load configuration by merging (in order of precedence):
      1. The TOML configuration file
      2. SNOBS_STASH_USER / SNOBS_STASH_PASS environment variables
    """
    load_dotenv()

    path = Path(config_path)
    with open(path, "rb") as f:
        data = tomllib.load(f)

    for key, env_name in ENV_OVERRIDES.items():
        env_value = os.getenv(env_name)
        if env_value:
            data[key] = env_value

    return config_from_dict(data)
