"""Configuration — defaults, optional YAML file, environment override.

A workspace may carry a ``.plastic-auto.yaml`` file::

    cm_binary: /opt/plasticscm5/client/cm
    max_iterations: 20
    strict_exit_codes: true

Command-line options take precedence over the file.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import yaml

from plastic_auto.errors import ConfigError

CONFIG_FILENAME = ".plastic-auto.yaml"
CM_BINARY_ENV = "PLASTIC_AUTO_CM"


@dataclass
class Config:
    """Runtime settings for talking to the ``cm`` client."""

    cm_binary: str = "cm"
    max_iterations: int | None = None  # None: converge without a bound
    strict_exit_codes: bool = False  # raise on non-zero `cm` exit codes


def load_config(path: str | Path | None = None, working_dir: str | Path | None = None) -> Config:
    """Load configuration from ``path`` or the workspace's config file.

    Args:
        path: Explicit YAML file. Must exist when given.
        working_dir: Workspace to search for ``.plastic-auto.yaml`` when no
                     explicit path is given. Defaults to the current directory.

    Raises:
        ConfigError: If the file cannot be parsed or holds invalid values.
    """
    if path is not None:
        config_path = Path(path)
        if not config_path.is_file():
            raise ConfigError(f"Config file not found: {config_path}")
    else:
        config_path = Path(working_dir or Path.cwd()) / CONFIG_FILENAME

    data: dict = {}
    if config_path.is_file():
        try:
            with open(config_path) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Cannot parse {config_path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"{config_path} must contain a mapping")

    config = Config(
        cm_binary=data.get("cm_binary", "cm"),
        max_iterations=data.get("max_iterations"),
        strict_exit_codes=data.get("strict_exit_codes", False),
    )

    env_binary = os.environ.get(CM_BINARY_ENV, "")
    if env_binary:
        config.cm_binary = env_binary

    _validate(config)
    return config


def _validate(config: Config) -> None:
    if not isinstance(config.cm_binary, str) or not config.cm_binary:
        raise ConfigError("cm_binary must be a non-empty string")
    if config.max_iterations is not None:
        if isinstance(config.max_iterations, bool) or not isinstance(config.max_iterations, int):
            raise ConfigError("max_iterations must be an integer")
        if config.max_iterations < 1:
            raise ConfigError("max_iterations must be at least 1")
    if not isinstance(config.strict_exit_codes, bool):
        raise ConfigError("strict_exit_codes must be true or false")
