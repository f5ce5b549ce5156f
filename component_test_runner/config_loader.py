"""Load harness configuration from YAML files."""

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from component_test_runner.errors import ConfigurationError
from component_test_runner.models.config import HarnessConfig

log = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = Path("components.yaml")


def load_config(path: Path) -> HarnessConfig:
    """Load and validate a harness configuration file.

    Args:
        path: Path to the YAML configuration file

    Returns:
        Parsed harness configuration

    Raises:
        ConfigurationError: If the file is missing, is not valid YAML, is
            empty or does not match the configuration schema

    """
    if not path.is_file():
        raise ConfigurationError(f"Configuration file not found: {path}")

    try:
        data = yaml.safe_load(path.read_text())
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        raise ConfigurationError(f"Empty configuration file: {path}")
    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration in {path} must be a mapping")

    try:
        config = HarnessConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration schema in {path}: {e}") from e

    log.debug("Loaded configuration from %s", path)
    return config


def resolve_config(path: Path | None) -> HarnessConfig:
    """Load the given configuration file, falling back to the defaults.

    Without an explicit path, ``components.yaml`` in the working directory is
    used when present, otherwise the built-in default project configuration.
    """
    if path is not None:
        return load_config(path)

    if DEFAULT_CONFIG_FILE.is_file():
        return load_config(DEFAULT_CONFIG_FILE)

    log.debug("No configuration file, using built-in defaults")
    return HarnessConfig()
