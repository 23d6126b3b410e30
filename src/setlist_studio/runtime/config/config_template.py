"""Configuration template substitution utilities."""

import os
import re
from pathlib import Path

import yaml
from loguru import logger
from pydantic_core import ValidationError

from src.setlist_studio.runtime.config.config_data import ConfigData
from src.setlist_studio.runtime.settings import HostingSettings

_PLACEHOLDER = re.compile(r"\$\{([^}]+)\}")


def substitute_env_vars(text: str) -> str:
    """
    Substitute environment variable placeholders in text.

    Supports formats:
    - ${VAR_NAME} - required variable (raises error if missing)
    - ${VAR_NAME:-default} - optional with default value
    - ${VAR_NAME:?error_message} - required with custom error message
    """
    def replacer(match):
        var_expr = match.group(1)

        if ":-" in var_expr:
            var_name, default = var_expr.split(":-", 1)
            return os.getenv(var_name, default)

        if ":?" in var_expr:
            var_name, error_msg = var_expr.split(":?", 1)
            value = os.getenv(var_name)
            if value is None:
                raise ValueError(f"Required environment variable {var_name}: {error_msg}")
            return value

        value = os.getenv(var_expr)
        if value is None:
            raise ValueError(f"Required environment variable {var_expr} not set")
        return value

    return _PLACEHOLDER.sub(replacer, text)


def apply_environment_overrides(env_name: str) -> list[str]:
    """Copy ``<ENV>_NAME`` variables to ``NAME`` for the active environment.

    Returns the names of the variables that were set.
    """
    prefix = f"{env_name.upper()}_"
    applied = []
    for var_name, var_value in list(os.environ.items()):
        if var_name.startswith(prefix) and len(var_name) > len(prefix):
            target = var_name[len(prefix):]
            os.environ[target] = var_value
            applied.append(target)
            logger.debug("Set environment variable {} from {}", target, var_name)
    return applied


def load_templated_yaml(file_path: Path, hosting: HostingSettings | None = None) -> ConfigData:
    """
    Load a YAML file with environment variable substitution.

    The hosting environment and container signal always come from
    ``hosting``, which reads the process environment and a ``.env`` file.

    Args:
        file_path: Path to the YAML file
        hosting: Hosting values; read from the environment when omitted

    Returns:
        Parsed configuration with environment variables substituted

    Raises:
        ValueError: If required environment variables are missing or the file is invalid
        FileNotFoundError: If the YAML file doesn't exist
    """
    with open(file_path) as f:
        content = f.read()

    hosting = hosting or HostingSettings()
    env_name = hosting.environment
    logger.info("Loading configuration for environment: {}", env_name)

    overrides = apply_environment_overrides(env_name)
    if overrides:
        logger.info("Applied environment-specific overrides: {}", overrides)

    substituted_content = substitute_env_vars(content)

    try:
        loaded = yaml.safe_load(substituted_content)
        if not loaded:
            raise ValueError("Failed to parse YAML")
    except yaml.YAMLError as e:
        raise ValueError(f"Error parsing YAML: {e}") from e

    data = loaded.get("config") or {}
    data["app"] = {
        **(data.get("app") or {}),
        "environment": hosting.environment,
        "container_signal": hosting.container_signal,
    }

    try:
        config = ConfigData(**data)
    except ValidationError as e:
        raise ValueError(f"Invalid configuration: {e}") from e

    enabled = config.authentication.enabled_providers()
    for name in config.authentication.providers:
        if name in enabled:
            logger.info("{} authentication configured", name.capitalize())
        else:
            logger.info("{} authentication skipped: credentials missing or placeholders", name.capitalize())

    return config
