"""Configuration loader with YAML parsing and environment variable substitution."""

import os
import re
from pathlib import Path

import yaml

from ..utils.security import validate_upstream_url
from .schema import AppConfig


def substitute_env_vars(text: str) -> str:
    """
    Replace ${VAR_NAME} patterns with environment variable values.

    Args:
        text: Text containing ${VAR_NAME} patterns

    Returns:
        Text with environment variables substituted

    Raises:
        ValueError: If a referenced environment variable is not found
    """

    def replacer(match: re.Match[str]) -> str:
        var_name = match.group(1)
        value = os.environ.get(var_name)
        if value is None:
            raise ValueError(f"Environment variable {var_name} not found")
        return value

    return re.sub(r"\$\{([^}]+)\}", replacer, text)


def load_config(path: Path) -> AppConfig:
    """
    Load configuration from YAML file with environment variable substitution.

    Args:
        path: Path to YAML configuration file

    Returns:
        Validated AppConfig instance

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If environment variables are missing or config is invalid
        ValidationError: If config doesn't match schema
    """
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    with path.open() as f:
        raw_yaml = f.read()

    yaml_with_env = substitute_env_vars(raw_yaml)

    config_dict = yaml.safe_load(yaml_with_env) or {}

    config = AppConfig.model_validate(config_dict)

    validate_config(config)

    return config


def validate_config(config: AppConfig) -> None:
    """
    Perform additional cross-field validation.

    Every upstream URL must be absolute http(s), since paths and query
    strings are appended to them at request time.

    Args:
        config: Configuration to validate

    Raises:
        ValueError: If an upstream URL is not usable
    """
    urls = {"sentry.api_base_url": config.sentry.api_base_url}
    if config.oauth is not None:
        urls["oauth.authorize_url"] = config.oauth.authorize_url
        urls["oauth.token_url"] = config.oauth.token_url
        urls["oauth.redirect_uri"] = config.oauth.redirect_uri

    for name, url in urls.items():
        if not validate_upstream_url(url):
            raise ValueError(f"{name} must be an absolute http(s) URL, got: {url}")
