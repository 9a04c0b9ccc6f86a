"""Configuration loading and validation."""

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Optional, Union

import yaml
from dotenv import load_dotenv
from pydantic import ValidationError

from concierge.config.schema import ConciergeConfig


DEFAULT_CONFIG_PATH = Path.home() / ".concierge" / "concierge.yaml"


class ConfigError(Exception):
    """Configuration loading or validation error."""


def load_config(path: Optional[Path] = None, use_env: bool = True) -> ConciergeConfig:
    """Load and validate Concierge configuration from YAML file.

    Args:
        path: Path to config file. If None, tries default location.
              If file doesn't exist, returns default config.
        use_env: Apply environment variable overrides (and ``.env``)

    Returns:
        Validated configuration object

    Raises:
        ConfigError: If config file exists but is invalid
    """
    if path is None:
        path = DEFAULT_CONFIG_PATH

    config = _load_file(path)

    if use_env:
        load_dotenv()
        try:
            config = apply_env_overrides(config, os.environ)
        except ValidationError as e:
            raise ConfigError(f"Invalid environment override: {e}") from e

    return config


def _load_file(path: Path) -> ConciergeConfig:
    # Zero-config mode: if file doesn't exist, use all defaults
    if not path.exists():
        return ConciergeConfig()

    try:
        with open(path, "r") as f:
            config_data = yaml.safe_load(f)

        # Handle empty file
        if config_data is None:
            return ConciergeConfig()

        return ConciergeConfig(**config_data)

    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"Configuration validation failed: {e}") from e
    except Exception as e:
        raise ConfigError(f"Failed to load config from {path}: {e}") from e


def apply_env_overrides(config: ConciergeConfig, env: Mapping[str, str]) -> ConciergeConfig:
    """Overlay the documented environment variables onto a config.

    Args:
        config: Base configuration
        env: Environment mapping

    Returns:
        A new validated configuration with overrides applied
    """
    data = config.model_dump()

    if env.get("OPENAI_API_KEY"):
        data["llm"]["api_key"] = env["OPENAI_API_KEY"]
    if env.get("OPENAI_BASE_URL"):
        data["llm"]["base_url"] = env["OPENAI_BASE_URL"]
        data["llm"]["backend"] = "openai-compatible"
    if env.get("LLM_MODEL"):
        data["model"]["name"] = env["LLM_MODEL"]

    tone = env.get("AGENT_TONE") or env.get("AGENT_STYLE")
    if tone:
        data["agent"]["tone"] = tone

    if env.get("CUSTOMER_API_HOST"):
        data["customer_api"]["host"] = env["CUSTOMER_API_HOST"]
    if env.get("CUSTOMER_API_TOKEN"):
        data["customer_api"]["token"] = env["CUSTOMER_API_TOKEN"]

    if env.get("CHATBOT_PORT"):
        data["server"]["port"] = env["CHATBOT_PORT"]
    if env.get("LOG_LEVEL"):
        data["logging"]["level"] = env["LOG_LEVEL"].upper()

    return ConciergeConfig.model_validate(data)


def save_config(config: ConciergeConfig, path: Optional[Union[str, Path]] = None) -> None:
    """Save configuration to YAML file.

    Args:
        config: Configuration object to save
        path: Destination path (string or Path object). If None, uses default location.
    """
    if path is None:
        path = DEFAULT_CONFIG_PATH
    elif isinstance(path, str):
        path = Path(path)

    # Ensure directory exists
    path.parent.mkdir(parents=True, exist_ok=True)

    config_dict = config.model_dump()

    with open(path, "w") as f:
        yaml.safe_dump(config_dict, f, default_flow_style=False, sort_keys=False)
