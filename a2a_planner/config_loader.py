"""
Configuration loader for a2a-planner.

Loads configuration from YAML files with support for
environment variable interpolation.
"""

import logging
import os
import re
from pathlib import Path
from typing import Any, Optional

import yaml
from dotenv import load_dotenv

from .models import (
    A2AConfig,
    InferenceConfig,
    OrchestrationConfig,
    LoggingConfig,
    AppConfig,
)

logger = logging.getLogger(__name__)

# Default config path relative to project root
DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / "config" / "config.yaml"

# Regex for environment variable interpolation: ${VAR} or ${VAR:-default}
ENV_VAR_PATTERN = re.compile(r"\$\{([^}:]+)(?::-([^}]*))?\}")

# Singleton cache for app config
_app_config: Optional[AppConfig] = None


def resolve_env_vars(value: str) -> str:
    """
    Resolve environment variable references in a string.

    Supports ${VAR} and ${VAR:-default} syntax.

    Args:
        value: String potentially containing env var references

    Returns:
        String with env vars resolved
    """

    def replace_match(match: re.Match) -> str:
        var_name = match.group(1)
        default_value = match.group(2) if match.group(2) is not None else ""
        return os.environ.get(var_name, default_value)

    return ENV_VAR_PATTERN.sub(replace_match, value)


def _substitute_env_vars_recursive(data: Any) -> Any:
    """
    Recursively substitute environment variables in a data structure.

    Args:
        data: Any data structure (dict, list, str, etc.)

    Returns:
        Data structure with env vars resolved
    """
    if isinstance(data, dict):
        return {k: _substitute_env_vars_recursive(v) for k, v in data.items()}
    elif isinstance(data, list):
        return [_substitute_env_vars_recursive(item) for item in data]
    elif isinstance(data, str):
        return resolve_env_vars(data)
    return data


def _parse_a2a_config(data: dict) -> A2AConfig:
    """Parse A2A connection configuration from dict."""
    defaults = A2AConfig()
    return A2AConfig(
        base_url=data.get("base_url") or defaults.base_url,
        endpoint_path=data.get("endpoint_path", defaults.endpoint_path),
        timeout=float(data.get("timeout", defaults.timeout)),
        card_timeout=float(data.get("card_timeout", defaults.card_timeout)),
    )


def _parse_inference_config(data: dict) -> InferenceConfig:
    """Parse inference model configuration from dict."""
    defaults = InferenceConfig()
    return InferenceConfig(
        base_url=data.get("base_url") or defaults.base_url,
        model=data.get("model") or defaults.model,
        api_key=data.get("api_key") or defaults.api_key,
        temperature=float(data.get("temperature", defaults.temperature)),
        max_tokens=int(data.get("max_tokens", defaults.max_tokens)),
        timeout=float(data.get("timeout", defaults.timeout)),
    )


def _parse_orchestration_config(data: dict) -> OrchestrationConfig:
    """Parse orchestration loop configuration from dict."""
    config = OrchestrationConfig(
        max_turns=int(data.get("max_turns", 25)),
        max_tool_calls_per_turn=int(data.get("max_tool_calls_per_turn", 10)),
        agent_name=data.get("agent_name", "Planner"),
    )
    if config.max_turns <= 0 or config.max_tool_calls_per_turn <= 0:
        raise ValueError("orchestration limits must be positive")
    return config


def _parse_logging_config(data: dict) -> LoggingConfig:
    """Parse logging configuration from dict."""
    return LoggingConfig(
        level=str(data.get("level", "INFO")).upper(),
    )


def _parse_operations(data: Any) -> list[dict]:
    """Parse the operation catalog entries."""
    if data is None:
        return []
    if not isinstance(data, list):
        raise ValueError("'operations' must be a list of entries")
    for entry in data:
        if not isinstance(entry, dict) or "operation" not in entry:
            raise ValueError(f"Invalid operation entry: {entry!r}")
    return data


def load_app_config(path: Optional[str] = None, reload: bool = False) -> AppConfig:
    """
    Load unified application configuration from a YAML file.

    Uses a singleton pattern - subsequent calls return the cached config
    unless reload=True is specified.

    Args:
        path: Path to the YAML configuration file. If None, uses
              CONFIG_PATH env var or the default path (config/config.yaml).
        reload: If True, force reload from disk instead of using cache.

    Returns:
        AppConfig with all configuration loaded

    Raises:
        FileNotFoundError: If an explicitly requested config file doesn't exist
        ValueError: If the config is invalid
    """
    global _app_config

    # Return cached config if available and not reloading
    if _app_config is not None and not reload:
        return _app_config

    load_dotenv()

    # Determine config path
    explicit = path is not None or "CONFIG_PATH" in os.environ
    if path is None:
        path = os.environ.get("CONFIG_PATH", str(DEFAULT_CONFIG_PATH))

    config_path = Path(path)

    if not config_path.exists():
        if explicit:
            raise FileNotFoundError(
                f"Configuration file not found at {config_path}. "
                f"Create one from config/config.yaml or set CONFIG_PATH env var."
            )
        logger.warning(f"Config not found at {config_path}, using defaults")
        _app_config = AppConfig()
        return _app_config

    logger.info(f"Loading configuration from {config_path}")

    with open(config_path, "r") as f:
        raw_config = yaml.safe_load(f)

    if raw_config is None:
        raise ValueError(f"Configuration file {config_path} is empty")

    # Substitute environment variables throughout the config
    raw_config = _substitute_env_vars_recursive(raw_config)

    app_config = AppConfig(
        version=str(raw_config.get("version", "1.0")),
        a2a=_parse_a2a_config(raw_config.get("a2a") or {}),
        inference=_parse_inference_config(raw_config.get("inference") or {}),
        orchestration=_parse_orchestration_config(
            raw_config.get("orchestration") or {}
        ),
        logging=_parse_logging_config(raw_config.get("logging") or {}),
        operations=_parse_operations(raw_config.get("operations")),
    )

    # Cache the config
    _app_config = app_config

    logger.debug(
        f"Configuration loaded: version={app_config.version}, "
        f"operations={len(app_config.operations)}"
    )

    return app_config


def reset_config_cache() -> None:
    """Reset the configuration cache, forcing a reload on next access."""
    global _app_config
    _app_config = None
    logger.debug("Configuration cache reset")
